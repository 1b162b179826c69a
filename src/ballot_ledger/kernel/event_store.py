"""
SQLite Event Store - Append-only event log

The event store persists every accepted ballot operation. It provides:
- Append-only semantics (events never modified or deleted)
- Optimistic locking via stream versioning
- Deterministic replay in append order
"""

import json
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator

from ballot_ledger.kernel.errors import (
    CommandIdempotencyViolation,
    EventStoreError,
    StreamVersionConflict,
)
from ballot_ledger.kernel.events import Event
from ballot_ledger.kernel.logging import get_logger
from ballot_ledger.kernel.metrics import events_appended_total, events_loaded_total
from ballot_ledger.kernel.retry import retry_on_sqlite_lock

logger = get_logger(__name__)

_EVENT_COLUMNS = """
    event_id, stream_id, stream_type, version,
    command_id, event_type, occurred_at, actor_id, payload_json
"""


class SQLiteEventStore:
    """
    SQLite-based event store with append-only semantics

    Uses WAL (Write-Ahead Logging) mode for crash safety and concurrent reads.

    Schema:
    - events table: append-only event log
    - position: global append order, used for replay
    - Unique constraint: (stream_id, version)
    - Indices: stream_id, event_type, actor_id
    """

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)
        self._initialize_schema()

    def _initialize_schema(self) -> None:
        """Create tables and indices if they don't exist"""
        with self._connect() as conn:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA synchronous=NORMAL")

            conn.execute("""
                CREATE TABLE IF NOT EXISTS events (
                    position INTEGER PRIMARY KEY AUTOINCREMENT,
                    event_id TEXT NOT NULL UNIQUE,
                    stream_id TEXT NOT NULL,
                    stream_type TEXT NOT NULL,
                    version INTEGER NOT NULL,
                    command_id TEXT NOT NULL,
                    event_type TEXT NOT NULL,
                    occurred_at TEXT NOT NULL,
                    actor_id TEXT,
                    payload_json TEXT NOT NULL,

                    UNIQUE(stream_id, version)
                )
            """)

            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_events_stream "
                "ON events(stream_id, version)"
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_events_type ON events(event_type)"
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_events_actor ON events(actor_id)"
            )

            conn.commit()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Context manager for database connections"""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    @retry_on_sqlite_lock()
    def append(
        self,
        stream_id: str,
        expected_version: int,
        events: list[Event],
    ) -> list[Event]:
        """
        Append events to a stream with optimistic locking

        Args:
            stream_id: Ballot identifier
            expected_version: Expected current stream version
            events: Events to append (must have sequential versions)

        Returns:
            The appended events

        Raises:
            StreamVersionConflict: If stream version doesn't match expected
            EventStoreError: On other database errors
        """
        if not events:
            return []

        first_command_id = events[0].command_id
        with self._connect() as conn:
            try:
                current_version = self._get_stream_version(conn, stream_id)
                if current_version != expected_version:
                    raise StreamVersionConflict(stream_id, expected_version, current_version)

                for event in events:
                    conn.execute(
                        f"INSERT INTO events ({_EVENT_COLUMNS}) "
                        "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                        (
                            event.event_id,
                            event.stream_id,
                            event.stream_type,
                            event.version,
                            event.command_id,
                            event.event_type,
                            event.occurred_at.isoformat(),
                            event.actor_id,
                            json.dumps(event.payload),
                        ),
                    )

                conn.commit()

            except sqlite3.IntegrityError as e:
                conn.rollback()
                error_msg = str(e).lower()

                if "stream_id" in error_msg and "version" in error_msg:
                    current = self._get_stream_version(conn, stream_id)
                    raise StreamVersionConflict(stream_id, expected_version, current) from e

                if "event_id" in error_msg:
                    raise CommandIdempotencyViolation(
                        first_command_id, f"Duplicate event id in command {first_command_id}"
                    ) from e

                raise EventStoreError(f"Failed to append events: {e}") from e

            except sqlite3.OperationalError:
                conn.rollback()
                raise

        for event in events:
            events_appended_total.labels(
                stream_type=event.stream_type, event_type=event.event_type
            ).inc()

        logger.debug(
            "Events appended",
            stream_id=stream_id,
            count=len(events),
            version=events[-1].version,
        )
        return events

    def load_all_events(self) -> list[Event]:
        """Load every event in append order (for projection rebuilding)"""
        with self._connect() as conn:
            cursor = conn.execute(
                f"SELECT {_EVENT_COLUMNS} FROM events ORDER BY position ASC"
            )
            events = [self._row_to_event(row) for row in cursor.fetchall()]

        for event in events:
            events_loaded_total.labels(stream_type=event.stream_type).inc()
        return events

    def query_events(
        self,
        *,
        stream_id: str | None = None,
        event_type: str | None = None,
        actor_id: str | None = None,
        limit: int | None = None,
    ) -> list[Event]:
        """
        Query events by stream, event type or actor, in append order

        Args:
            stream_id: Only events of this ballot
            event_type: Only events of this type ('VoteCast', ...)
            actor_id: Only events submitted by this identity
            limit: Keep only the most recent `limit` matches (still returned
                oldest first)
        """
        conditions = []
        params: list[str | int] = []

        if stream_id:
            conditions.append("stream_id = ?")
            params.append(stream_id)

        if event_type:
            conditions.append("event_type = ?")
            params.append(event_type)

        if actor_id:
            conditions.append("actor_id = ?")
            params.append(actor_id)

        where_clause = " AND ".join(conditions) if conditions else "1=1"
        query = f"SELECT {_EVENT_COLUMNS} FROM events WHERE {where_clause} ORDER BY position DESC"
        if limit:
            query += " LIMIT ?"
            params.append(limit)

        with self._connect() as conn:
            cursor = conn.execute(query, params)
            events = [self._row_to_event(row) for row in cursor.fetchall()]

        events.reverse()
        return events

    def _get_stream_version(self, conn: sqlite3.Connection, stream_id: str) -> int:
        cursor = conn.execute(
            "SELECT MAX(version) FROM events WHERE stream_id = ?",
            (stream_id,),
        )
        row = cursor.fetchone()
        return row[0] if row[0] is not None else 0

    def _row_to_event(self, row: sqlite3.Row) -> Event:
        return Event(
            event_id=row["event_id"],
            stream_id=row["stream_id"],
            stream_type=row["stream_type"],
            version=row["version"],
            command_id=row["command_id"],
            event_type=row["event_type"],
            occurred_at=datetime.fromisoformat(row["occurred_at"]),
            actor_id=row["actor_id"],
            payload=json.loads(row["payload_json"]),
        )

    def count_events(self) -> int:
        """Total number of events in store"""
        with self._connect() as conn:
            return conn.execute("SELECT COUNT(*) FROM events").fetchone()[0]

    def count_streams(self) -> int:
        """Total number of distinct streams"""
        with self._connect() as conn:
            return conn.execute("SELECT COUNT(DISTINCT stream_id) FROM events").fetchone()[0]
