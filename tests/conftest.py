"""
Pytest configuration and shared fixtures
"""

import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

import pytest

from ballot_ledger.election.handlers import BallotCommandHandlers
from ballot_ledger.kernel.event_store import SQLiteEventStore
from ballot_ledger.kernel.logging import configure_logging
from ballot_ledger.kernel.time import TestTimeProvider
from ballot_ledger.ledger import BallotLedger
from tests.helpers import CHAIRPERSON, PROPOSALS


@pytest.fixture(autouse=True)
def fresh_logging() -> None:
    """Point logging at the current test's stderr"""
    configure_logging(json_output=False, log_level="DEBUG")


@pytest.fixture
def temp_db() -> Iterator[Path]:
    """Provide a temporary database file that's cleaned up after test"""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    yield db_path

    for suffix in ("", "-wal", "-shm"):
        path = Path(f"{db_path}{suffix}")
        if path.exists():
            path.unlink()


@pytest.fixture
def event_store(temp_db: Path) -> SQLiteEventStore:
    """Provide a fresh event store for each test"""
    return SQLiteEventStore(temp_db)


@pytest.fixture
def test_time() -> TestTimeProvider:
    """Controllable clock fixed at 2025-01-15 12:00 UTC"""
    return TestTimeProvider(datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def ballot_handlers(test_time: TestTimeProvider) -> BallotCommandHandlers:
    return BallotCommandHandlers(test_time)


@pytest.fixture
def ledger(temp_db: Path, test_time: TestTimeProvider) -> BallotLedger:
    """Ledger over a fresh database"""
    return BallotLedger(temp_db, time_provider=test_time)


@pytest.fixture
def ballot_id(ledger: BallotLedger) -> str:
    """A ballot with proposals P1, P2, P3 chaired by CHAIRPERSON"""
    return ledger.create_ballot(CHAIRPERSON, PROPOSALS)
