"""
Base Event model for event sourcing

Events are immutable facts about what happened to a ballot. The ordered
event stream of a ballot is its source of truth: replaying it rebuilds
the tally exactly.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class Event(BaseModel):
    """
    Base event class - every ballot event is stored in this envelope

    Events are:
    - Immutable (never modified after creation)
    - Append-only (never deleted)
    - Versioned per stream (stream_id + version gives optimistic locking)
    - Replayable (deterministic state reconstruction)

    The command_id ensures idempotency.
    """

    event_id: str = Field(
        ...,
        description="Unique event identifier (time-ordered)",
    )

    stream_id: str = Field(
        ...,
        description="Ballot identifier - groups the events of one election",
    )

    stream_type: str = Field(
        ...,
        description="Type of aggregate, 'ballot' for election streams",
    )

    event_type: str = Field(
        ...,
        description="Specific event type: 'BallotCreated', 'VoteCast', etc.",
    )

    occurred_at: datetime = Field(
        ...,
        description="UTC timestamp when event occurred",
    )

    actor_id: str | None = Field(
        default=None,
        description="Identity of the caller who triggered this event",
    )

    command_id: str = Field(
        ...,
        description="ID of command that caused this event (idempotency key)",
    )

    payload: dict = Field(
        default_factory=dict,
        description="Event-specific data (must be JSON-serializable)",
    )

    version: int = Field(
        ...,
        description="Stream version after this event (monotonically increasing)",
        ge=1,
    )

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "event_id": "01908e9a-3b87-7000-8000-123456789abc",
                    "stream_id": "01908e9a-3b80-7000-8000-0000000000aa",
                    "stream_type": "ballot",
                    "event_type": "VoteCast",
                    "occurred_at": "2025-01-15T10:30:00Z",
                    "actor_id": "0x70997970C51812dc3A010C7d01b50e0d17dc79C8",
                    "command_id": "cmd-123",
                    "payload": {"voter": "0x7099...79C8", "proposal": 2, "weight": 1},
                    "version": 3,
                }
            ]
        },
    }


def create_event(
    *,
    event_id: str,
    stream_id: str,
    stream_type: str,
    event_type: str,
    occurred_at: datetime,
    command_id: str,
    version: int,
    actor_id: str | None = None,
    payload: dict | None = None,
) -> Event:
    """Factory function for creating events with all required fields"""
    return Event(
        event_id=event_id,
        stream_id=stream_id,
        stream_type=stream_type,
        event_type=event_type,
        occurred_at=occurred_at,
        actor_id=actor_id,
        command_id=command_id,
        payload=payload or {},
        version=version,
    )
