"""
Kernel - Event sourcing infrastructure shared by the election module

Errors, the event envelope, ids, injectable time, logging, metrics,
retry policy and the SQLite event store.
"""

from ballot_ledger.kernel.errors import (
    AlreadyHasRights,
    AlreadyVoted,
    BallotError,
    BallotNotFound,
    BallotRuleViolation,
    CommandIdempotencyViolation,
    CycleDetected,
    EmptyProposalList,
    EventStoreError,
    InvalidCommand,
    InvalidProposal,
    NoRightToVote,
    ProposalNameTooLong,
    StreamVersionConflict,
    Unauthorized,
)
from ballot_ledger.kernel.events import Event
from ballot_ledger.kernel.ids import generate_id
from ballot_ledger.kernel.time import RealTimeProvider, TestTimeProvider, TimeProvider

__all__ = [
    "generate_id",
    "TimeProvider",
    "RealTimeProvider",
    "TestTimeProvider",
    "Event",
    # Errors
    "BallotError",
    "BallotNotFound",
    "BallotRuleViolation",
    "Unauthorized",
    "AlreadyVoted",
    "AlreadyHasRights",
    "NoRightToVote",
    "InvalidCommand",
    "InvalidProposal",
    "CycleDetected",
    "EmptyProposalList",
    "ProposalNameTooLong",
    "EventStoreError",
    "CommandIdempotencyViolation",
    "StreamVersionConflict",
]
