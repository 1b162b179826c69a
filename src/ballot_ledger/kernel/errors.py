"""
Custom exceptions for Ballot Ledger

Every rejected operation raises one of these. A rejection never leaves a
ballot partially mutated: handlers raise before any event is emitted.
"""


class BallotError(Exception):
    """Base exception for all Ballot Ledger errors"""

    pass


class EventStoreError(BallotError):
    """Base class for event store errors"""

    pass


class CommandIdempotencyViolation(EventStoreError):
    """
    Raised when attempting to execute a command with duplicate command_id

    The command was already processed, so the original events stand.
    """

    def __init__(self, command_id: str, message: str = "") -> None:
        self.command_id = command_id
        super().__init__(message or f"Command {command_id} already processed")


class StreamVersionConflict(EventStoreError):
    """
    Raised when stream version doesn't match expected (optimistic locking)

    Another writer appended to the ballot first - reload and retry.
    """

    def __init__(
        self, stream_id: str, expected_version: int, actual_version: int
    ) -> None:
        self.stream_id = stream_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Stream {stream_id} version mismatch: "
            f"expected {expected_version}, got {actual_version}"
        )


class BallotNotFound(BallotError):
    """Raised when ballot does not exist"""

    def __init__(self, ballot_id: str) -> None:
        self.ballot_id = ballot_id
        super().__init__(f"Ballot {ballot_id} not found")


# Election rule violations


class BallotRuleViolation(BallotError):
    """
    Raised when an operation breaks a rule of the election

    Examples: voting twice, granting rights without being chairperson,
    delegating in a loop.
    """

    pass


class Unauthorized(BallotRuleViolation):
    """Raised when caller lacks the privilege the operation requires"""

    def __init__(self, caller: str, action: str) -> None:
        self.caller = caller
        self.action = action
        super().__init__(f"Only chairperson can {action} (caller: {caller})")


class AlreadyVoted(BallotRuleViolation):
    """Raised when voter has already voted or delegated"""

    def __init__(self, voter: str) -> None:
        self.voter = voter
        super().__init__(f"The voter already voted: {voter}")


class AlreadyHasRights(BallotRuleViolation):
    """Raised when rights are granted to a voter with non-zero weight"""

    def __init__(self, voter: str) -> None:
        self.voter = voter
        super().__init__(f"Voter {voter} already has the right to vote")


class NoRightToVote(BallotRuleViolation):
    """Raised when a zero-weight voter tries to vote"""

    def __init__(self, voter: str) -> None:
        self.voter = voter
        super().__init__(f"Voter {voter} has no right to vote")


class InvalidProposal(BallotRuleViolation):
    """Raised when proposal index is out of range"""

    def __init__(self, index: int, proposal_count: int) -> None:
        self.index = index
        self.proposal_count = proposal_count
        super().__init__(
            f"Proposal index {index} out of range - ballot has "
            f"{proposal_count} proposals"
        )


class CycleDetected(BallotRuleViolation):
    """Raised when a delegation chain would loop back to the delegator"""

    def __init__(self, from_voter: str, to_voter: str) -> None:
        self.from_voter = from_voter
        self.to_voter = to_voter
        super().__init__(
            f"Delegation from {from_voter} to {to_voter} loops back to the delegator"
        )


class EmptyProposalList(BallotRuleViolation):
    """Raised when a ballot is created with no proposals"""

    def __init__(self) -> None:
        super().__init__("Missing proposals - a ballot needs at least one")


class ProposalNameTooLong(BallotRuleViolation):
    """Raised when a proposal name exceeds the fixed name slot"""

    def __init__(self, name: str, max_length: int) -> None:
        self.name = name
        self.max_length = max_length
        super().__init__(
            f"Proposal name {name!r} is longer than {max_length} bytes"
        )


class InvalidCommand(BallotRuleViolation):
    """Raised when command arguments fail shape validation (empty identity, non-integer index)"""

    def __init__(self, command_type: str, detail: str) -> None:
        self.command_type = command_type
        self.detail = detail
        super().__init__(f"Invalid {command_type}: {detail}")
