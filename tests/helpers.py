"""
Test Helper Functions - Builders for ballots and events

Keep tests focused on the rule under test instead of on setup.
"""

from datetime import datetime, timezone

from ballot_ledger.election.commands import CreateBallot
from ballot_ledger.election.handlers import BallotCommandHandlers
from ballot_ledger.election.projections import BallotState
from ballot_ledger.kernel.events import Event
from ballot_ledger.kernel.ids import generate_id
from ballot_ledger.ledger import BallotLedger

CHAIRPERSON = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
PROPOSALS = ["P1", "P2", "P3"]


def voter_addresses(count: int) -> list[str]:
    """Distinct, address-like voter identities"""
    return [f"0x{index:040x}" for index in range(1, count + 1)]


def build_ballot(
    handlers: BallotCommandHandlers,
    chairperson: str = "chair",
    proposal_names: list[str] | None = None,
) -> BallotState:
    """
    Create a BallotState through the real create handler

    Returns:
        Ballot state at version 1 with zero votes
    """
    command = CreateBallot(
        chairperson=chairperson,
        proposal_names=proposal_names or ["P1", "P2", "P3"],
    )
    events = handlers.handle_create_ballot(command, generate_id(), chairperson)
    return BallotState.from_created_event(events[0])


def apply_all(ballot: BallotState, events: list[Event]) -> BallotState:
    """Apply handler output to a ballot, as the ledger does after appending"""
    for event in events:
        ballot.apply_event(event)
    return ballot


def make_event(
    stream_id: str,
    event_type: str,
    payload: dict,
    version: int,
    actor_id: str | None = None,
) -> Event:
    """Hand-built event for projection and store tests"""
    return Event(
        event_id=generate_id(),
        stream_id=stream_id,
        stream_type="ballot",
        event_type=event_type,
        occurred_at=datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc),
        actor_id=actor_id,
        command_id=generate_id(),
        payload=payload,
        version=version,
    )


def grant_all(ledger: BallotLedger, ballot_id: str, chairperson: str, voters: list[str]) -> None:
    """Give every listed voter the right to vote"""
    for voter in voters:
        ledger.give_right_to_vote(ballot_id, chairperson, voter)
