"""
BallotLedger - Main façade class

The primary interface for running ballots. It hides event sourcing behind
plain method calls: each operation validates against the current ballot,
appends one event to the SQLite log and applies it to the in-memory state.

Example:
    >>> from ballot_ledger import BallotLedger
    >>> ledger = BallotLedger("ballots.db")
    >>> ballot_id = ledger.create_ballot("alice", ["P1", "P2", "P3"])
    >>> ledger.give_right_to_vote(ballot_id, "alice", "bob")
    >>> ledger.delegate(ballot_id, "bob", "alice")
    >>> ledger.vote(ballot_id, "alice", 2)
    >>> ledger.winner_name(ballot_id)
    'P3'
"""

from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from ballot_ledger.election.commands import CastVote, CreateBallot, DelegateVote, GiveRightToVote
from ballot_ledger.election.handlers import BallotCommandHandlers
from ballot_ledger.election.models import DEFAULT_MAX_NAME_LENGTH, BallotSummary, Proposal, Voter
from ballot_ledger.election.projections import BallotRegistry, BallotState
from ballot_ledger.kernel.errors import BallotNotFound, InvalidCommand
from ballot_ledger.kernel.event_store import SQLiteEventStore
from ballot_ledger.kernel.events import Event
from ballot_ledger.kernel.ids import generate_id
from ballot_ledger.kernel.logging import LogOperation, get_logger
from ballot_ledger.kernel.metrics import record_weight_tallied, track_command_duration
from ballot_ledger.kernel.time import RealTimeProvider, TimeProvider

logger = get_logger(__name__)

C = TypeVar("C", bound=BaseModel)


def build_command(command_type: type[C], **fields: Any) -> C:
    """
    Construct a command, reporting bad arguments as InvalidCommand

    Raises:
        InvalidCommand: If a field fails validation
    """
    try:
        return command_type(**fields)
    except ValidationError as e:
        detail = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        raise InvalidCommand(command_type.__name__, detail) from e


class BallotLedger:
    """
    Ballot Ledger main façade

    Provides a unified API for:
    - Deploying ballots
    - Granting voting rights
    - Delegating and casting votes
    - Querying the tally and the current winner
    """

    def __init__(
        self,
        sqlite_path: str | Path,
        time_provider: TimeProvider | None = None,
    ) -> None:
        """
        Initialize the ledger, replaying any events already stored

        Args:
            sqlite_path: Path to SQLite database
            time_provider: Time provider (uses real time if None)
        """
        self.sqlite_path = Path(sqlite_path)
        self.time_provider = time_provider or RealTimeProvider()

        self.event_store = SQLiteEventStore(self.sqlite_path)
        self.handlers = BallotCommandHandlers(self.time_provider)
        self.ballot_registry = BallotRegistry()

        self._rebuild_projections()

    def _rebuild_projections(self) -> None:
        """Rebuild all ballots from the event store"""
        with LogOperation(logger, "rebuild_projections", db=str(self.sqlite_path)):
            for event in self.event_store.load_all_events():
                self.ballot_registry.apply_event(event)

    def _commit(self, ballot: BallotState | None, events: list[Event]) -> None:
        """Append events to the ballot stream, then apply them"""
        for event in events:
            expected_version = ballot.version if ballot is not None else 0
            self.event_store.append(event.stream_id, expected_version, [event])
            self.ballot_registry.apply_event(event)
            ballot = self.ballot_registry.get(event.stream_id)

    def _require_ballot(self, ballot_id: str) -> BallotState:
        ballot = self.ballot_registry.get(ballot_id)
        if ballot is None:
            raise BallotNotFound(ballot_id)
        return ballot

    # Ballot lifecycle

    @track_command_duration("CreateBallot")
    def create_ballot(
        self,
        chairperson: str,
        proposal_names: list[str],
        max_name_length: int = DEFAULT_MAX_NAME_LENGTH,
    ) -> str:
        """
        Deploy a new ballot

        Args:
            chairperson: Identity allowed to grant rights; starts with weight 1
            proposal_names: Proposal names in index order
            max_name_length: Maximum name length in UTF-8 bytes

        Returns:
            The new ballot_id

        Raises:
            EmptyProposalList: If proposal_names is empty
            ProposalNameTooLong: If a name exceeds max_name_length
            InvalidCommand: If the chairperson is empty or a name is not a string
        """
        with LogOperation(
            logger,
            "create_ballot",
            chairperson=chairperson,
            proposal_count=len(proposal_names),
        ):
            command = build_command(
                CreateBallot,
                chairperson=chairperson,
                proposal_names=list(proposal_names),
                max_name_length=max_name_length,
            )
            events = self.handlers.handle_create_ballot(command, generate_id(), chairperson)
            self._commit(None, events)

        return events[0].stream_id

    # Election operations

    @track_command_duration("GiveRightToVote")
    def give_right_to_vote(self, ballot_id: str, caller: str, voter: str) -> Voter:
        """
        Give a voter the right to vote (chairperson only)

        Returns:
            The voter's updated state
        """
        with LogOperation(
            logger, "give_right_to_vote", ballot_id=ballot_id, caller=caller, target=voter
        ):
            ballot = self._require_ballot(ballot_id)
            command = build_command(GiveRightToVote, caller=caller, voter=voter)
            events = self.handlers.handle_give_right_to_vote(command, generate_id(), ballot)
            self._commit(ballot, events)

        return ballot.voter(voter)

    @track_command_duration("DelegateVote")
    def delegate(self, ballot_id: str, caller: str, to: str) -> Voter:
        """
        Delegate the caller's vote to another voter

        Returns:
            The caller's updated state (delegate is the end of the chain)
        """
        with LogOperation(logger, "delegate", ballot_id=ballot_id, caller=caller, to=to):
            ballot = self._require_ballot(ballot_id)
            command = build_command(DelegateVote, caller=caller, to=to)
            events = self.handlers.handle_delegate_vote(command, generate_id(), ballot)
            self._commit(ballot, events)

        payload = events[0].payload
        if payload["credited_proposal"] is not None:
            record_weight_tallied("delegation", payload["weight"])
        return ballot.voter(caller)

    @track_command_duration("CastVote")
    def vote(self, ballot_id: str, caller: str, proposal: int) -> Proposal:
        """
        Vote for a proposal with the caller's full weight

        Returns:
            The proposal's updated state
        """
        with LogOperation(logger, "vote", ballot_id=ballot_id, caller=caller, proposal=proposal):
            ballot = self._require_ballot(ballot_id)
            command = build_command(CastVote, caller=caller, proposal=proposal)
            events = self.handlers.handle_cast_vote(command, generate_id(), ballot)
            self._commit(ballot, events)

        record_weight_tallied("vote", events[0].payload["weight"])
        return ballot.proposal(command.proposal)

    # Queries

    def get_ballot(self, ballot_id: str) -> BallotState:
        """
        Raises:
            BallotNotFound: If no such ballot exists
        """
        return self._require_ballot(ballot_id)

    def list_ballots(self) -> list[BallotSummary]:
        return self.ballot_registry.list_summaries()

    def winning_proposal(self, ballot_id: str) -> int:
        return self._require_ballot(ballot_id).winning_proposal()

    def winner_name(self, ballot_id: str) -> str:
        return self._require_ballot(ballot_id).winner_name()

    def proposal(self, ballot_id: str, index: int) -> Proposal:
        return self._require_ballot(ballot_id).proposal(index)

    def voter(self, ballot_id: str, identity: str) -> Voter:
        return self._require_ballot(ballot_id).voter(identity)

    def chairperson(self, ballot_id: str) -> str:
        return self._require_ballot(ballot_id).chairperson

    # Audit

    def event_log(
        self,
        ballot_id: str | None = None,
        event_type: str | None = None,
        actor_id: str | None = None,
        limit: int | None = None,
    ) -> list[Event]:
        """
        Recorded events, oldest first, optionally filtered

        Args:
            ballot_id: Only this ballot's events
            event_type: Only events of this type ('VoteCast', 'VoteDelegated', ...)
            actor_id: Only events submitted by this identity
            limit: Only the most recent `limit` matches

        Raises:
            BallotNotFound: If ballot_id is given and does not exist
        """
        if ballot_id is not None:
            self._require_ballot(ballot_id)
        return self.event_store.query_events(
            stream_id=ballot_id, event_type=event_type, actor_id=actor_id, limit=limit
        )

    def stats(self) -> dict[str, int]:
        """Number of ballots and stored events"""
        return {
            "ballots": self.event_store.count_streams(),
            "events": self.event_store.count_events(),
        }
