"""
Election Projections - Ballot state built from events

BallotState is the single aggregate holding one election's data. It only
changes by applying events that handlers already validated, so applying an
event never fails and replaying a stream always yields the same tally.
"""

from typing import Any

from ballot_ledger.election.invariants import validate_proposal_index, winning_proposal_index
from ballot_ledger.election.models import BallotSummary, Proposal, Voter
from ballot_ledger.kernel.events import Event


class BallotState:
    """
    Projection: proposals, voters and chairperson of one ballot

    The chairperson's voter record is seeded with weight 1 on creation.
    Every other identity reads as a default Voter until an event touches it.
    """

    def __init__(
        self,
        ballot_id: str,
        chairperson: str,
        proposal_names: list[str],
        max_name_length: int,
        created_at: str | None = None,
    ) -> None:
        self.ballot_id = ballot_id
        self.chairperson = chairperson
        self.max_name_length = max_name_length
        self.created_at = created_at
        self.proposals: list[Proposal] = [Proposal(name=name) for name in proposal_names]
        self.voters: dict[str, Voter] = {chairperson: Voter(weight=1)}
        self.version = 0

    @classmethod
    def from_created_event(cls, event: Event) -> "BallotState":
        """Start a ballot from its BallotCreated event"""
        payload = event.payload
        state = cls(
            ballot_id=payload["ballot_id"],
            chairperson=payload["chairperson"],
            proposal_names=payload["proposal_names"],
            max_name_length=payload["max_name_length"],
            created_at=payload.get("created_at"),
        )
        state.version = event.version
        return state

    # Mutation (event application only)

    def apply_event(self, event: Event) -> None:
        """Apply an event to update ballot state"""
        payload = event.payload

        if event.event_type == "VotingRightGranted":
            self._voter_record(payload["voter"]).weight = 1

        elif event.event_type == "VoteDelegated":
            sender = self._voter_record(payload["voter"])
            sender.voted = True
            sender.delegate = payload["delegate"]

            if payload["credited_proposal"] is not None:
                self.credit_proposal(payload["credited_proposal"], payload["weight"])
            else:
                self._voter_record(payload["delegate"]).weight += payload["weight"]

        elif event.event_type == "VoteCast":
            sender = self._voter_record(payload["voter"])
            sender.voted = True
            sender.vote = payload["proposal"]
            self.credit_proposal(payload["proposal"], payload["weight"])

        self.version = event.version

    def credit_proposal(self, index: int, amount: int) -> None:
        """
        Add vote weight to a proposal

        The only way a vote count changes - shared by direct votes and by
        delegations that land on a voter who already voted.
        """
        self.proposals[index].vote_count += amount

    def _voter_record(self, identity: str) -> Voter:
        return self.voters.setdefault(identity, Voter())

    # Queries

    def voter(self, identity: str) -> Voter:
        """Voter state for an identity (default record if never seen)"""
        record = self.voters.get(identity)
        return record.model_copy() if record is not None else Voter()

    def proposal(self, index: int) -> Proposal:
        """
        Proposal name and count by index

        Raises:
            InvalidProposal: If index is out of range
        """
        validate_proposal_index(index, len(self.proposals))
        return self.proposals[index].model_copy()

    @property
    def proposal_count(self) -> int:
        return len(self.proposals)

    def winning_proposal(self) -> int:
        return winning_proposal_index(self.proposals)

    def winner_name(self) -> str:
        return self.proposals[self.winning_proposal()].name

    def total_votes(self) -> int:
        return sum(p.vote_count for p in self.proposals)

    def summary(self) -> BallotSummary:
        return BallotSummary(
            ballot_id=self.ballot_id,
            chairperson=self.chairperson,
            proposal_count=self.proposal_count,
            total_votes=self.total_votes(),
            winning_proposal=self.winning_proposal(),
            winner_name=self.winner_name(),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dict"""
        return {
            "ballot_id": self.ballot_id,
            "chairperson": self.chairperson,
            "max_name_length": self.max_name_length,
            "created_at": self.created_at,
            "version": self.version,
            "proposals": [p.model_dump() for p in self.proposals],
            "voters": {k: v.model_dump() for k, v in self.voters.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BallotState":
        """Deserialize from dict"""
        state = cls(
            ballot_id=data["ballot_id"],
            chairperson=data["chairperson"],
            proposal_names=[],
            max_name_length=data["max_name_length"],
            created_at=data.get("created_at"),
        )
        state.proposals = [Proposal(**p) for p in data["proposals"]]
        state.voters = {k: Voter(**v) for k, v in data["voters"].items()}
        state.version = data.get("version", 0)
        return state


class BallotRegistry:
    """
    Projection: every ballot in the ledger, keyed by ballot_id

    Routes each event to the ballot whose stream it belongs to.
    """

    def __init__(self) -> None:
        self.ballots: dict[str, BallotState] = {}

    def apply_event(self, event: Event) -> None:
        """Apply an event to update projection state"""
        if event.event_type == "BallotCreated":
            self.ballots[event.stream_id] = BallotState.from_created_event(event)
            return

        ballot = self.ballots.get(event.stream_id)
        if ballot is not None:
            ballot.apply_event(event)

    def get(self, ballot_id: str) -> BallotState | None:
        """Get ballot by ID"""
        return self.ballots.get(ballot_id)

    def list_summaries(self) -> list[BallotSummary]:
        return [ballot.summary() for ballot in self.ballots.values()]
