"""
Election Handlers - Command→Event transformation

Handlers:
1. Read the current ballot state (passed in explicitly)
2. Validate every rule of the operation
3. Emit exactly one event describing the accepted change

A rejected command raises before any event exists, so nothing is
half-applied.
"""

from ballot_ledger.election.commands import CastVote, CreateBallot, DelegateVote, GiveRightToVote
from ballot_ledger.election.events import BallotCreated, VoteCast, VoteDelegated, VotingRightGranted
from ballot_ledger.election.invariants import (
    resolve_delegation_chain,
    validate_chairperson,
    validate_has_no_rights,
    validate_has_right_to_vote,
    validate_not_voted,
    validate_proposal_index,
    validate_proposal_names,
)
from ballot_ledger.election.projections import BallotState
from ballot_ledger.kernel.events import Event, create_event
from ballot_ledger.kernel.ids import generate_id
from ballot_ledger.kernel.time import TimeProvider

STREAM_TYPE = "ballot"


class BallotCommandHandlers:
    """
    Command handlers for the election module

    Stateless apart from the injected clock; the ballot being acted on is
    always an explicit argument.
    """

    def __init__(self, time_provider: TimeProvider) -> None:
        self.time_provider = time_provider

    def handle_create_ballot(
        self,
        command: CreateBallot,
        command_id: str,
        actor_id: str | None,
    ) -> list[Event]:
        """
        Handle CreateBallot command

        Raises:
            EmptyProposalList: If no proposals were given
            ProposalNameTooLong: If a name does not fit the name slot
        """
        validate_proposal_names(command.proposal_names, command.max_name_length)

        now = self.time_provider.now()
        ballot_id = generate_id()

        event_payload = BallotCreated(
            ballot_id=ballot_id,
            chairperson=command.chairperson,
            proposal_names=command.proposal_names,
            max_name_length=command.max_name_length,
            created_at=now,
        ).model_dump(mode="json")

        return [
            create_event(
                event_id=generate_id(),
                stream_id=ballot_id,
                stream_type=STREAM_TYPE,
                event_type="BallotCreated",
                occurred_at=now,
                command_id=command_id,
                actor_id=actor_id or command.chairperson,
                payload=event_payload,
                version=1,
            )
        ]

    def handle_give_right_to_vote(
        self,
        command: GiveRightToVote,
        command_id: str,
        ballot: BallotState,
    ) -> list[Event]:
        """
        Handle GiveRightToVote command

        Checked in order: caller is chairperson, voter has not voted,
        voter has no weight yet.

        Raises:
            Unauthorized: If caller is not the chairperson
            AlreadyVoted: If the voter already voted
            AlreadyHasRights: If the voter already holds weight
        """
        validate_chairperson(command.caller, ballot.chairperson, "give right to vote")
        voter = ballot.voter(command.voter)
        validate_not_voted(command.voter, voter)
        validate_has_no_rights(command.voter, voter)

        now = self.time_provider.now()
        event_payload = VotingRightGranted(
            ballot_id=ballot.ballot_id,
            voter=command.voter,
            granted_at=now,
        ).model_dump(mode="json")

        return [self._ballot_event(ballot, "VotingRightGranted", command_id, command.caller, event_payload)]

    def handle_delegate_vote(
        self,
        command: DelegateVote,
        command_id: str,
        ballot: BallotState,
    ) -> list[Event]:
        """
        Handle DelegateVote command

        The caller needs no weight of their own. The chain starting at the
        target is resolved to its end; if that voter already voted, the
        caller's weight is credited to their proposal right away, otherwise
        it is added to their weight.

        Raises:
            AlreadyVoted: If the caller already voted or delegated
            CycleDetected: If the chain leads back to the caller
        """
        sender = ballot.voter(command.caller)
        validate_not_voted(command.caller, sender)

        final = resolve_delegation_chain(ballot.voters, command.caller, command.to)
        delegate = ballot.voter(final)
        credited_proposal = delegate.vote if delegate.voted else None

        now = self.time_provider.now()
        event_payload = VoteDelegated(
            ballot_id=ballot.ballot_id,
            voter=command.caller,
            to=command.to,
            delegate=final,
            weight=sender.weight,
            credited_proposal=credited_proposal,
            delegated_at=now,
        ).model_dump(mode="json")

        return [self._ballot_event(ballot, "VoteDelegated", command_id, command.caller, event_payload)]

    def handle_cast_vote(
        self,
        command: CastVote,
        command_id: str,
        ballot: BallotState,
    ) -> list[Event]:
        """
        Handle CastVote command

        Raises:
            NoRightToVote: If the caller has zero weight
            AlreadyVoted: If the caller already voted or delegated
            InvalidProposal: If the index is out of range
        """
        sender = ballot.voter(command.caller)
        validate_has_right_to_vote(command.caller, sender)
        validate_not_voted(command.caller, sender)
        validate_proposal_index(command.proposal, ballot.proposal_count)

        now = self.time_provider.now()
        event_payload = VoteCast(
            ballot_id=ballot.ballot_id,
            voter=command.caller,
            proposal=command.proposal,
            weight=sender.weight,
            cast_at=now,
        ).model_dump(mode="json")

        return [self._ballot_event(ballot, "VoteCast", command_id, command.caller, event_payload)]

    def _ballot_event(
        self,
        ballot: BallotState,
        event_type: str,
        command_id: str,
        actor_id: str,
        payload: dict,
    ) -> Event:
        return create_event(
            event_id=generate_id(),
            stream_id=ballot.ballot_id,
            stream_type=STREAM_TYPE,
            event_type=event_type,
            occurred_at=self.time_provider.now(),
            command_id=command_id,
            actor_id=actor_id,
            payload=payload,
            version=ballot.version + 1,
        )
