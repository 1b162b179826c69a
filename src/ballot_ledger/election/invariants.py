"""
Election Invariants - Rules every ballot operation must satisfy

Pure functions (no side effects) that validate a requested transition
against the current ballot state and raise a typed rejection otherwise.
Also hosts the two pieces of ballot arithmetic that must never drift:
delegation-chain resolution and the winning-proposal scan.
"""

from collections.abc import Mapping, Sequence

from ballot_ledger.election.models import Proposal, Voter
from ballot_ledger.kernel.errors import (
    AlreadyHasRights,
    AlreadyVoted,
    CycleDetected,
    EmptyProposalList,
    InvalidProposal,
    NoRightToVote,
    ProposalNameTooLong,
    Unauthorized,
)


# Ballot creation


def validate_proposal_names(proposal_names: Sequence[str], max_name_length: int) -> None:
    """
    Ensure the slate is non-empty and every name fits the name slot

    Length is measured in UTF-8 bytes, not characters.

    Raises:
        EmptyProposalList: If no proposals are given
        ProposalNameTooLong: If a name exceeds max_name_length bytes
    """
    if not proposal_names:
        raise EmptyProposalList()

    for name in proposal_names:
        if len(name.encode("utf-8")) > max_name_length:
            raise ProposalNameTooLong(name, max_name_length)


# Rights and voting


def validate_chairperson(caller: str, chairperson: str, action: str) -> None:
    """
    Raises:
        Unauthorized: If caller is not the chairperson
    """
    if caller != chairperson:
        raise Unauthorized(caller, action)


def validate_not_voted(identity: str, voter: Voter) -> None:
    """
    Raises:
        AlreadyVoted: If the voter has voted or delegated
    """
    if voter.voted:
        raise AlreadyVoted(identity)


def validate_has_no_rights(identity: str, voter: Voter) -> None:
    """
    Raises:
        AlreadyHasRights: If the voter already holds weight
            (this includes the chairperson)
    """
    if voter.weight != 0:
        raise AlreadyHasRights(identity)


def validate_has_right_to_vote(identity: str, voter: Voter) -> None:
    """
    Raises:
        NoRightToVote: If the voter has zero weight
    """
    if not voter.has_right_to_vote():
        raise NoRightToVote(identity)


def validate_proposal_index(index: int, proposal_count: int) -> None:
    """
    Bounds check for a proposal index. Negative indices never wrap.

    Raises:
        InvalidProposal: If index is outside [0, proposal_count)
    """
    if index < 0 or index >= proposal_count:
        raise InvalidProposal(index, proposal_count)


# Delegation


def resolve_delegation_chain(
    voters: Mapping[str, Voter],
    caller: str,
    to: str,
) -> str:
    """
    Follow delegate pointers from `to` to the voter holding the weight

    The walk stops at the first voter who has not delegated. Reaching the
    caller anywhere on the chain (including `to == caller`) is a loop.
    Visited identities are tracked, so the walk ends after at most one
    step per known voter even if stored pointers were ever cyclic.

    Args:
        voters: Current voter records (unknown identities read as defaults)
        caller: Who is delegating
        to: Immediate delegation target

    Returns:
        Identity at the end of the chain

    Raises:
        CycleDetected: If the chain leads back to the caller or loops
    """
    visited: set[str] = set()
    current = to

    while True:
        if current == caller or current in visited:
            raise CycleDetected(caller, to)
        visited.add(current)

        record = voters.get(current)
        if record is None or record.delegate is None:
            return current
        current = record.delegate


# Tally


def winning_proposal_index(proposals: Sequence[Proposal]) -> int:
    """
    Index of the proposal with the most votes

    A later proposal takes the lead only with a strictly greater count,
    so ties go to the lowest index and an untouched ballot returns 0.
    """
    winning = 0
    winning_count = 0
    for index, proposal in enumerate(proposals):
        if proposal.vote_count > winning_count:
            winning_count = proposal.vote_count
            winning = index
    return winning
