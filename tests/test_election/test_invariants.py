"""
Tests for Election Invariants - the rules behind every ballot operation

Pure functions, so these tests need no ballot, store or clock.
"""

import pytest

from ballot_ledger.election.invariants import (
    resolve_delegation_chain,
    validate_chairperson,
    validate_has_no_rights,
    validate_has_right_to_vote,
    validate_not_voted,
    validate_proposal_index,
    validate_proposal_names,
    winning_proposal_index,
)
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


def proposals_with_counts(*counts: int) -> list[Proposal]:
    return [Proposal(name=f"P{i + 1}", vote_count=c) for i, c in enumerate(counts)]


# =============================================================================
# Proposal slate
# =============================================================================


def test_empty_proposal_list_rejected() -> None:
    with pytest.raises(EmptyProposalList):
        validate_proposal_names([], 31)


def test_proposal_names_within_limit_accepted() -> None:
    validate_proposal_names(["P1", "x" * 31], 31)


def test_proposal_name_limit_counts_utf8_bytes() -> None:
    """'é' is two bytes, so 16 of them overflow a 31-byte slot"""
    with pytest.raises(ProposalNameTooLong) as exc_info:
        validate_proposal_names(["é" * 16], 31)

    assert exc_info.value.max_length == 31


# =============================================================================
# Rights and voting
# =============================================================================


def test_chairperson_check() -> None:
    validate_chairperson("chair", "chair", "give right to vote")

    with pytest.raises(Unauthorized) as exc_info:
        validate_chairperson("mallory", "chair", "give right to vote")

    assert exc_info.value.caller == "mallory"


def test_not_voted_check() -> None:
    validate_not_voted("alice", Voter(weight=1))

    with pytest.raises(AlreadyVoted):
        validate_not_voted("alice", Voter(weight=1, voted=True, vote=0))


def test_has_no_rights_check() -> None:
    validate_has_no_rights("alice", Voter())

    with pytest.raises(AlreadyHasRights):
        validate_has_no_rights("alice", Voter(weight=1))


def test_has_right_to_vote_check() -> None:
    validate_has_right_to_vote("alice", Voter(weight=3))

    with pytest.raises(NoRightToVote):
        validate_has_right_to_vote("alice", Voter())


@pytest.mark.parametrize("index", [-1, 3, 100])
def test_out_of_range_proposal_index_rejected(index: int) -> None:
    with pytest.raises(InvalidProposal) as exc_info:
        validate_proposal_index(index, 3)

    assert exc_info.value.index == index
    assert exc_info.value.proposal_count == 3


def test_in_range_proposal_index_accepted() -> None:
    for index in range(3):
        validate_proposal_index(index, 3)


# =============================================================================
# Delegation chain resolution
# =============================================================================


def test_chain_of_length_zero_resolves_to_target() -> None:
    assert resolve_delegation_chain({}, "alice", "bob") == "bob"


def test_chain_follows_delegates_to_the_end() -> None:
    voters = {
        "bob": Voter(weight=1, voted=True, delegate="carol"),
        "carol": Voter(weight=1, voted=True, delegate="dave"),
        "dave": Voter(weight=3),
    }

    assert resolve_delegation_chain(voters, "alice", "bob") == "dave"


def test_self_delegation_is_a_cycle() -> None:
    with pytest.raises(CycleDetected) as exc_info:
        resolve_delegation_chain({"alice": Voter(weight=1)}, "alice", "alice")

    assert exc_info.value.from_voter == "alice"
    assert exc_info.value.to_voter == "alice"


def test_chain_back_to_caller_is_a_cycle() -> None:
    voters = {
        "bob": Voter(weight=1, voted=True, delegate="carol"),
        "carol": Voter(weight=1, voted=True, delegate="alice"),
    }

    with pytest.raises(CycleDetected):
        resolve_delegation_chain(voters, "alice", "bob")


def test_corrupt_loop_not_involving_caller_terminates() -> None:
    """A loop among other voters must not hang the walk"""
    voters = {
        "bob": Voter(weight=1, voted=True, delegate="carol"),
        "carol": Voter(weight=1, voted=True, delegate="bob"),
    }

    with pytest.raises(CycleDetected):
        resolve_delegation_chain(voters, "alice", "bob")


# =============================================================================
# Tally
# =============================================================================


def test_no_votes_means_first_proposal_wins() -> None:
    assert winning_proposal_index(proposals_with_counts(0, 0, 0)) == 0


def test_strictly_greatest_count_wins() -> None:
    assert winning_proposal_index(proposals_with_counts(1, 4, 2)) == 1


def test_ties_go_to_lowest_index() -> None:
    assert winning_proposal_index(proposals_with_counts(1, 1, 1)) == 0
    assert winning_proposal_index(proposals_with_counts(0, 2, 2)) == 1
