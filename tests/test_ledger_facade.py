"""
Tests for the BallotLedger façade: persistence, replay and lookups
"""

from pathlib import Path

import pytest

from ballot_ledger import BallotLedger
from ballot_ledger.kernel.errors import (
    BallotNotFound,
    EmptyProposalList,
    InvalidCommand,
    InvalidProposal,
    ProposalNameTooLong,
)
from ballot_ledger.kernel.time import TestTimeProvider
from tests.helpers import CHAIRPERSON, grant_all, voter_addresses


def test_create_ballot_persists_one_event(ledger: BallotLedger, ballot_id: str) -> None:
    events = ledger.event_log(ballot_id)

    assert [e.event_type for e in events] == ["BallotCreated"]
    assert ledger.get_ballot(ballot_id).version == 1


def test_create_ballot_validation(ledger: BallotLedger) -> None:
    with pytest.raises(EmptyProposalList):
        ledger.create_ballot(CHAIRPERSON, [])

    with pytest.raises(ProposalNameTooLong):
        ledger.create_ballot(CHAIRPERSON, ["a" * 32])

    ledger.create_ballot(CHAIRPERSON, ["a" * 32], max_name_length=64)
    assert ledger.event_store.count_streams() == 1


def test_rejected_operation_appends_nothing(ledger: BallotLedger, ballot_id: str) -> None:
    with pytest.raises(InvalidProposal):
        ledger.vote(ballot_id, CHAIRPERSON, 3)

    assert ledger.event_store.count_events() == 1
    assert ledger.get_ballot(ballot_id).version == 1


@pytest.mark.parametrize(
    "operation",
    [
        lambda ledger, ballot_id: ledger.vote(ballot_id, CHAIRPERSON, 1.5),
        lambda ledger, ballot_id: ledger.vote(ballot_id, CHAIRPERSON, "first"),
        lambda ledger, ballot_id: ledger.give_right_to_vote(ballot_id, CHAIRPERSON, ""),
        lambda ledger, ballot_id: ledger.delegate(ballot_id, "", CHAIRPERSON),
    ],
)
def test_malformed_arguments_raise_invalid_command(
    ledger: BallotLedger, ballot_id: str, operation
) -> None:
    before = ledger.get_ballot(ballot_id).to_dict()

    with pytest.raises(InvalidCommand):
        operation(ledger, ballot_id)

    assert ledger.get_ballot(ballot_id).to_dict() == before
    assert ledger.event_store.count_events() == 1


def test_empty_chairperson_rejected(ledger: BallotLedger) -> None:
    with pytest.raises(InvalidCommand) as exc_info:
        ledger.create_ballot("", ["P1"])

    assert exc_info.value.command_type == "CreateBallot"
    assert "chairperson" in exc_info.value.detail


def test_unknown_ballot(ledger: BallotLedger) -> None:
    with pytest.raises(BallotNotFound) as exc_info:
        ledger.vote("missing", CHAIRPERSON, 0)
    assert exc_info.value.ballot_id == "missing"

    with pytest.raises(BallotNotFound):
        ledger.winner_name("missing")


def test_state_rebuilt_from_database(
    temp_db: Path, test_time: TestTimeProvider, ledger: BallotLedger, ballot_id: str
) -> None:
    alice, bob, carol = voter_addresses(3)
    grant_all(ledger, ballot_id, CHAIRPERSON, [alice, bob, carol])
    ledger.delegate(ballot_id, alice, bob)
    ledger.vote(ballot_id, bob, 2)
    ledger.delegate(ballot_id, carol, alice)

    reopened = BallotLedger(temp_db, time_provider=test_time)

    assert reopened.proposal(ballot_id, 2).vote_count == 3
    assert reopened.winner_name(ballot_id) == "P3"
    assert reopened.voter(ballot_id, carol).delegate == bob
    assert reopened.get_ballot(ballot_id).to_dict() == ledger.get_ballot(ballot_id).to_dict()

    # The reopened ledger keeps accepting operations on the same stream
    reopened.vote(ballot_id, CHAIRPERSON, 0)
    assert reopened.get_ballot(ballot_id).version == ledger.get_ballot(ballot_id).version + 1


def test_list_ballots(ledger: BallotLedger, ballot_id: str) -> None:
    other = ledger.create_ballot("someone-else", ["Yes", "No"])
    ledger.vote(other, "someone-else", 1)

    summaries = {s.ballot_id: s for s in ledger.list_ballots()}

    assert set(summaries) == {ballot_id, other}
    assert summaries[other].total_votes == 1
    assert summaries[other].winner_name == "No"
    assert summaries[ballot_id].chairperson == CHAIRPERSON


def test_returned_state_is_a_snapshot(ledger: BallotLedger, ballot_id: str) -> None:
    voter = ledger.voter(ballot_id, CHAIRPERSON)
    voter.weight = 50

    assert ledger.voter(ballot_id, CHAIRPERSON).weight == 1


def test_events_carry_actor_and_time(
    ledger: BallotLedger, ballot_id: str, test_time: TestTimeProvider
) -> None:
    [alice] = voter_addresses(1)
    test_time.advance_seconds(60)

    ledger.give_right_to_vote(ballot_id, CHAIRPERSON, alice)

    event = ledger.event_log(ballot_id)[-1]
    assert event.actor_id == CHAIRPERSON
    assert event.occurred_at == test_time.now()
    assert event.payload["voter"] == alice


def test_event_log_filters(ledger: BallotLedger, ballot_id: str) -> None:
    alice, bob = voter_addresses(2)
    grant_all(ledger, ballot_id, CHAIRPERSON, [alice, bob])
    ledger.delegate(ballot_id, alice, bob)
    ledger.vote(ballot_id, bob, 1)
    other = ledger.create_ballot("someone-else", ["Yes", "No"])

    assert [e.event_type for e in ledger.event_log(ballot_id)] == [
        "BallotCreated",
        "VotingRightGranted",
        "VotingRightGranted",
        "VoteDelegated",
        "VoteCast",
    ]
    assert len(ledger.event_log()) == 6
    assert [e.stream_id for e in ledger.event_log(other)] == [other]
    assert [e.actor_id for e in ledger.event_log(event_type="VoteCast")] == [bob]
    assert len(ledger.event_log(ballot_id, actor_id=CHAIRPERSON)) == 3

    recent = ledger.event_log(ballot_id, limit=2)
    assert [e.event_type for e in recent] == ["VoteDelegated", "VoteCast"]


def test_event_log_unknown_ballot(ledger: BallotLedger) -> None:
    with pytest.raises(BallotNotFound):
        ledger.event_log("missing")


def test_stats(ledger: BallotLedger, ballot_id: str) -> None:
    ledger.vote(ballot_id, CHAIRPERSON, 0)
    ledger.create_ballot(CHAIRPERSON, ["Yes", "No"])

    assert ledger.stats() == {"ballots": 2, "events": 3}
