#!/usr/bin/env python3
"""
Ballot Replay Demonstration - Deterministic Tally Reconstruction

The event log is the source of truth. Reopening the ledger replays every
stored event, and the rebuilt ballot must match the one that produced them:
same weights, same delegations, same counts, same winner.

Scenario:
- Deploy a ballot and run an election with a delegation chain
- Capture the ballot state
- Reopen the database in a fresh ledger
- Verify the rebuilt state is identical

Run:
    python examples/replay_demo.py
"""

import json
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from ballot_ledger import BallotLedger
from ballot_ledger.kernel.time import TestTimeProvider


def print_section(title: str) -> None:
    """Print section header"""
    print(f"\n{'='*70}")
    print(f"  {title}")
    print(f"{'='*70}\n")


def serialize_ballot(ledger: BallotLedger, ballot_id: str) -> str:
    return json.dumps(ledger.get_ballot(ballot_id).to_dict(), sort_keys=True, default=str)


def main() -> None:
    """Run replay demonstration"""

    print_section("Ballot Replay Demonstration")

    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = Path(tmpdir) / "replay.db"
        time_provider = TestTimeProvider(datetime(2025, 1, 15, 10, 0, 0, tzinfo=timezone.utc))

        print_section("Phase 1: Run an election")
        ledger = BallotLedger(db_path, time_provider=time_provider)
        ballot_id = ledger.create_ballot("chair", ["Parks", "Transit", "Libraries"])
        print(f"✓ Deployed ballot {ballot_id}")

        for voter in ("ana", "ben", "cai", "dee"):
            ledger.give_right_to_vote(ballot_id, "chair", voter)
            time_provider.advance_seconds(60)
        print("✓ Granted rights to ana, ben, cai, dee")

        ledger.delegate(ballot_id, "ana", "ben")
        ledger.delegate(ballot_id, "ben", "cai")
        print("✓ ana → ben → cai (cai now holds weight 3)")

        ledger.vote(ballot_id, "cai", 1)
        ledger.vote(ballot_id, "dee", 2)
        ledger.vote(ballot_id, "chair", 2)
        print("✓ Votes cast")

        before = serialize_ballot(ledger, ballot_id)
        print(f"\nWinner: {ledger.winner_name(ballot_id)}")
        print(f"Events stored: {ledger.event_store.count_events()}")

        print_section("Phase 2: Rebuild from the event log")
        rebuilt = BallotLedger(db_path, time_provider=time_provider)
        after = serialize_ballot(rebuilt, ballot_id)

        for index in range(rebuilt.get_ballot(ballot_id).proposal_count):
            proposal = rebuilt.proposal(ballot_id, index)
            print(f"  [{index}] {proposal.name}: {proposal.vote_count}")

        print_section("Result")
        if before == after:
            print("✓ Rebuilt ballot is identical")
        else:
            print("✗ Rebuilt ballot differs")
            raise SystemExit(1)


if __name__ == "__main__":
    main()
