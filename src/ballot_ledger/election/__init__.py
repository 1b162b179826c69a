"""
Election Module - Weighted voting with delegation

- A fixed slate of proposals per ballot
- Voting rights issued by a single chairperson
- Delegation chains that forward weight to whoever ends up voting
- A tally where ties go to the earliest proposal
"""

from ballot_ledger.election.models import BallotSummary, Proposal, Voter
from ballot_ledger.election.projections import BallotRegistry, BallotState

__all__ = [
    "Proposal",
    "Voter",
    "BallotSummary",
    "BallotState",
    "BallotRegistry",
]
