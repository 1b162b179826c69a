"""
Ballot Ledger - Event-sourced weighted voting with delegation

A chairperson deploys a ballot with a fixed slate of proposals and hands
out voting rights. Voters either vote directly or delegate their weight
to someone else, and the tally reports the leading proposal at any time.
"""

from ballot_ledger.ledger import BallotLedger

__version__ = "0.1.0"
__all__ = ["BallotLedger", "__version__"]
