"""
Election Domain Models - Proposals and voters

A ballot is a fixed slate of proposals plus a table of voters keyed by
identity. Voter records exist implicitly for every identity: an identity
never seen before reads as weight 0, not voted, no delegate.
"""

from pydantic import BaseModel, Field

# Proposal names live in a 32-byte slot whose encoder needs a trailing zero byte
DEFAULT_MAX_NAME_LENGTH = 31


class Proposal(BaseModel):
    """
    One entry on the ballot

    Attributes:
        name: Display name (at most the ballot's max name length in UTF-8 bytes)
        vote_count: Accumulated vote weight, only ever incremented
    """

    name: str
    vote_count: int = Field(default=0, ge=0)

    model_config = {
        "json_schema_extra": {"examples": [{"name": "P1", "vote_count": 3}]}
    }


class Voter(BaseModel):
    """
    Voting state of one identity

    Attributes:
        weight: Votes this identity's ballot represents (0 = no right to vote)
        voted: True once the voter has voted or delegated; never reset
        delegate: Identity the weight was forwarded to (end of the chain at
            delegation time), None if not delegating
        vote: Index of the proposal voted for, set only by a direct vote
    """

    weight: int = Field(default=0, ge=0)
    voted: bool = False
    delegate: str | None = None
    vote: int | None = None

    def has_right_to_vote(self) -> bool:
        return self.weight > 0

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"weight": 2, "voted": True, "delegate": None, "vote": 1},
                {"weight": 1, "voted": True, "delegate": "0x3C44...93BC", "vote": None},
            ]
        }
    }


class BallotSummary(BaseModel):
    """
    Lightweight ballot summary for listings

    Contains enough to identify a ballot and see who leads.
    """

    ballot_id: str
    chairperson: str
    proposal_count: int
    total_votes: int
    winning_proposal: int
    winner_name: str
