"""
Election Commands - Intentions to change a ballot

Commands carry the caller's identity and arguments. Field validation here
only covers shape (non-empty identities, integer index); election rules are
checked by the handlers against the current ballot state.
"""

from pydantic import BaseModel, Field

from ballot_ledger.election.models import DEFAULT_MAX_NAME_LENGTH


class CreateBallot(BaseModel):
    """
    Deploy a new ballot

    The chairperson is fixed forever and receives weight 1.
    Proposal order is the proposal index order.
    """

    chairperson: str = Field(..., min_length=1)
    proposal_names: list[str]
    max_name_length: int = Field(default=DEFAULT_MAX_NAME_LENGTH, ge=1)


class GiveRightToVote(BaseModel):
    """Grant weight 1 to a voter (chairperson only)"""

    caller: str = Field(..., min_length=1)
    voter: str = Field(..., min_length=1)


class DelegateVote(BaseModel):
    """Forward the caller's weight to another voter"""

    caller: str = Field(..., min_length=1)
    to: str = Field(..., min_length=1)


class CastVote(BaseModel):
    """Vote with the caller's full weight for one proposal"""

    caller: str = Field(..., min_length=1)
    proposal: int
