"""
Election Events - Facts recorded in a ballot stream

Payloads carry everything needed to replay the tally without re-running
election rules: a delegation records where its chain resolved and whether
the weight landed on a proposal or on the delegate.
"""

from datetime import datetime

from pydantic import BaseModel


class BallotCreated(BaseModel):
    """A ballot was deployed with a fixed slate of proposals"""

    ballot_id: str
    chairperson: str
    proposal_names: list[str]
    max_name_length: int
    created_at: datetime


class VotingRightGranted(BaseModel):
    """The chairperson gave a voter weight 1"""

    ballot_id: str
    voter: str
    granted_at: datetime


class VoteDelegated(BaseModel):
    """
    A voter forwarded their weight

    delegate is the end of the delegation chain, not necessarily the
    immediate target. credited_proposal is set when that delegate had
    already voted, in which case the weight went straight to the tally.
    """

    ballot_id: str
    voter: str
    to: str
    delegate: str
    weight: int
    credited_proposal: int | None
    delegated_at: datetime


class VoteCast(BaseModel):
    """A voter voted directly for a proposal"""

    ballot_id: str
    voter: str
    proposal: int
    weight: int
    cast_at: datetime
