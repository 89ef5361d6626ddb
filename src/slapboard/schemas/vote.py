# src/slapboard/schemas/vote.py
"""Vote-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class VoteCreate(BaseModel):
    """Schema for casting a vote."""

    post_id: int
    action_id: int


class VoteResponse(BaseModel):
    """Outcome of a vote request.

    `removed` is True when toggle mode withdrew an earlier vote; the vote
    fields are then empty.
    """

    id: int | None = None
    post_id: int
    action_id: int
    created_at: datetime | None = None
    removed: bool = False
    votes: dict[str, int] = Field(default_factory=dict, description="Updated counts for the post")


class MyVotesResponse(BaseModel):
    """Actions the caller has already used on a post."""

    post_id: int
    action_ids: list[int]
