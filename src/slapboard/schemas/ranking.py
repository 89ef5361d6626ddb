"""Leaderboard and trending schemas."""

from pydantic import BaseModel

from .post import PostResponse


class RankedPostResponse(BaseModel):
    """One leaderboard or trending row."""

    rank: int
    post: PostResponse
    vote_count: int
