"""Aggregate statistics schema."""

from pydantic import BaseModel, ConfigDict


class StatsResponse(BaseModel):
    """Counters shown on the landing page and the admin dashboard."""

    total_approved_posts: int
    total_votes: int
    pending_posts: int
    pending_actions: int

    model_config = ConfigDict(from_attributes=True)
