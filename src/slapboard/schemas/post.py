# src/slapboard/schemas/post.py
"""Post-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PostCreate(BaseModel):
    """Schema for submitting a new post for moderation."""

    name: str = Field(..., description="Name of the public figure")
    category: str = Field(..., description="One of film, fictional or political")
    image_url: str = Field(..., description="Reference returned by the image store")


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: int
    name: str
    category: str
    image_url: str
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PostWithVotes(PostResponse):
    """A post annotated with its per-action vote counts."""

    votes: dict[str, int] = Field(default_factory=dict)
    total_votes: int = 0
