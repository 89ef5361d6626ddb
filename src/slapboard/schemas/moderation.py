# src/slapboard/schemas/moderation.py
"""Moderation-related Pydantic schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class PostStatusUpdate(BaseModel):
    """Schema for moving a post between moderation states."""

    status: Literal["approved", "rejected"]


class ActionApprovalUpdate(BaseModel):
    """Schema for approving or revoking an action."""

    approved: bool


class BulkApproveRequest(BaseModel):
    """Schema for approving several posts at once."""

    post_ids: list[int] = Field(..., min_length=1, max_length=500)
