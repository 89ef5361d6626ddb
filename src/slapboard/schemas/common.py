"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """One field-level problem reported with a 400 response."""

    field: str | None = Field(None, description="Offending request field, if known.")
    message: str


class ErrorResponse(BaseModel):
    """Body returned for every domain error."""

    detail: str
    errors: list[ErrorDetail] = Field(default_factory=list)
