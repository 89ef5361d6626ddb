# src/slapboard/schemas/action.py
"""Action-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ActionCreate(BaseModel):
    """Schema for suggesting a custom action."""

    name: str = Field(..., description="Lowercase action name, e.g. 'applaud'")


class ActionResponse(BaseModel):
    """Schema for action information returned by the API."""

    id: int
    name: str
    approved: bool
    is_default: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
