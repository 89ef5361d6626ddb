# src/slapboard/models/action.py
"""SQLAlchemy models for voting actions."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from slapboard.db.session import Base
from slapboard.db.time import utcnow

if TYPE_CHECKING:
    from .vote import Vote


class Action(Base):
    """Named voting verb such as "love" or "slap"."""

    __tablename__ = "action"
    __table_args__ = (
        Index("ix_action_approved", "approved"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Lowercase token, globally unique.
    name: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # Marks the seeded set (slap, hug, kiss, love, hate).
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    votes: Mapped[list[Vote]] = relationship(
        "Vote",
        back_populates="action",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
