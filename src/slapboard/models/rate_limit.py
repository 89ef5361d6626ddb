# src/slapboard/models/rate_limit.py
"""Append-only event log backing the rate limiter."""

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from slapboard.db.session import Base
from slapboard.db.time import utcnow


class RateLimitCounter(Base):
    """One admitted event for an (identity, category) pair."""

    __tablename__ = "rate_limit"
    __table_args__ = (
        Index("ix_rate_limit_identity_category", "identity", "category"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    identity: Mapped[str] = mapped_column(String(45), nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    # Rows are never merged; each admitted event adds a row with count=1.
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    window_start: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
