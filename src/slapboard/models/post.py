# src/slapboard/models/post.py
"""SQLAlchemy models for submitted posts."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from slapboard.db.session import Base
from slapboard.db.time import utcnow

if TYPE_CHECKING:
    from .vote import Vote


class PostCategory(StrEnum):
    """Fixed set of subject categories."""

    FILM = "film"
    FICTIONAL = "fictional"
    POLITICAL = "political"


class PostStatus(StrEnum):
    """Moderation lifecycle of a post."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Post(Base):
    """A public figure submitted for voting.

    Posts start out pending and only become votable once a moderator
    approves them.
    """

    __tablename__ = "post"
    __table_args__ = (
        CheckConstraint(
            "category IN ('film', 'fictional', 'political')",
            name="ck_post_category",
        ),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="ck_post_status",
        ),
        Index("ix_post_status", "status"),
        Index("ix_post_category", "category"),
        Index("ix_post_created_at", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(16), nullable=False)
    # Opaque reference produced by the external image store.
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=PostStatus.PENDING.value,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    votes: Mapped[list[Vote]] = relationship(
        "Vote",
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def is_approved(self) -> bool:
        """Return True if the post may be voted on and listed publicly."""
        return self.status == PostStatus.APPROVED
