# src/slapboard/models/vote.py
"""Models capturing votes cast on posts."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from slapboard.db.session import Base
from slapboard.db.time import utcnow

if TYPE_CHECKING:
    from .action import Action
    from .post import Post


class Vote(Base):
    """One (post, action, voter) event.

    Votes are append-only; rows disappear only through cascading post or
    action deletion, or an explicit un-vote in toggle mode.
    """

    __tablename__ = "vote"
    __table_args__ = (
        Index("ix_vote_post_id", "post_id"),
        Index("ix_vote_action_id", "action_id"),
        Index("ix_vote_ip_address", "ip_address"),
        Index("ix_vote_created_at", "created_at"),
        # dedup_key is NULL in open mode, and NULLs never collide.
        UniqueConstraint("post_id", "action_id", "dedup_key", name="uq_vote_dedup"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
    )
    action_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("action.id", ondelete="CASCADE"),
        nullable=False,
    )
    ip_address: Mapped[str] = mapped_column(String(45), nullable=False)
    device_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    voter_key: Mapped[str] = mapped_column(String(128), nullable=False)
    dedup_key: Mapped[str | None] = mapped_column(String(128), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    post: Mapped[Post] = relationship("Post", back_populates="votes")
    action: Mapped[Action] = relationship("Action", back_populates="votes")
