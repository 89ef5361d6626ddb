# src/slapboard/models/__init__.py
"""SQLAlchemy models for the Slapboard application."""

from .action import Action
from .post import Post, PostCategory, PostStatus
from .rate_limit import RateLimitCounter
from .vote import Vote

__all__ = [
    "Action",
    "Post", "PostCategory", "PostStatus",
    "RateLimitCounter",
    "Vote",
]
