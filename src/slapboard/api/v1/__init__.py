# src/slapboard/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    actions_router,
    admin_router,
    posts_router,
    rankings_router,
    system_router,
    votes_router,
)

__all__ = [
    "actions_router",
    "admin_router",
    "posts_router",
    "rankings_router",
    "system_router",
    "votes_router",
]
