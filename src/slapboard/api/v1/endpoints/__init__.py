# src/slapboard/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .actions import router as actions_router
from .admin import router as admin_router
from .posts import router as posts_router
from .rankings import router as rankings_router
from .system import router as system_router
from .votes import router as votes_router

__all__ = [
    "actions_router",
    "admin_router",
    "posts_router",
    "rankings_router",
    "system_router",
    "votes_router",
]
