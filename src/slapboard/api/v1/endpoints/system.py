"""System and transparency endpoints for Slapboard API."""

from __future__ import annotations

from fastapi import APIRouter

from slapboard.core.settings import settings

router = APIRouter(prefix="/system", tags=["system", "transparency"])


@router.get("/config")
async def get_public_config() -> dict[str, object]:
    """Return a sanitized snapshot of public runtime configuration.

    Excludes secrets and connection strings; suitable for transparency UIs.

    Returns:
        Dictionary containing app metadata, voting policy and rate limits
    """
    return {
        "app": {
            "name": settings.app_name,
            "version": settings.app_version,
        },
        "voting": {
            "duplicate_policy": settings.vote_duplicate_policy,
            "identity_includes_device": settings.identity_include_device,
            "default_actions": list(settings.default_actions),
            "trending_window_hours": settings.trending_window_hours,
        },
        "rate_limits": {
            category: {"max_events": max_events, "window_minutes": window_minutes}
            for category, (max_events, window_minutes) in settings.rate_limit_policies.items()
            if category != "vote" or settings.vote_rate_limit_enabled
        },
    }
