# src/slapboard/scripts/maintenance.py
"""
Maintenance commands for a Slapboard deployment.

Run with ``python -m slapboard.scripts.maintenance <command>``:

1. ``issue-admin-token`` mints a bearer token for the moderation endpoints
2. ``prune-rate-limits`` deletes expired rate-limit events
3. ``seed-actions`` makes sure the default actions exist and are approved
"""
from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from datetime import timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from slapboard.core.security import create_admin_token
from slapboard.core.settings import settings
from slapboard.db.session import SessionLocal
from slapboard.services.catalog import CatalogService
from slapboard.services.rate_limit import RateLimiter


def longest_rate_limit_window() -> timedelta:
    """Return the widest configured rate-limit window."""
    minutes = max(window for _, window in settings.rate_limit_policies.values())
    return timedelta(minutes=minutes)


def prune_rate_limits(db: Session, older_than: timedelta | None = None) -> int:
    """Delete rate-limit events that can no longer affect admission.

    Args:
        db: Database session
        older_than: Age cutoff; defaults to the widest configured window

    Returns:
        Number of events removed
    """
    return RateLimiter(db).prune(older_than or longest_rate_limit_window())


def seed_actions(db: Session) -> list[str]:
    """Ensure the default actions exist; returns the names that were created."""
    return [action.name for action in CatalogService(db).ensure_default_actions()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Slapboard maintenance commands")
    commands = parser.add_subparsers(dest="command", required=True)

    token = commands.add_parser("issue-admin-token", help="Mint an admin bearer token")
    token.add_argument("subject", help="Identifier of the moderator receiving the token")
    token.add_argument(
        "--expires-minutes",
        type=int,
        default=None,
        help="Token lifetime (defaults to ACCESS_TOKEN_EXPIRE_MINUTES)",
    )

    prune = commands.add_parser("prune-rate-limits", help="Delete expired rate-limit events")
    prune.add_argument(
        "--older-than-minutes",
        type=int,
        default=None,
        help="Age cutoff (defaults to the widest configured window)",
    )

    commands.add_parser("seed-actions", help="Create or re-approve the default actions")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == "issue-admin-token":
        print(create_admin_token(args.subject, expires_minutes=args.expires_minutes))
        return 0

    db = SessionLocal()
    try:
        if args.command == "prune-rate-limits":
            older_than = (
                timedelta(minutes=args.older_than_minutes)
                if args.older_than_minutes is not None
                else None
            )
            removed = prune_rate_limits(db, older_than)
            print(f"[maintenance] pruned {removed} rate limit events")
        else:
            created = seed_actions(db)
            print(f"[maintenance] seeded actions: {', '.join(created) or 'none'}")
    except SQLAlchemyError as exc:
        print(f"[maintenance] ERROR: {exc}", file=sys.stderr)
        return 1
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
