# src/slapboard/services/rate_limit.py
"""Windowed, per-address rate limiting backed by an append-only event log."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, timedelta
from enum import StrEnum

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from slapboard.core.errors import RateLimitExceeded, StorageUnavailableError
from slapboard.core.settings import settings
from slapboard.db.time import as_utc, utcnow
from slapboard.models import RateLimitCounter

logger = logging.getLogger(__name__)


class RateLimitCategory(StrEnum):
    """Event categories tracked by the limiter."""

    POST_SUBMISSION = "post"
    ACTION_SUGGESTION = "action_suggestion"
    VOTE = "vote"


class RateLimiter:
    """Count admitted events per (identity, category) inside a trailing window.

    Every admitted event appends one row; admission counts the rows whose
    window start falls inside the window. Concurrent bursts can overshoot
    slightly because the check and the insert are separate statements.
    """

    def __init__(self, db: Session, clock: Callable[[], datetime] = utcnow) -> None:
        self.db = db
        self._now = clock

    def _window_rows(self, identity: str, category: str, window_minutes: int):
        cutoff = self._now() - timedelta(minutes=window_minutes)
        return self.db.query(RateLimitCounter).filter(
            RateLimitCounter.identity == identity,
            RateLimitCounter.category == str(category),
            RateLimitCounter.window_start >= cutoff,
        )

    def count_in_window(self, identity: str, category: str, window_minutes: int) -> int:
        """Return how many events were admitted inside the window."""
        return self._window_rows(identity, category, window_minutes).count()

    def admit(
        self,
        identity: str,
        category: str,
        max_events: int,
        window_minutes: int,
    ) -> bool:
        """Return True if another event may be admitted.

        Callers that proceed must call `record` afterwards.

        Raises:
            StorageUnavailableError: If the count cannot be read. The event
                is denied rather than silently admitted.
        """
        try:
            current = self.count_in_window(identity, category, window_minutes)
        except SQLAlchemyError as exc:
            logger.error("Rate limit check failed for %s/%s: %s", identity, category, exc)
            raise StorageUnavailableError() from exc
        return current < max_events

    def record(self, identity: str, category: str) -> RateLimitCounter:
        """Append an admitted event. The caller owns the commit."""
        counter = RateLimitCounter(
            identity=identity,
            category=str(category),
            count=1,
            window_start=self._now(),
        )
        self.db.add(counter)
        self.db.flush()
        return counter

    def retry_after(self, identity: str, category: str, window_minutes: int) -> int:
        """Return seconds until the oldest in-window event expires."""
        oldest = (
            self._window_rows(identity, category, window_minutes)
            .with_entities(func.min(RateLimitCounter.window_start))
            .scalar()
        )
        if oldest is None:
            return 0
        expires_at = as_utc(oldest) + timedelta(minutes=window_minutes)
        remaining = (expires_at - self._now()).total_seconds()
        return max(1, math.ceil(remaining))

    def policy_for(self, category: RateLimitCategory) -> tuple[int, int] | None:
        """Return the configured `(max_events, window_minutes)`, or None if disabled."""
        if category == RateLimitCategory.VOTE and not settings.vote_rate_limit_enabled:
            return None
        return settings.rate_limit_policies[category.value]

    @contextmanager
    def guard(self, identity: str, category: RateLimitCategory) -> Iterator[None]:
        """Check the configured policy on entry and record the event on success.

        Work done inside the block that raises is not counted against the
        caller.

        Raises:
            RateLimitExceeded: If the identity already used its allowance.
            StorageUnavailableError: If the limiter cannot read or record the
                event. The guarded work may already be committed by then.
        """
        policy = self.policy_for(category)
        if policy is None:
            yield
            return
        max_events, window_minutes = policy
        if not self.admit(identity, category, max_events, window_minutes):
            retry_after = self.retry_after(identity, category, window_minutes)
            logger.info(
                "Rate limit hit for %s on %s (%d per %d min)",
                identity,
                category,
                max_events,
                window_minutes,
            )
            raise RateLimitExceeded(str(category), retry_after)
        yield
        try:
            self.record(identity, category)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Rate limit record failed for %s/%s: %s", identity, category, exc)
            raise StorageUnavailableError() from exc

    def prune(self, older_than: timedelta) -> int:
        """Delete events older than `older_than`; returns the number removed."""
        cutoff = self._now() - older_than
        removed = (
            self.db.query(RateLimitCounter)
            .filter(RateLimitCounter.window_start < cutoff)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        logger.info("Pruned %d rate limit events older than %s", removed, cutoff)
        return removed
