# src/slapboard/services/aggregation.py
"""Vote counts, leaderboards and trending rankings.

Every figure here is derived from the vote table at query time; nothing is
cached or stored as a counter. Only approved posts and approved actions
contribute to rankings.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import StrEnum

from sqlalchemy import desc, func, select
from sqlalchemy.orm import Session
from sqlalchemy.sql import ColumnElement, Subquery

from slapboard.core.errors import ValidationError
from slapboard.core.settings import settings
from slapboard.db.time import utcnow
from slapboard.models import Action, Post, PostStatus, Vote

logger = logging.getLogger(__name__)

_ACTION_SORT_PREFIX = "action:"


class SortKind(StrEnum):
    """Closed set of orderings supported by `list_posts`."""

    RECENT = "recent"
    VOTES = "votes"
    TRENDING = "trending"
    ACTION = "action"


@dataclass(frozen=True)
class SortStrategy:
    """A post ordering; `action_name` is only set for `SortKind.ACTION`."""

    kind: SortKind = SortKind.RECENT
    action_name: str | None = None

    @classmethod
    def parse(cls, sort: str | None = None, action: str | None = None) -> SortStrategy:
        """Build a strategy from request parameters.

        An explicit `action` wins over `sort`. `sort` also accepts the
        ``action:<name>`` form.

        Raises:
            ValidationError: If `sort` names an unknown ordering.
        """
        if action:
            return cls(SortKind.ACTION, action.strip().lower())
        value = (sort or SortKind.RECENT.value).strip().lower()
        if value.startswith(_ACTION_SORT_PREFIX):
            name = value[len(_ACTION_SORT_PREFIX):]
            if not name:
                raise ValidationError("Action sort requires an action name", field="sort")
            return cls(SortKind.ACTION, name)
        if value == SortKind.ACTION.value:
            raise ValidationError("Action sort requires an action name", field="sort")
        try:
            return cls(SortKind(value))
        except ValueError as err:
            allowed = "recent, votes, trending, action:<name>"
            raise ValidationError(f"Sort must be one of: {allowed}", field="sort") from err


@dataclass(frozen=True)
class RankedPost:
    """A post paired with the vote count it was ranked by."""

    post: Post
    vote_count: int


@dataclass(frozen=True)
class Stats:
    """Aggregate counters for the public site and the admin dashboard."""

    total_approved_posts: int
    total_votes: int
    pending_posts: int
    pending_actions: int


class AggregationEngine:
    """Read-only queries over the vote ledger and the catalog."""

    def __init__(self, db: Session, clock: Callable[[], datetime] = utcnow) -> None:
        self.db = db
        self._now = clock

    # --- Building blocks -------------------------------------------------------------
    def _vote_counts(self, *conditions: ColumnElement[bool]) -> Subquery:
        """Per-post vote counts over approved actions, narrowed by `conditions`."""
        return (
            select(
                Vote.post_id.label("post_id"),
                func.count(Vote.id).label("vote_count"),
            )
            .join(Action, Action.id == Vote.action_id)
            .where(Action.approved.is_(True), *conditions)
            .group_by(Vote.post_id)
            .subquery()
        )

    def _ranked(self, counts: Subquery, limit: int) -> list[RankedPost]:
        stmt = (
            select(Post, counts.c.vote_count)
            .join(counts, counts.c.post_id == Post.id)
            .where(Post.status == PostStatus.APPROVED.value)
            .order_by(desc(counts.c.vote_count), Post.id.asc())
            .limit(limit)
        )
        return [RankedPost(post=post, vote_count=int(count)) for post, count in self.db.execute(stmt)]

    def _since(self, hours: float) -> datetime:
        return self._now() - timedelta(hours=hours)

    # --- Counts ----------------------------------------------------------------------
    def post_vote_counts(self, post_id: int) -> dict[str, int]:
        """Return `{action name: count}` for one approved post.

        Actions without votes are omitted. Posts that are missing or not
        approved yield an empty mapping.
        """
        return self.vote_counts_for_posts([post_id]).get(post_id, {})

    def vote_counts_for_posts(self, post_ids: Iterable[int]) -> dict[int, dict[str, int]]:
        """Batch form of `post_vote_counts`, keyed by post id."""
        ids = list(post_ids)
        if not ids:
            return {}
        stmt = (
            select(Vote.post_id, Action.name, func.count(Vote.id))
            .join(Action, Action.id == Vote.action_id)
            .join(Post, Post.id == Vote.post_id)
            .where(
                Vote.post_id.in_(ids),
                Action.approved.is_(True),
                Post.status == PostStatus.APPROVED.value,
            )
            .group_by(Vote.post_id, Action.id, Action.name)
            .order_by(Vote.post_id, desc(func.count(Vote.id)), Action.name)
        )
        result: dict[int, dict[str, int]] = defaultdict(dict)
        for post_id, action_name, count in self.db.execute(stmt):
            result[post_id][action_name] = int(count)
        return dict(result)

    # --- Rankings --------------------------------------------------------------------
    def leaderboard(self, action_id: int, limit: int = 10) -> list[RankedPost]:
        """Top approved posts by votes for one action.

        Ties are broken by ascending post id, so a shorter leaderboard is
        always a prefix of a longer one.
        """
        return self._ranked(self._vote_counts(Vote.action_id == action_id), limit)

    def trending(self, window_hours: float = 24, limit: int = 10) -> list[RankedPost]:
        """Top approved posts by votes cast in the last `window_hours`, all actions combined."""
        return self._ranked(self._vote_counts(Vote.created_at >= self._since(window_hours)), limit)

    def list_posts(
        self,
        status: PostStatus | None = PostStatus.APPROVED,
        category: str | None = None,
        sort: SortStrategy | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[Post]:
        """Return a page of posts filtered by status and category.

        An action sort naming anything other than an approved action returns
        an empty page.
        """
        strategy = sort or SortStrategy()
        filters: list[ColumnElement[bool]] = []
        if status is not None:
            filters.append(Post.status == status.value)
        if category:
            filters.append(Post.category == category)

        if strategy.kind is SortKind.RECENT:
            stmt = (
                select(Post)
                .where(*filters)
                .order_by(desc(Post.created_at), desc(Post.id))
                .limit(limit)
                .offset(offset)
            )
            return list(self.db.scalars(stmt))

        if strategy.kind is SortKind.VOTES:
            counts = self._vote_counts()
        elif strategy.kind is SortKind.TRENDING:
            counts = self._vote_counts(
                Vote.created_at >= self._since(settings.trending_window_hours)
            )
        else:
            action = (
                self.db.query(Action)
                .filter(Action.name == strategy.action_name, Action.approved.is_(True))
                .first()
            )
            if action is None:
                logger.debug("Sort by unknown action %r yields no posts", strategy.action_name)
                return []
            counts = self._vote_counts(Vote.action_id == action.id)

        vote_count = func.coalesce(counts.c.vote_count, 0)
        stmt = (
            select(Post)
            .outerjoin(counts, counts.c.post_id == Post.id)
            .where(*filters)
            .order_by(desc(vote_count), Post.id.asc())
            .limit(limit)
            .offset(offset)
        )
        return list(self.db.scalars(stmt))

    def search_posts(self, query: str, category: str | None = None, limit: int = 50) -> list[Post]:
        """Case-insensitive substring search over approved post names, newest first."""
        escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        stmt = select(Post).where(
            Post.status == PostStatus.APPROVED.value,
            Post.name.ilike(f"%{escaped}%", escape="\\"),
        )
        if category:
            stmt = stmt.where(Post.category == category)
        stmt = stmt.order_by(desc(Post.created_at), desc(Post.id)).limit(limit)
        return list(self.db.scalars(stmt))

    # --- Stats -----------------------------------------------------------------------
    def stats(self) -> Stats:
        """Return aggregate counters derived from current state."""
        approved = (
            self.db.query(func.count(Post.id))
            .filter(Post.status == PostStatus.APPROVED.value)
            .scalar()
            or 0
        )
        pending = (
            self.db.query(func.count(Post.id))
            .filter(Post.status == PostStatus.PENDING.value)
            .scalar()
            or 0
        )
        total_votes = self.db.query(func.count(Vote.id)).scalar() or 0
        pending_actions = (
            self.db.query(func.count(Action.id))
            .filter(Action.approved.is_(False))
            .scalar()
            or 0
        )
        return Stats(
            total_approved_posts=int(approved),
            total_votes=int(total_votes),
            pending_posts=int(pending),
            pending_actions=int(pending_actions),
        )
