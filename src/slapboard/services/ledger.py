# src/slapboard/services/ledger.py
"""Append-only vote ledger with a configurable duplicate policy."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from slapboard.core.errors import (
    DuplicateVoteError,
    NotFoundOrNotApproved,
    SlapboardError,
    StorageUnavailableError,
)
from slapboard.core.settings import settings
from slapboard.db.time import utcnow
from slapboard.models import Action, Post, Vote
from slapboard.services.identity import VoterIdentity

logger = logging.getLogger(__name__)


class VoteDuplicatePolicy(StrEnum):
    """How repeated (post, action, voter) votes are treated."""

    # One vote per triple; repeats are rejected.
    STRICT_REJECT = "strict-reject"
    # One vote per triple; a repeat removes the earlier vote.
    STRICT_TOGGLE = "strict-toggle"
    # Every vote is recorded; the identity only tags provenance.
    OPEN = "open"

    @property
    def is_strict(self) -> bool:
        return self is not VoteDuplicatePolicy.OPEN


@dataclass(frozen=True)
class VoteResult:
    """Outcome of a vote request."""

    vote: Vote | None
    removed: bool = False


class VoteLedger:
    """Record votes. Callers must check that post and action are approved first."""

    def __init__(
        self,
        db: Session,
        policy: VoteDuplicatePolicy | str | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.db = db
        self.policy = VoteDuplicatePolicy(policy or settings.vote_duplicate_policy)
        self._now = clock

    def _existing_votes(self, post_id: int, action_id: int, voter_key: str) -> list[Vote]:
        return (
            self.db.query(Vote)
            .filter(
                Vote.post_id == post_id,
                Vote.action_id == action_id,
                Vote.voter_key == voter_key,
            )
            .all()
        )

    def has_voted(self, post_id: int, action_id: int, voter_key: str) -> bool:
        """Return True if the voter already has a vote for this post and action."""
        return (
            self.db.query(Vote.id)
            .filter(
                Vote.post_id == post_id,
                Vote.action_id == action_id,
                Vote.voter_key == voter_key,
            )
            .first()
            is not None
        )

    def voted_actions(self, post_id: int, voter_key: str) -> list[int]:
        """Return the ids of actions the voter has used on a post."""
        rows = (
            self.db.query(Vote.action_id)
            .filter(Vote.post_id == post_id, Vote.voter_key == voter_key)
            .distinct()
            .order_by(Vote.action_id)
            .all()
        )
        return [action_id for (action_id,) in rows]

    def create_vote(self, post_id: int, action_id: int, voter: VoterIdentity) -> VoteResult:
        """Record a vote subject to the duplicate policy.

        Args:
            post_id: Approved post being voted on.
            action_id: Approved action being cast.
            voter: Resolved identity of the requester.

        Returns:
            The created vote, or `removed=True` when toggle mode withdrew an
            existing vote instead.

        Raises:
            DuplicateVoteError: In strict-reject mode when the voter already
                cast this action on this post.
            NotFoundOrNotApproved: If the post or action disappeared before
                the vote was written.
            StorageUnavailableError: If the duplicate check or the write fails.
        """
        if self.policy.is_strict:
            try:
                existing = self._existing_votes(post_id, action_id, voter.key)
            except SQLAlchemyError as exc:
                logger.error("Duplicate check failed for post %s: %s", post_id, exc)
                raise StorageUnavailableError() from exc

            if existing:
                if self.policy is VoteDuplicatePolicy.STRICT_REJECT:
                    logger.info(
                        "Rejected duplicate vote on post %s action %s", post_id, action_id
                    )
                    raise DuplicateVoteError()
                for vote in existing:
                    self.db.delete(vote)
                self._commit()
                logger.info("Withdrew vote on post %s action %s", post_id, action_id)
                return VoteResult(vote=None, removed=True)

        vote = Vote(
            post_id=post_id,
            action_id=action_id,
            ip_address=voter.address,
            device_id=voter.device_id,
            voter_key=voter.key,
            dedup_key=voter.key if self.policy.is_strict else None,
            created_at=self._now(),
        )
        self.db.add(vote)
        self._commit_insert(post_id, action_id, vote.dedup_key)
        self.db.refresh(vote)
        logger.info("Recorded vote %s on post %s action %s", vote.id, post_id, action_id)
        return VoteResult(vote=vote)

    def delete_vote(self, post_id: int, action_id: int, voter_key: str) -> int:
        """Withdraw the voter's votes for a post and action; returns rows removed."""
        removed = 0
        for vote in self._existing_votes(post_id, action_id, voter_key):
            self.db.delete(vote)
            removed += 1
        self._commit()
        return removed

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Vote write failed: %s", exc)
            raise StorageUnavailableError() from exc

    def _commit_insert(self, post_id: int, action_id: int, dedup_key: str | None) -> None:
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise self._classify_conflict(post_id, action_id, dedup_key) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Vote write failed: %s", exc)
            raise StorageUnavailableError() from exc

    def _classify_conflict(
        self, post_id: int, action_id: int, dedup_key: str | None
    ) -> SlapboardError:
        """Map a rejected insert to the error the caller should see."""
        try:
            if dedup_key is not None:
                taken = (
                    self.db.query(Vote.id)
                    .filter(
                        Vote.post_id == post_id,
                        Vote.action_id == action_id,
                        Vote.dedup_key == dedup_key,
                    )
                    .first()
                )
                if taken is not None:
                    # A concurrent request won the race for the same slot.
                    return DuplicateVoteError()
            if self.db.get(Post, post_id) is None:
                return NotFoundOrNotApproved("post")
            if self.db.get(Action, action_id) is None:
                return NotFoundOrNotApproved("action")
        except SQLAlchemyError as exc:
            logger.error("Could not classify rejected vote on post %s: %s", post_id, exc)
            return StorageUnavailableError()
        logger.error("Vote on post %s action %s violated a constraint", post_id, action_id)
        return StorageUnavailableError()
