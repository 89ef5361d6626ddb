# src/slapboard/services/moderation.py
"""Moderation services for Slapboard."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy.orm import Session

from slapboard.core.errors import NotFoundOrNotApproved, ValidationError
from slapboard.models import Action, Post, PostStatus

logger = logging.getLogger(__name__)

# Posts only ever leave the pending queue.
MODERATION_TARGETS = (PostStatus.APPROVED, PostStatus.REJECTED)


class ModerationService:
    """Privileged transitions on posts and actions.

    Only requests authenticated as an administrator reach this service.
    Deleting a post or an action removes every vote that references it.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def _post_or_404(self, post_id: int) -> Post:
        post = self.db.get(Post, post_id)
        if post is None:
            raise NotFoundOrNotApproved("post")
        return post

    def _action_or_404(self, action_id: int) -> Action:
        action = self.db.get(Action, action_id)
        if action is None:
            raise NotFoundOrNotApproved("action")
        return action

    def set_post_status(self, post_id: int, status: PostStatus | str) -> Post:
        """Approve or reject a post.

        Args:
            post_id: ID of the post to update
            status: Target moderation state

        Returns:
            The updated post

        Raises:
            ValidationError: If `status` is not `approved` or `rejected`
            NotFoundOrNotApproved: If the post does not exist
        """
        if status not in MODERATION_TARGETS:
            allowed = ", ".join(member.value for member in MODERATION_TARGETS)
            raise ValidationError(f"Status must be one of: {allowed}", field="status")
        target = PostStatus(status)

        post = self._post_or_404(post_id)
        previous = post.status
        post.status = target.value
        self.db.commit()
        self.db.refresh(post)
        logger.info("Post %s moved from %s to %s", post_id, previous, target.value)
        return post

    def bulk_approve(self, post_ids: Iterable[int]) -> list[Post]:
        """Approve several posts at once; unknown ids are skipped."""
        ids = sorted(set(post_ids))
        if not ids:
            return []
        posts = self.db.query(Post).filter(Post.id.in_(ids)).order_by(Post.id).all()
        for post in posts:
            post.status = PostStatus.APPROVED.value
        self.db.commit()
        missing = set(ids) - {post.id for post in posts}
        if missing:
            logger.warning("Bulk approve skipped unknown posts: %s", sorted(missing))
        logger.info("Bulk approved %d posts", len(posts))
        return posts

    def delete_post(self, post_id: int) -> None:
        """Delete a post together with all of its votes."""
        post = self._post_or_404(post_id)
        self.db.delete(post)
        self.db.commit()
        logger.info("Deleted post %s", post_id)

    def set_action_approval(self, action_id: int, approved: bool) -> Action:
        """Approve or revoke an action.

        Revoking hides the action's votes from every count without deleting
        them.
        """
        action = self._action_or_404(action_id)
        action.approved = approved
        self.db.commit()
        self.db.refresh(action)
        logger.info("Action '%s' approved=%s", action.name, approved)
        return action

    def delete_action(self, action_id: int) -> None:
        """Delete an action together with all of its votes."""
        action = self._action_or_404(action_id)
        name = action.name
        self.db.delete(action)
        self.db.commit()
        logger.info("Deleted action '%s'", name)
