# src/slapboard/services/catalog.py
"""Catalog of votable posts and voting actions."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from sqlalchemy import desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from slapboard.core.errors import NotFoundOrNotApproved, ValidationError
from slapboard.core.settings import settings
from slapboard.models import Action, Post, PostCategory, PostStatus

logger = logging.getLogger(__name__)

ACTION_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9_-]{0,49}$")
MAX_POST_NAME_LENGTH = 255
MAX_IMAGE_URL_LENGTH = 2048


def normalize_action_name(name: str) -> str:
    """Return the canonical lowercase form of an action name.

    Raises:
        ValidationError: If the result is not a lowercase token.
    """
    candidate = (name or "").strip().lower()
    if not ACTION_NAME_PATTERN.match(candidate):
        raise ValidationError(
            "Action names must be 1-50 characters: a letter followed by letters, "
            "digits, '-' or '_'",
            field="name",
        )
    return candidate


def validate_category(category: str) -> PostCategory:
    """Return the matching `PostCategory` or raise `ValidationError`."""
    try:
        return PostCategory(category)
    except ValueError as err:
        allowed = ", ".join(member.value for member in PostCategory)
        raise ValidationError(f"Category must be one of: {allowed}", field="category") from err


class CatalogService:
    """Read and write access to posts and actions."""

    def __init__(self, db: Session) -> None:
        self.db = db

    # --- Posts -----------------------------------------------------------------------
    def submit_post(self, name: str, category: str, image_url: str) -> Post:
        """Create a post awaiting moderation.

        The status is always `pending`, whatever the caller asks for.
        """
        clean_name = (name or "").strip()
        if not clean_name:
            raise ValidationError("Name is required", field="name")
        if len(clean_name) > MAX_POST_NAME_LENGTH:
            raise ValidationError(
                f"Name must be at most {MAX_POST_NAME_LENGTH} characters",
                field="name",
            )
        clean_url = (image_url or "").strip()
        if not clean_url:
            raise ValidationError("Image is required", field="image_url")
        if len(clean_url) > MAX_IMAGE_URL_LENGTH:
            raise ValidationError("Image reference is too long", field="image_url")

        post = Post(
            name=clean_name,
            category=validate_category(category).value,
            image_url=clean_url,
            status=PostStatus.PENDING.value,
        )
        self.db.add(post)
        self.db.commit()
        self.db.refresh(post)
        logger.info("Post %s submitted for moderation (%s)", post.id, post.category)
        return post

    def get_post(self, post_id: int) -> Post | None:
        """Return a post by id regardless of status."""
        return self.db.get(Post, post_id)

    def get_approved_post(self, post_id: int) -> Post:
        """Return an approved post.

        Raises:
            NotFoundOrNotApproved: If the post is missing or not approved.
        """
        post = self.get_post(post_id)
        if post is None or not post.is_approved:
            raise NotFoundOrNotApproved("post")
        return post

    def list_posts_by_status(
        self,
        status: PostStatus,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Post]:
        """Return posts in one moderation state, newest first."""
        query = (
            self.db.query(Post)
            .filter(Post.status == status.value)
            .order_by(desc(Post.created_at), desc(Post.id))
            .offset(offset)
        )
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    # --- Actions ---------------------------------------------------------------------
    def submit_action(self, name: str) -> Action:
        """Create a custom action suggestion awaiting approval.

        Names from the default set are created approved and flagged as
        defaults instead.

        Raises:
            ValidationError: If the name is malformed or already taken.
        """
        clean_name = normalize_action_name(name)
        if self.get_action_by_name(clean_name) is not None:
            raise ValidationError(f"Action '{clean_name}' already exists", field="name")

        # A default name deleted by a moderator comes back as a default.
        is_default = clean_name in {n.strip().lower() for n in settings.default_actions}
        action = Action(name=clean_name, approved=is_default, is_default=is_default)
        self.db.add(action)
        try:
            self.db.commit()
        except IntegrityError as err:
            self.db.rollback()
            raise ValidationError(
                f"Action '{clean_name}' already exists",
                field="name",
            ) from err
        self.db.refresh(action)
        logger.info("Action '%s' suggested", clean_name)
        return action

    def list_actions(self, approved: bool | None = None) -> list[Action]:
        """Return actions, defaults first, then newest first.

        Args:
            approved: Restrict to approved (True) or pending (False) actions;
                None returns everything.
        """
        query = self.db.query(Action)
        if approved is not None:
            query = query.filter(Action.approved.is_(approved))
        return query.order_by(
            desc(Action.is_default),
            desc(Action.created_at),
            desc(Action.id),
        ).all()

    def get_action(self, action_id: int) -> Action | None:
        """Return an action by id regardless of approval."""
        return self.db.get(Action, action_id)

    def get_action_by_name(self, name: str) -> Action | None:
        """Return an action by its exact (lowercase) name."""
        return self.db.query(Action).filter(Action.name == name.strip().lower()).first()

    def get_approved_action(self, action_id: int) -> Action:
        """Return an approved action.

        Raises:
            NotFoundOrNotApproved: If the action is missing or not approved.
        """
        action = self.get_action(action_id)
        if action is None or not action.approved:
            raise NotFoundOrNotApproved("action")
        return action

    def get_approved_action_by_name(self, name: str) -> Action | None:
        """Return the approved action with this name, or None."""
        action = self.get_action_by_name(name)
        if action is None or not action.approved:
            return None
        return action

    def ensure_default_actions(self, names: Iterable[str] | None = None) -> list[Action]:
        """Make sure every default action exists, approved and flagged as default.

        Safe to run on every start: existing names are updated in place rather
        than inserted again. If another process seeds the same names at the
        same time, the losing insert is rolled back and the pass repeated.

        Returns:
            The actions that were created by this call.
        """
        wanted = [
            normalize_action_name(raw_name)
            for raw_name in (names if names is not None else settings.default_actions)
        ]
        try:
            created = self._seed_default_actions(wanted)
        except IntegrityError:
            self.db.rollback()
            logger.info("Default actions were seeded concurrently; re-checking")
            created = self._seed_default_actions(wanted)
        if created:
            logger.info("Seeded default actions: %s", ", ".join(a.name for a in created))
        return created

    def _seed_default_actions(self, names: list[str]) -> list[Action]:
        created: list[Action] = []
        for name in names:
            existing = self.get_action_by_name(name)
            if existing is None:
                action = Action(name=name, approved=True, is_default=True)
                self.db.add(action)
                created.append(action)
                continue
            if not existing.approved or not existing.is_default:
                existing.approved = True
                existing.is_default = True
        self.db.commit()
        return created
