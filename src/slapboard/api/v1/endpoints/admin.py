# src/slapboard/api/v1/endpoints/admin.py
"""Moderation endpoints for administrators."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, status

from slapboard.api.v1.dependencies import (
    AdminDep,
    AggregationDep,
    CatalogDep,
    ModerationDep,
    require_admin,
)
from slapboard.models import Action, Post, PostStatus
from slapboard.schemas.action import ActionResponse
from slapboard.schemas.moderation import (
    ActionApprovalUpdate,
    BulkApproveRequest,
    PostStatusUpdate,
)
from slapboard.schemas.post import PostResponse, PostWithVotes
from slapboard.schemas.stats import StatsResponse
from slapboard.services.aggregation import Stats

from .posts import annotate_posts

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/posts/pending", response_model=list[PostResponse])
async def pending_posts(
    catalog: CatalogDep,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> list[Post]:
    """Return posts awaiting moderation, newest first."""
    return catalog.list_posts_by_status(PostStatus.PENDING, limit=limit, offset=offset)


@router.get("/posts/approved", response_model=list[PostWithVotes])
async def approved_posts(
    catalog: CatalogDep,
    aggregation: AggregationDep,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> list[PostWithVotes]:
    """Return approved posts with their counts, newest first."""
    posts = catalog.list_posts_by_status(PostStatus.APPROVED, limit=limit, offset=offset)
    return annotate_posts(aggregation, posts)


@router.post("/posts/bulk-approve", response_model=list[PostResponse])
async def bulk_approve(
    payload: BulkApproveRequest,
    moderation: ModerationDep,
    admin: AdminDep,
) -> list[Post]:
    """Approve several posts at once."""
    logger.info("Admin %s bulk approving %d posts", admin, len(payload.post_ids))
    return moderation.bulk_approve(payload.post_ids)


@router.patch("/posts/{post_id}", response_model=PostResponse)
async def update_post_status(
    post_id: int,
    payload: PostStatusUpdate,
    moderation: ModerationDep,
    admin: AdminDep,
) -> Post:
    """Approve, reject or re-queue a post."""
    logger.info("Admin %s setting post %s to %s", admin, post_id, payload.status)
    return moderation.set_post_status(post_id, payload.status)


@router.delete("/posts/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(post_id: int, moderation: ModerationDep, admin: AdminDep) -> None:
    """Delete a post and every vote cast on it."""
    logger.info("Admin %s deleting post %s", admin, post_id)
    moderation.delete_post(post_id)


@router.get("/actions", response_model=list[ActionResponse])
async def list_actions(
    catalog: CatalogDep,
    approved: bool | None = Query(None, description="Filter by approval state"),
) -> list[Action]:
    """Return all actions, optionally filtered by approval."""
    return catalog.list_actions(approved=approved)


@router.patch("/actions/{action_id}", response_model=ActionResponse)
async def update_action_approval(
    action_id: int,
    payload: ActionApprovalUpdate,
    moderation: ModerationDep,
    admin: AdminDep,
) -> Action:
    """Approve or revoke an action."""
    logger.info("Admin %s setting action %s approved=%s", admin, action_id, payload.approved)
    return moderation.set_action_approval(action_id, payload.approved)


@router.delete("/actions/{action_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_action(action_id: int, moderation: ModerationDep, admin: AdminDep) -> None:
    """Delete an action and every vote cast with it."""
    logger.info("Admin %s deleting action %s", admin, action_id)
    moderation.delete_action(action_id)


@router.get("/stats", response_model=StatsResponse)
async def admin_stats(aggregation: AggregationDep) -> Stats:
    """Return the dashboard counters."""
    return aggregation.stats()
