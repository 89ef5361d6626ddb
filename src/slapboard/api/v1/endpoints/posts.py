# src/slapboard/api/v1/endpoints/posts.py
"""Post-related endpoints for the Slapboard API."""

from __future__ import annotations

from collections.abc import Sequence

from fastapi import APIRouter, Query, status

from slapboard.api.v1.dependencies import (
    AggregationDep,
    CatalogDep,
    ClientAddressDep,
    RateLimiterDep,
)
from slapboard.models import Post, PostStatus
from slapboard.schemas.post import PostCreate, PostResponse, PostWithVotes
from slapboard.services.aggregation import AggregationEngine, SortStrategy
from slapboard.services.catalog import validate_category
from slapboard.services.rate_limit import RateLimitCategory

router = APIRouter(prefix="/posts", tags=["posts"])


def with_votes(post: Post, votes: dict[str, int]) -> PostWithVotes:
    """Build the public representation of a post with its counts."""
    base = PostResponse.model_validate(post).model_dump()
    return PostWithVotes(**base, votes=votes, total_votes=sum(votes.values()))


def annotate_posts(aggregation: AggregationEngine, posts: Sequence[Post]) -> list[PostWithVotes]:
    """Attach vote counts to a page of posts with one aggregate query."""
    counts = aggregation.vote_counts_for_posts(post.id for post in posts)
    return [with_votes(post, counts.get(post.id, {})) for post in posts]


@router.get("/", response_model=list[PostWithVotes])
async def list_posts(
    aggregation: AggregationDep,
    category: str | None = Query(None, description="film, fictional or political"),
    sort: str = Query("recent", description="recent, votes, trending or action:<name>"),
    action: str | None = Query(None, description="Sort by votes for this action"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> list[PostWithVotes]:
    """List approved posts.

    Args:
        aggregation: Aggregation engine
        category: Optional category filter
        sort: Ordering strategy
        action: Shortcut for ``sort=action:<name>``
        limit: Page size
        offset: Number of posts to skip

    Returns:
        Approved posts annotated with per-action counts
    """
    if category:
        category = validate_category(category).value
    strategy = SortStrategy.parse(sort, action)
    posts = aggregation.list_posts(
        status=PostStatus.APPROVED,
        category=category,
        sort=strategy,
        limit=limit,
        offset=offset,
    )
    return annotate_posts(aggregation, posts)


@router.get("/search", response_model=list[PostWithVotes])
async def search_posts(
    aggregation: AggregationDep,
    q: str = Query(..., min_length=1, max_length=100),
    category: str | None = Query(None),
) -> list[PostWithVotes]:
    """Search approved posts by name."""
    if category:
        category = validate_category(category).value
    posts = aggregation.search_posts(q.strip(), category=category)
    return annotate_posts(aggregation, posts)


@router.get("/{post_id}", response_model=PostWithVotes)
async def get_post(
    post_id: int,
    catalog: CatalogDep,
    aggregation: AggregationDep,
) -> PostWithVotes:
    """Return one approved post with its counts."""
    post = catalog.get_approved_post(post_id)
    return with_votes(post, aggregation.post_vote_counts(post.id))


@router.get("/{post_id}/votes", response_model=dict[str, int])
async def get_post_votes(
    post_id: int,
    catalog: CatalogDep,
    aggregation: AggregationDep,
) -> dict[str, int]:
    """Return `{action name: count}` for an approved post."""
    post = catalog.get_approved_post(post_id)
    return aggregation.post_vote_counts(post.id)


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def submit_post(
    post_data: PostCreate,
    catalog: CatalogDep,
    limiter: RateLimiterDep,
    client_address: ClientAddressDep,
) -> Post:
    """Submit a post for moderation.

    The post is created pending whatever the request says. Each address may
    submit a limited number of posts per window.
    """
    with limiter.guard(client_address, RateLimitCategory.POST_SUBMISSION):
        post = catalog.submit_post(post_data.name, post_data.category, post_data.image_url)
    return post
