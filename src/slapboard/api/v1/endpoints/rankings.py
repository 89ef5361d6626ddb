# src/slapboard/api/v1/endpoints/rankings.py
"""Leaderboard, trending and statistics endpoints."""

from fastapi import APIRouter, Query

from slapboard.api.v1.dependencies import AggregationDep, CatalogDep
from slapboard.core.errors import NotFoundOrNotApproved
from slapboard.schemas.post import PostResponse
from slapboard.schemas.ranking import RankedPostResponse
from slapboard.schemas.stats import StatsResponse
from slapboard.services.aggregation import RankedPost, Stats

router = APIRouter(tags=["rankings"])


def _ranked(rows: list[RankedPost]) -> list[RankedPostResponse]:
    return [
        RankedPostResponse(
            rank=position,
            post=PostResponse.model_validate(row.post),
            vote_count=row.vote_count,
        )
        for position, row in enumerate(rows, start=1)
    ]


@router.get("/leaderboard", response_model=list[RankedPostResponse])
async def leaderboard(
    catalog: CatalogDep,
    aggregation: AggregationDep,
    action: str = Query("love", description="Action to rank by"),
    limit: int = Query(10, ge=1, le=100),
) -> list[RankedPostResponse]:
    """Return the top approved posts for one approved action."""
    target = catalog.get_approved_action_by_name(action)
    if target is None:
        raise NotFoundOrNotApproved("action")
    return _ranked(aggregation.leaderboard(target.id, limit=limit))


@router.get("/trending", response_model=list[RankedPostResponse])
async def trending(
    aggregation: AggregationDep,
    hours: float = Query(24, gt=0, le=24 * 30, description="Size of the trailing window"),
    limit: int = Query(10, ge=1, le=100),
) -> list[RankedPostResponse]:
    """Return the approved posts with the most votes in the last `hours`."""
    return _ranked(aggregation.trending(window_hours=hours, limit=limit))


@router.get("/stats", response_model=StatsResponse)
async def stats(aggregation: AggregationDep) -> Stats:
    """Return aggregate counters."""
    return aggregation.stats()
