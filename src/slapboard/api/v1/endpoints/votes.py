# src/slapboard/api/v1/endpoints/votes.py
"""Vote-related endpoints for the Slapboard API."""

from fastapi import APIRouter, Response, status

from slapboard.api.v1.dependencies import (
    AggregationDep,
    CatalogDep,
    LedgerDep,
    RateLimiterDep,
    VoterDep,
)
from slapboard.schemas.vote import MyVotesResponse, VoteCreate, VoteResponse
from slapboard.services.rate_limit import RateLimitCategory

router = APIRouter(prefix="/votes", tags=["votes"])


@router.post("/", response_model=VoteResponse, status_code=status.HTTP_201_CREATED)
async def cast_vote(
    vote_data: VoteCreate,
    response: Response,
    voter: VoterDep,
    catalog: CatalogDep,
    ledger: LedgerDep,
    aggregation: AggregationDep,
    limiter: RateLimiterDep,
) -> VoteResponse:
    """Cast a vote on an approved post with an approved action.

    Args:
        vote_data: Target post and action
        response: Outgoing response, used to switch to 200 on un-vote
        voter: Resolved voter identity
        catalog: Catalog used to check approval
        ledger: Vote ledger applying the duplicate policy
        aggregation: Aggregation engine for the updated counts
        limiter: Rate limiter (only active when vote limits are enabled)

    Returns:
        The recorded vote and the post's updated counts

    Raises:
        NotFoundOrNotApproved: If the post or action is missing or unapproved
        DuplicateVoteError: If the voter already used this action on the post
        RateLimitExceeded: If vote rate limiting is enabled and exhausted
    """
    with limiter.guard(voter.address, RateLimitCategory.VOTE):
        catalog.get_approved_post(vote_data.post_id)
        catalog.get_approved_action(vote_data.action_id)
        result = ledger.create_vote(vote_data.post_id, vote_data.action_id, voter)

    counts = aggregation.post_vote_counts(vote_data.post_id)
    if result.removed or result.vote is None:
        response.status_code = status.HTTP_200_OK
        return VoteResponse(
            post_id=vote_data.post_id,
            action_id=vote_data.action_id,
            removed=True,
            votes=counts,
        )

    return VoteResponse(
        id=result.vote.id,
        post_id=result.vote.post_id,
        action_id=result.vote.action_id,
        created_at=result.vote.created_at,
        votes=counts,
    )


@router.get("/{post_id}/mine", response_model=MyVotesResponse)
async def my_votes(
    post_id: int,
    voter: VoterDep,
    catalog: CatalogDep,
    ledger: LedgerDep,
) -> MyVotesResponse:
    """Return the action ids the caller has already used on a post."""
    post = catalog.get_approved_post(post_id)
    return MyVotesResponse(post_id=post.id, action_ids=ledger.voted_actions(post.id, voter.key))
