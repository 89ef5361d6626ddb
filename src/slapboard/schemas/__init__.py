# src/slapboard/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .action import ActionCreate, ActionResponse
from .common import ErrorDetail, ErrorResponse
from .moderation import ActionApprovalUpdate, BulkApproveRequest, PostStatusUpdate
from .post import PostCreate, PostResponse, PostWithVotes
from .ranking import RankedPostResponse
from .stats import StatsResponse
from .vote import MyVotesResponse, VoteCreate, VoteResponse

__all__ = [
    "ActionCreate", "ActionResponse",
    "ErrorDetail", "ErrorResponse",
    "ActionApprovalUpdate", "BulkApproveRequest", "PostStatusUpdate",
    "PostCreate", "PostResponse", "PostWithVotes",
    "RankedPostResponse",
    "StatsResponse",
    "MyVotesResponse", "VoteCreate", "VoteResponse",
]
