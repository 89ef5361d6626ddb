# src/slapboard/services/__init__.py
"""Business logic services for Slapboard."""

from .aggregation import AggregationEngine, RankedPost, SortStrategy, Stats
from .catalog import CatalogService
from .identity import IdentityResolver, VoterIdentity
from .ledger import VoteDuplicatePolicy, VoteLedger, VoteResult
from .moderation import ModerationService
from .rate_limit import RateLimitCategory, RateLimiter

__all__ = [
    "AggregationEngine",
    "CatalogService",
    "IdentityResolver",
    "ModerationService",
    "RankedPost",
    "RateLimitCategory",
    "RateLimiter",
    "SortStrategy",
    "Stats",
    "VoteDuplicatePolicy",
    "VoteLedger",
    "VoteResult",
    "VoterIdentity",
]
