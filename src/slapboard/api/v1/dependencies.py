"""Shared API dependencies for sessions, services, voter identity and admin auth."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from slapboard.core.security import decode_admin_token
from slapboard.core.settings import settings
from slapboard.db.session import get_db
from slapboard.services import (
    AggregationEngine,
    CatalogService,
    IdentityResolver,
    ModerationService,
    RateLimiter,
    VoteLedger,
    VoterIdentity,
)

# HTTP Bearer scheme for admin tokens; missing credentials are reported as 401 below
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_catalog(db: SessionDep) -> CatalogService:
    """Return a catalog service bound to the request session."""
    return CatalogService(db)


def get_ledger(db: SessionDep) -> VoteLedger:
    """Return a vote ledger using the configured duplicate policy."""
    return VoteLedger(db)


def get_aggregation(db: SessionDep) -> AggregationEngine:
    """Return an aggregation engine bound to the request session."""
    return AggregationEngine(db)


def get_rate_limiter(db: SessionDep) -> RateLimiter:
    """Return a rate limiter bound to the request session."""
    return RateLimiter(db)


def get_moderation(db: SessionDep) -> ModerationService:
    """Return a moderation service bound to the request session."""
    return ModerationService(db)


def get_identity_resolver() -> IdentityResolver:
    """Return a resolver configured from settings."""
    return IdentityResolver()


CatalogDep = Annotated[CatalogService, Depends(get_catalog)]
LedgerDep = Annotated[VoteLedger, Depends(get_ledger)]
AggregationDep = Annotated[AggregationEngine, Depends(get_aggregation)]
RateLimiterDep = Annotated[RateLimiter, Depends(get_rate_limiter)]
ModerationDep = Annotated[ModerationService, Depends(get_moderation)]
ResolverDep = Annotated[IdentityResolver, Depends(get_identity_resolver)]


def _client_host(request: Request) -> str | None:
    return request.client.host if request.client else None


def get_client_address(request: Request, resolver: ResolverDep) -> str:
    """Return the normalized network address of the caller."""
    return resolver.resolve_address(request.headers, _client_host(request))


def get_voter(request: Request, response: Response, resolver: ResolverDep) -> VoterIdentity:
    """Resolve the caller's voter identity.

    A freshly minted device token is written back as a long-lived cookie so
    the same browser keeps its identity across requests.

    Args:
        request: Incoming request carrying headers and cookies
        response: Outgoing response the cookie is attached to
        resolver: Configured identity resolver

    Returns:
        The resolved voter identity
    """
    voter = resolver.resolve(request.headers, _client_host(request), request.cookies)
    if voter.minted and voter.device_id:
        response.set_cookie(
            key=resolver.cookie_name,
            value=voter.device_id,
            max_age=settings.device_cookie_max_age_days * 24 * 60 * 60,
            httponly=True,
            samesite="lax",
            secure=not settings.debug,
        )
    return voter


ClientAddressDep = Annotated[str, Depends(get_client_address)]
VoterDep = Annotated[VoterIdentity, Depends(get_voter)]


def require_admin(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> str:
    """Return the subject of a valid admin token.

    Raises:
        HTTPException: 401 if the token is missing, invalid, expired or lacks
            the admin role
    """
    subject = decode_admin_token(credentials.credentials) if credentials else None
    if subject is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return subject


# Type alias for admin subject dependency
AdminDep = Annotated[str, Depends(require_admin)]
