"""Domain exceptions raised by the Slapboard service layer.

The HTTP layer maps each of these onto a status code in
`slapboard.api.errors`; services never raise `HTTPException` themselves.
"""

from __future__ import annotations


class SlapboardError(Exception):
    """Base class for all recoverable, request-scoped errors."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(SlapboardError):
    """Malformed input, reported with the offending field."""

    status_code = 400

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class NotFoundOrNotApproved(SlapboardError):
    """A post or action is missing or has not been approved.

    The two cases are reported identically so moderation state does not leak.
    """

    status_code = 404

    def __init__(self, kind: str) -> None:
        super().__init__(f"{kind.capitalize()} not found or not approved")
        self.kind = kind


class DuplicateVoteError(SlapboardError):
    """The voter already cast this action on this post."""

    status_code = 400

    def __init__(self) -> None:
        super().__init__("You have already voted with this action on this post")


class RateLimitExceeded(SlapboardError):
    """Too many events of one category from a single address."""

    status_code = 429

    def __init__(self, category: str, retry_after: int) -> None:
        super().__init__("Rate limit exceeded. Please try again later.")
        self.category = category
        self.retry_after = retry_after


class StorageUnavailableError(SlapboardError):
    """The backing store failed while guarding an abuse-sensitive path."""

    status_code = 503

    def __init__(self, message: str = "Storage temporarily unavailable") -> None:
        super().__init__(message)
