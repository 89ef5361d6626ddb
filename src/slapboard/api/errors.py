"""Map domain exceptions onto JSON error responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from slapboard.core.errors import (
    RateLimitExceeded,
    SlapboardError,
    StorageUnavailableError,
    ValidationError,
)
from slapboard.schemas.common import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)


def _error_response(exc: SlapboardError, headers: dict[str, str] | None = None) -> JSONResponse:
    errors = []
    if isinstance(exc, ValidationError):
        errors.append(ErrorDetail(field=exc.field, message=exc.message))
    payload = ErrorResponse(detail=exc.message, errors=errors)
    return JSONResponse(
        status_code=exc.status_code,
        content=payload.model_dump(),
        headers=headers,
    )


def install_error_handlers(app: FastAPI) -> None:
    """Register handlers translating `SlapboardError` subclasses to HTTP responses."""

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_exc_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
        return _error_response(exc, headers={"Retry-After": str(exc.retry_after)})

    @app.exception_handler(StorageUnavailableError)
    async def storage_exc_handler(request: Request, exc: StorageUnavailableError) -> JSONResponse:
        logger.warning("Refusing %s %s: %s", request.method, request.url.path, exc.message)
        return _error_response(exc)

    @app.exception_handler(SlapboardError)
    async def domain_exc_handler(request: Request, exc: SlapboardError) -> JSONResponse:
        return _error_response(exc)
