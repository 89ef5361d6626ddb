"""Request logging middleware."""

from __future__ import annotations

import logging
import time
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("slapboard.requests")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request and tag the response with an `X-Request-ID`."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = uuid4().hex
        request.state.request_id = request_id
        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "[%s] %s %s failed after %.3fs",
                request_id,
                request.method,
                request.url.path,
                time.perf_counter() - start_time,
            )
            raise

        logger.info(
            "[%s] %s %s -> %d (%.3fs)",
            request_id,
            request.method,
            request.url.path,
            response.status_code,
            time.perf_counter() - start_time,
        )
        response.headers["X-Request-ID"] = request_id
        return response
