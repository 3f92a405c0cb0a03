"""
Logging middleware for request/response tracking.
"""

import time
from collections.abc import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from storeledger.config import (
    bind_request_context,
    clear_request_context,
    get_logger,
    new_request_id,
)

logger = get_logger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for request/response logging.

    Binds the request context for the duration of the request, logs
    start, completion and timing, and tags every response with
    X-Request-ID and X-Response-Time.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        request_id = new_request_id()
        request.state.request_id = request_id
        bind_request_context(
            request_id,
            request.method,
            request.url.path,
            user_id=request.headers.get("x-user-id"),
            store_id=request.headers.get("x-store-id"),
        )
        start = time.time()

        try:
            logger.info("request_started")
            try:
                response = await call_next(request)
            except Exception as e:
                logger.error(
                    "request_failed",
                    error_type=e.__class__.__name__,
                    duration_ms=round((time.time() - start) * 1000, 2),
                )
                raise

            duration_ms = (time.time() - start) * 1000
            logger.info(
                "request_completed",
                status=response.status_code,
                duration_ms=round(duration_ms, 2),
            )
        finally:
            clear_request_context()

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
        return response
