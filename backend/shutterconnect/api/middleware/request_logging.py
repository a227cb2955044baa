"""
Per-request correlation id and access logging.
"""
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from shutterconnect.lib.logging import (
    clear_request_context,
    get_logger,
    set_correlation_id,
)

logger = get_logger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Accepts X-Correlation-ID from the caller or generates one, and echoes
    it on the response.

    Route handlers and exception handlers read the id from
    `request.state.correlation_id`; log lines pick it up from the context
    variable.
    """

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id
        set_correlation_id(correlation_id)

        logger.info(
            "Incoming request",
            extra={
                "method": request.method,
                "path": request.url.path,
                "client": request.client.host if request.client else None,
            },
        )
        started = time.perf_counter()

        try:
            response = await call_next(request)
            response.headers[CORRELATION_HEADER] = correlation_id
            logger.info(
                "Response sent",
                extra={
                    "status_code": response.status_code,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 1),
                    "user_id": getattr(request.state, "user_id", None),
                },
            )
            return response
        finally:
            clear_request_context()
