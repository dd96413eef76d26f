# backend/app/middleware/correlation.py
"""
Correlation ID middleware for request tracing.

For every request this middleware:
1. Takes the correlation ID from X-Correlation-ID, else X-Request-ID,
   else generates a UUID4
2. Stores it in the request context so log records carry it
3. Logs one access line (method, path, status, duration)
4. Echoes the ID back in the X-Correlation-ID response header

Client Usage:
    curl -H "X-Correlation-ID: my-trace-123" -X POST \\
         http://localhost:8000/returns/xirr -d '{"cash_flows": []}'

    # Response header: X-Correlation-ID: my-trace-123
"""

import logging
import time
import uuid
from typing import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.utils.context import set_correlation_id, clear_correlation_id

logger = logging.getLogger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-ID"
REQUEST_ID_HEADER = "X-Request-ID"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Attach a correlation ID to each request, its logs, and its response."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        correlation_id = self._get_correlation_id(request)
        set_correlation_id(correlation_id)
        started = time.perf_counter()

        try:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = correlation_id

            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code} "
                f"({elapsed_ms:.1f} ms)"
            )
            return response

        finally:
            clear_correlation_id()

    @staticmethod
    def _get_correlation_id(request: Request) -> str:
        """Prefer the caller's ID (either header name), otherwise mint one."""
        return (
            request.headers.get(CORRELATION_ID_HEADER)
            or request.headers.get(REQUEST_ID_HEADER)
            or str(uuid.uuid4())
        )
