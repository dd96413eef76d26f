# backend/app/middleware/rate_limit.py
"""
Rate limiting for the Portfolio Returns API.

Uses slowapi to cap how often one client can hit the API. The returns
endpoints run up to 100 solver iterations over every cash flow per call,
so they get their own, tighter limit.

Key by: Client IP address (X-Forwarded-For only from trusted proxies)
Storage: In-memory (single instance)

Limits are defined in app/services/constants.py. Setting
RATE_LIMIT_ENABLED=false turns enforcement off (used by the test suite).

Usage:
    from app.middleware.rate_limit import limiter, RATE_LIMIT_RETURNS

    @router.post("/xirr")
    @limiter.limit(RATE_LIMIT_RETURNS)
    def calculate(request: Request, body: XirrRequest):
        ...
"""

import logging

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from app.config import settings
from app.services.constants import (
    RATE_LIMIT_DEFAULT,
    RATE_LIMIT_HEALTH,
    RATE_LIMIT_RETURNS,
)

logger = logging.getLogger(__name__)

# Seconds a limited client is told to wait
DEFAULT_RETRY_AFTER_SECONDS = 60


def _is_trusted_proxy(request: Request) -> bool:
    """True if forwarded headers on this request can be believed."""
    if settings.trust_proxy_headers:
        return True
    return get_remote_address(request) in settings.trusted_proxy_ips


def _get_client_ip(request: Request) -> str:
    """
    Resolve the client address used as the rate limit key.

    X-Forwarded-For / X-Real-IP are honoured only when the immediate peer
    is a trusted proxy; otherwise any client could pick its own key.
    """
    if _is_trusted_proxy(request):
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            # First entry is the original client
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip

    return get_remote_address(request)


limiter = Limiter(
    key_func=_get_client_ip,
    default_limits=[RATE_LIMIT_DEFAULT],
    enabled=settings.rate_limit_enabled,
)


async def rate_limit_exceeded_handler(
    request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """
    Answer a limited request with 429 in the standard error envelope.

    Includes a Retry-After header so well-behaved clients back off.
    """
    limit_info = str(exc.detail) if exc.detail else "Rate limit exceeded"

    logger.warning(f"Rate limit exceeded for {_get_client_ip(request)}: {limit_info}")

    return JSONResponse(
        status_code=429,
        content={
            "error": "RateLimitError",
            "message": f"Too many requests. {limit_info}",
            "details": {"retry_after": DEFAULT_RETRY_AFTER_SECONDS},
        },
        headers={"Retry-After": str(DEFAULT_RETRY_AFTER_SECONDS)},
    )


__all__ = [
    "limiter",
    "rate_limit_exceeded_handler",
    "SlowAPIMiddleware",
    "RATE_LIMIT_DEFAULT",
    "RATE_LIMIT_HEALTH",
    "RATE_LIMIT_RETURNS",
]
