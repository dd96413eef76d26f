# backend/app/utils/context.py
"""
Request-scoped context for the Portfolio Returns API.

Holds the correlation ID of the request being served so that log records
emitted anywhere (routers, services, the solver) can be tied back to it.

Backed by contextvars, which follow async tasks and thread-pool handoffs
made by Starlette, so concurrent requests never see each other's IDs.

Usage:
    from app.utils.context import get_correlation_id, set_correlation_id

    set_correlation_id("abc-123")   # middleware, start of request
    get_correlation_id()            # anywhere -> "abc-123"
"""

from contextvars import ContextVar

_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> str | None:
    """Return the current request's correlation ID, or None outside a request."""
    return _correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    """
    Set the correlation ID for the current request.

    Args:
        correlation_id: Unique identifier for this request
    """
    _correlation_id_var.set(correlation_id)


def clear_correlation_id() -> None:
    """Reset the correlation ID once the request has been answered."""
    _correlation_id_var.set(None)
