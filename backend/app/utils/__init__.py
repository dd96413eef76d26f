# backend/app/utils/__init__.py
"""
Cross-cutting utilities for the Portfolio Returns API.

- logging: Logging configuration with correlation ID support
- context: Request context (correlation ID)

Usage:
    from app.utils import setup_logging
    from app.utils import get_correlation_id, set_correlation_id
"""

from app.utils.context import (
    get_correlation_id,
    set_correlation_id,
    clear_correlation_id,
)
from app.utils.logging import setup_logging

__all__ = [
    # Logging
    "setup_logging",
    # Context
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
]
