# backend/app/dependencies.py
"""
Dependency injection module for FastAPI services.

Services are created lazily on first use and shared across requests.
Tests swap them out through app.dependency_overrides.

Usage in routers:
    from app.dependencies import get_returns_service

    @router.post("/xirr")
    def calculate(service: ReturnsService = Depends(get_returns_service)):
        ...
"""

import logging
from functools import lru_cache

from app.services.returns import ReturnsService

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_returns_service() -> ReturnsService:
    """
    Get the singleton ReturnsService instance.

    ReturnsService keeps no per-request state, so one instance serves
    concurrent requests safely.
    """
    logger.debug("Initializing singleton ReturnsService")
    return ReturnsService()
