# backend/app/routers/__init__.py
"""
API routers for the Portfolio Returns API.

- returns: XIRR and portfolio summary calculations
"""

from app.routers.returns import router as returns_router

__all__ = [
    "returns_router",
]
