# backend/app/services/__init__.py
"""
Service layer for business logic.

This package contains the service layer which encapsulates business logic
separate from the API (router) layer. Services:
- Have NO knowledge of HTTP (no HTTPException, no status codes)
- Raise domain-specific exceptions
- Never read the clock: the valuation date is always a parameter
- Are easily testable via dependency injection

Usage:
    from app.services import ReturnsService
    from app.services import ServiceError, ValidationError

Architecture:
    services/
    ├── __init__.py                  # This file - main exports
    ├── exceptions.py                # Domain exceptions
    ├── constants.py                 # Business constants and limits
    └── returns/                     # Returns engine
        ├── service.py               # Validation + orchestration
        ├── types.py                 # Value objects
        ├── cashflows.py             # Holdings -> cash flows
        ├── xirr.py                  # XIRR solver
        └── summary.py               # Portfolio summary
"""

from app.services.exceptions import (
    ServiceError,
    ValidationError,
    TooManyItemsError,
    PurchaseAfterValuationError,
    NonFiniteAmountError,
)
from app.services.returns import ReturnsService

__all__ = [
    # Services
    "ReturnsService",

    # Exceptions
    "ServiceError",
    "ValidationError",
    "TooManyItemsError",
    "PurchaseAfterValuationError",
    "NonFiniteAmountError",
]
