# backend/app/schemas/__init__.py
"""
Pydantic schemas for API request/response validation.

- errors: Standard error envelopes used by the exception handlers
- returns: XIRR and portfolio summary requests/responses
"""

from app.schemas.errors import ErrorDetail, ValidationErrorDetail
from app.schemas.returns import (
    CashFlowIn,
    XirrRequest,
    XirrResponse,
    HoldingIn,
    PortfolioReturnsRequest,
    HoldingReturnsResponse,
    PortfolioReturnsResponse,
)

__all__ = [
    # Errors
    "ErrorDetail",
    "ValidationErrorDetail",
    # Returns
    "CashFlowIn",
    "XirrRequest",
    "XirrResponse",
    "HoldingIn",
    "PortfolioReturnsRequest",
    "HoldingReturnsResponse",
    "PortfolioReturnsResponse",
]
