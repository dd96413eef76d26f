# backend/app/schemas/errors.py
"""
Pydantic schemas for error responses.

Every error leaves the API in one of two envelopes so the frontend can parse
failures uniformly. The exception handlers in main.py build them.
"""

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Standard error response format (400, 404, 429, 500 ...)."""

    error: str = Field(
        ...,
        description="Error type/code (e.g., 'PurchaseAfterValuationError')"
    )
    message: str = Field(
        ...,
        description="Human-readable error message"
    )
    details: dict | None = Field(
        default=None,
        description="Additional error context (optional)"
    )


class ValidationErrorDetail(BaseModel):
    """Request validation failures (422), one entry per invalid field."""

    error: str = Field(default="ValidationError")
    message: str = Field(default="Request validation failed")
    details: list[dict] = Field(
        ...,
        description="List of validation errors"
    )
