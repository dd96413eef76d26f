# backend/app/services/exceptions.py
"""
Service layer exceptions.

These exceptions represent domain-specific errors and contain NO HTTP knowledge.
The router layer is responsible for mapping these to appropriate HTTP responses.

Exception Hierarchy:
    ServiceError (base)
    └── ValidationError
        ├── TooManyItemsError
        ├── PurchaseAfterValuationError
        └── NonFiniteAmountError

An undetermined XIRR is NOT an exception. The solver reports it through
AnnualizedReturn (see app.services.returns.types).
"""

from datetime import date


class ServiceError(Exception):
    """
    Base exception for all service layer errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(ServiceError):
    """
    Raised when a caller contract is violated.

    This is for programmatic validation errors that Pydantic cannot express
    (cross-field rules, limits on derived data), NOT for request shape
    validation which is handled by the schemas.

    Attributes:
        field: The field that failed validation (optional)
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class TooManyItemsError(ValidationError):
    """
    Raised when a request carries more items than the service accepts.

    Attributes:
        count: Number of items received
        limit: Maximum allowed
    """

    def __init__(self, field: str, count: int, limit: int) -> None:
        self.count = count
        self.limit = limit
        super().__init__(
            f"Too many {field}: got {count}, maximum is {limit}",
            field=field,
        )


class PurchaseAfterValuationError(ValidationError):
    """
    Raised when a holding's purchase date is later than the valuation date.

    Attributes:
        symbol: Holding symbol
        purchase_date: The offending purchase date
        as_of: Valuation date of the request
    """

    def __init__(self, symbol: str, purchase_date: date, as_of: date, field: str) -> None:
        self.symbol = symbol
        self.purchase_date = purchase_date
        self.as_of = as_of
        super().__init__(
            f"Holding {symbol} was purchased on {purchase_date.isoformat()}, "
            f"after the valuation date {as_of.isoformat()}",
            field=field,
        )


class NonFiniteAmountError(ValidationError):
    """Raised when a cash flow or holding carries NaN or Infinity."""

    def __init__(self, field: str) -> None:
        super().__init__(f"{field} must be a finite number", field=field)
