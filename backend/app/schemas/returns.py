# backend/app/schemas/returns.py
"""
Pydantic schemas for the Returns API.

These schemas define the request/response formats for:
- XIRR of arbitrary dated cash flows
- Portfolio summary (invested, current value, returns, XIRR, per-holding rows)

Design decisions:
- Monetary and percentage values are serialized as STRINGS to preserve
  Decimal precision
- Percentages are in percent (12.5 = 12.5%), matching what the UI shows
- An undetermined XIRR is null, never 0; xirr_status tells the client to
  render it as "Calculating..." rather than as a number
- current_price is optional: holdings without one are reported but excluded
  from totals and XIRR
"""

import datetime as dt
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from app.services.constants import MAX_CASH_FLOWS_PER_REQUEST, MAX_HOLDINGS_PER_REQUEST
from app.services.returns import XirrOutcome


# =============================================================================
# XIRR SCHEMAS
# =============================================================================

class CashFlowIn(BaseModel):
    """A dated, signed cash flow."""

    date: dt.date = Field(..., description="Date of the cash flow")
    amount: Decimal = Field(
        ...,
        description="Signed amount: negative = money invested, positive = money received or current value"
    )


class XirrRequest(BaseModel):
    """Request body for POST /returns/xirr."""

    cash_flows: list[CashFlowIn] = Field(
        ...,
        max_length=MAX_CASH_FLOWS_PER_REQUEST,
        description="Cash flows in any order (at least two with opposite signs for a result)"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "cash_flows": [
                    {"date": "2023-01-01", "amount": "-1000"},
                    {"date": "2024-01-01", "amount": "1100"},
                ]
            }
        }
    )


class XirrResponse(BaseModel):
    """XIRR result. xirr is null when the rate cannot be determined."""

    xirr: str | None = Field(None, description="Annualized return in percent (\"10\" = 10%)")
    is_determined: bool = Field(..., description="False when xirr is null")
    outcome: XirrOutcome = Field(..., description="Why the solver stopped")
    iterations: int = Field(..., description="Solver iterations used")


# =============================================================================
# PORTFOLIO SCHEMAS
# =============================================================================

class HoldingIn(BaseModel):
    """A position in the portfolio."""

    symbol: str = Field(..., min_length=1, max_length=50, description="Ticker or name")
    quantity: Decimal = Field(..., gt=0, description="Units held")
    buying_price: Decimal = Field(..., gt=0, description="Unit cost at purchase")
    purchase_date: dt.date = Field(..., description="Date of purchase")
    current_price: Decimal | None = Field(
        None,
        ge=0,
        description="Latest unit price; omit when unknown"
    )


class PortfolioReturnsRequest(BaseModel):
    """Request body for POST /returns/portfolio."""

    as_of: dt.date | None = Field(
        None,
        description="Valuation date for current prices (default: today)"
    )
    holdings: list[HoldingIn] = Field(
        ...,
        max_length=MAX_HOLDINGS_PER_REQUEST,
        description="Portfolio holdings"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "as_of": "2024-01-01",
                "holdings": [
                    {
                        "symbol": "INFY",
                        "quantity": "10",
                        "buying_price": "100",
                        "purchase_date": "2023-01-01",
                        "current_price": "110",
                    }
                ],
            }
        }
    )


class HoldingReturnsResponse(BaseModel):
    """One row of the holdings table."""

    symbol: str
    quantity: str
    buying_price: str
    purchase_date: dt.date
    current_price: str | None = None
    invested: str = Field(..., description="buying_price x quantity")
    current_value: str | None = Field(None, description="current_price x quantity")
    absolute_return: str | None = Field(None, description="current_value - invested")
    return_percentage: str | None = Field(None, description="absolute_return / invested, in percent")


class PortfolioReturnsResponse(BaseModel):
    """Portfolio summary."""

    as_of: dt.date
    total_invested: str = Field(..., description="Cost basis of priced holdings")
    current_value: str = Field(..., description="Current value of priced holdings")
    total_returns: str = Field(..., description="current_value - total_invested")
    returns_percentage: str = Field(..., description="total_returns / total_invested, in percent")
    xirr: str | None = Field(None, description="Annualized money-weighted return in percent")
    xirr_status: Literal["determined", "calculating"] = Field(
        ...,
        description="'calculating' when xirr is null"
    )
    xirr_outcome: XirrOutcome
    holdings: list[HoldingReturnsResponse] = Field(default_factory=list)
    holdings_count: int
    unvalued_count: int = Field(..., description="Holdings without a current price")
    warnings: list[str] = Field(default_factory=list)
