# backend/app/routers/returns.py
"""
Returns endpoints.

- POST /returns/xirr      - XIRR of arbitrary dated cash flows
- POST /returns/portfolio - Invested, current value, returns and XIRR of a
                            portfolio snapshot, with per-holding rows

Holdings and prices are supplied by the caller; this API stores nothing and
fetches no prices. The valuation date defaults to today when the request
does not carry one.
"""

from datetime import date
from decimal import Decimal
from typing import Literal

from fastapi import APIRouter, Depends, Query, Request

from app.dependencies import get_returns_service
from app.middleware.rate_limit import limiter, RATE_LIMIT_RETURNS
from app.schemas.returns import (
    HoldingReturnsResponse,
    PortfolioReturnsRequest,
    PortfolioReturnsResponse,
    XirrRequest,
    XirrResponse,
)
from app.services.returns import (
    AnnualizedReturn,
    CashFlow,
    Holding,
    HoldingReturns,
    HoldingSortField,
    PortfolioSummary,
    ReturnsService,
)

# =============================================================================
# ROUTER SETUP
# =============================================================================

router = APIRouter(
    prefix="/returns",
    tags=["Returns"],
)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def _decimal_to_str(value: Decimal | None) -> str | None:
    """Convert Decimal to a plain (non-scientific) string, trailing zeros removed."""
    if value is None:
        return None
    return format(value.normalize(), "f")


# =============================================================================
# MAPPER FUNCTIONS (Internal Types -> Pydantic Schemas)
# =============================================================================

def _map_xirr(result: AnnualizedReturn) -> XirrResponse:
    return XirrResponse(
        xirr=_decimal_to_str(result.percentage),
        is_determined=result.is_determined,
        outcome=result.outcome,
        iterations=result.iterations,
    )


def _map_holding(row: HoldingReturns) -> HoldingReturnsResponse:
    holding = row.holding
    return HoldingReturnsResponse(
        symbol=holding.symbol,
        quantity=_decimal_to_str(holding.quantity),
        buying_price=_decimal_to_str(holding.buying_price),
        purchase_date=holding.purchase_date,
        current_price=_decimal_to_str(holding.current_price),
        invested=_decimal_to_str(row.invested),
        current_value=_decimal_to_str(row.current_value),
        absolute_return=_decimal_to_str(row.absolute_return),
        return_percentage=_decimal_to_str(row.return_percentage),
    )


def _map_summary(summary: PortfolioSummary) -> PortfolioReturnsResponse:
    return PortfolioReturnsResponse(
        as_of=summary.as_of,
        total_invested=_decimal_to_str(summary.total_invested),
        current_value=_decimal_to_str(summary.current_value),
        total_returns=_decimal_to_str(summary.total_returns),
        returns_percentage=_decimal_to_str(summary.returns_percentage),
        xirr=_decimal_to_str(summary.xirr.percentage),
        xirr_status="determined" if summary.xirr.is_determined else "calculating",
        xirr_outcome=summary.xirr.outcome,
        holdings=[_map_holding(row) for row in summary.holdings],
        holdings_count=len(summary.holdings),
        unvalued_count=summary.unvalued_count,
        warnings=summary.warnings,
    )


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post(
    "/xirr",
    response_model=XirrResponse,
    summary="Calculate XIRR for dated cash flows",
    response_description="Annualized return in percent, or null when undetermined"
)
@limiter.limit(RATE_LIMIT_RETURNS)
def calculate_xirr(
        request: Request,  # Required for rate limiting
        body: XirrRequest,
        service: ReturnsService = Depends(get_returns_service),
) -> XirrResponse:
    """
    Calculate the annualized internal rate of return of the given cash flows.

    Negative amounts are money put in, positive amounts money taken out (or
    the current value). Fewer than two cash flows, or a sequence the solver
    cannot resolve, yields `xirr: null` with the reason in `outcome`.
    """
    cash_flows = [CashFlow(date=cf.date, amount=cf.amount) for cf in body.cash_flows]
    return _map_xirr(service.get_xirr(cash_flows))


@router.post(
    "/portfolio",
    response_model=PortfolioReturnsResponse,
    summary="Calculate portfolio returns",
    response_description="Totals, returns, XIRR and per-holding breakdown"
)
@limiter.limit(RATE_LIMIT_RETURNS)
def calculate_portfolio_returns(
        request: Request,  # Required for rate limiting
        body: PortfolioReturnsRequest,
        sort_by: HoldingSortField = Query(
            default=HoldingSortField.PURCHASE_DATE,
            description="Column to sort the holdings by"
        ),
        order: Literal["asc", "desc"] = Query(
            default="desc",
            description="Sort direction"
        ),
        service: ReturnsService = Depends(get_returns_service),
) -> PortfolioReturnsResponse:
    """
    Summarize a portfolio snapshot.

    Every holding is treated as bought at `buying_price` on `purchase_date`
    and sold at `current_price` on `as_of`. Holdings without a current price
    appear in `holdings` but are left out of totals and XIRR.
    """
    holdings = [
        Holding(
            symbol=h.symbol,
            quantity=h.quantity,
            buying_price=h.buying_price,
            purchase_date=h.purchase_date,
            current_price=h.current_price,
        )
        for h in body.holdings
    ]

    summary = service.get_portfolio_summary(
        holdings,
        as_of=body.as_of or date.today(),
        sort_by=sort_by,
        descending=order == "desc",
    )
    return _map_summary(summary)
