# backend/app/services/returns/summary.py
"""
Portfolio summary calculations.

Combines the aggregator and the solver into the figures shown for a
portfolio: invested capital, current value, absolute and percentage
returns, XIRR, and a per-holding breakdown that can be sorted like the
holdings table.
"""

import logging
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Sequence

from app.services.constants import (
    HUNDRED,
    PERCENTAGE_PRECISION,
    XIRR_INITIAL_GUESS,
    XIRR_MAX_ITERATIONS,
    XIRR_TOLERANCE,
    ZERO,
)
from app.services.returns.cashflows import build_cash_flows, calculate_totals
from app.services.returns.types import (
    Holding,
    HoldingReturns,
    HoldingSortField,
    PortfolioSummary,
)
from app.services.returns.xirr import solve_xirr

logger = logging.getLogger(__name__)


def _percentage(part: Decimal, whole: Decimal) -> Decimal:
    return (part / whole * HUNDRED).quantize(PERCENTAGE_PRECISION, rounding=ROUND_HALF_UP)


# =============================================================================
# PER-HOLDING RETURNS
# =============================================================================

def calculate_holding_returns(holding: Holding) -> HoldingReturns:
    """
    Calculate invested, current value, and gain for one holding.

    Formula:
        absolute = current_value - invested
        percentage = absolute / invested * 100

    Unpriced holdings only report invested capital.
    """
    invested = holding.cost_basis
    result = HoldingReturns(holding=holding, invested=invested)

    current_value = holding.current_valuation
    if current_value is None:
        return result

    result.current_value = current_value
    result.absolute_return = current_value - invested
    if invested > ZERO:
        result.return_percentage = _percentage(result.absolute_return, invested)

    return result


def _sort_key(row: HoldingReturns, sort_by: HoldingSortField) -> Any:
    holding = row.holding
    if sort_by is HoldingSortField.SYMBOL:
        return holding.symbol.upper()
    if sort_by is HoldingSortField.QUANTITY:
        return holding.quantity
    if sort_by is HoldingSortField.BUYING_PRICE:
        return holding.buying_price
    if sort_by is HoldingSortField.PURCHASE_DATE:
        return holding.purchase_date
    if sort_by is HoldingSortField.CURRENT_VALUE:
        return row.current_value
    return row.absolute_return


def sort_holding_returns(
        rows: Sequence[HoldingReturns],
        sort_by: HoldingSortField = HoldingSortField.PURCHASE_DATE,
        descending: bool = True,
) -> list[HoldingReturns]:
    """
    Sort holding rows by a table column.

    Rows without a value for the column (unpriced holdings when sorting by
    current value or returns) always go last, whatever the direction.

    Args:
        rows: Holding rows to sort
        sort_by: Column to sort on
        descending: Largest / latest first when True

    Returns:
        New sorted list; ties keep their input order
    """
    present = [row for row in rows if _sort_key(row, sort_by) is not None]
    missing = [row for row in rows if _sort_key(row, sort_by) is None]

    present.sort(key=lambda row: _sort_key(row, sort_by), reverse=descending)
    return present + missing


# =============================================================================
# PORTFOLIO SUMMARY
# =============================================================================

def summarize_portfolio(
        holdings: Sequence[Holding],
        as_of: date,
        sort_by: HoldingSortField = HoldingSortField.PURCHASE_DATE,
        descending: bool = True,
        max_iterations: int = XIRR_MAX_ITERATIONS,
        tolerance: float = XIRR_TOLERANCE,
        initial_guess: float = XIRR_INITIAL_GUESS,
) -> PortfolioSummary:
    """
    Calculate the portfolio summary for a snapshot of holdings.

    Args:
        holdings: Portfolio positions
        as_of: Valuation date used for every inflow
        sort_by: Column for the per-holding rows
        descending: Sort direction for the per-holding rows
        max_iterations: Solver step budget
        tolerance: Solver rate tolerance
        initial_guess: Solver starting rate

    Returns:
        PortfolioSummary. returns_percentage is 0 when nothing is invested;
        xirr is undetermined when fewer than two cash flows exist or the
        solver fails.
    """
    total_invested, current_value = calculate_totals(holdings)
    total_returns = current_value - total_invested

    if total_invested > ZERO:
        returns_percentage = _percentage(total_returns, total_invested)
    else:
        returns_percentage = ZERO

    cash_flows = build_cash_flows(holdings, as_of)
    xirr = solve_xirr(
        cash_flows,
        max_iterations=max_iterations,
        tolerance=tolerance,
        initial_guess=initial_guess,
    )

    rows = sort_holding_returns(
        [calculate_holding_returns(h) for h in holdings],
        sort_by=sort_by,
        descending=descending,
    )

    summary = PortfolioSummary(
        as_of=as_of,
        total_invested=total_invested,
        current_value=current_value,
        total_returns=total_returns,
        returns_percentage=returns_percentage,
        xirr=xirr,
        holdings=rows,
        unvalued_count=sum(1 for h in holdings if not h.is_valued),
    )

    if summary.unvalued_count:
        noun = "holding has" if summary.unvalued_count == 1 else "holdings have"
        summary.warnings.append(
            f"{summary.unvalued_count} {noun} no current price and "
            f"{'is' if summary.unvalued_count == 1 else 'are'} excluded from totals"
        )

    if not xirr.is_determined:
        summary.warnings.append(f"XIRR could not be determined ({xirr.outcome.value})")

    logger.debug(
        f"Portfolio summary as of {as_of}: invested={total_invested}, "
        f"value={current_value}, xirr={xirr.percentage}"
    )

    return summary
