# backend/app/services/returns/service.py
"""
Returns Service - orchestrates the returns engine for the API layer.

The pure functions in this package trust their inputs. This service is the
boundary where caller contracts are checked (sizes, dates, finiteness) and
turned into ValidationError before anything reaches the solver.

Usage:
    service = ReturnsService()

    summary = service.get_portfolio_summary(holdings, as_of=date.today())
    if summary.xirr.is_determined:
        print(f"XIRR: {summary.xirr.percentage}%")
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Sequence

from app.services.constants import (
    MAX_CASH_FLOWS_PER_REQUEST,
    MAX_HOLDINGS_PER_REQUEST,
    XIRR_INITIAL_GUESS,
    XIRR_MAX_ITERATIONS,
    XIRR_TOLERANCE,
)
from app.services.exceptions import (
    NonFiniteAmountError,
    PurchaseAfterValuationError,
    TooManyItemsError,
)
from app.services.returns.summary import summarize_portfolio
from app.services.returns.types import (
    AnnualizedReturn,
    CashFlow,
    Holding,
    HoldingSortField,
    PortfolioSummary,
)
from app.services.returns.xirr import solve_xirr

logger = logging.getLogger(__name__)


def _check_finite(value: Decimal | None, field: str) -> None:
    if value is not None and not value.is_finite():
        raise NonFiniteAmountError(field)


class ReturnsService:
    """
    Service for XIRR and portfolio return calculations.

    Stateless apart from the solver parameters, so a single instance can be
    shared by all requests.

    Attributes:
        max_holdings: Maximum holdings per portfolio summary
        max_cash_flows: Maximum cash flows per XIRR call
        max_iterations: Solver step budget
        tolerance: Solver rate tolerance
        initial_guess: Solver starting rate
    """

    def __init__(
            self,
            max_holdings: int = MAX_HOLDINGS_PER_REQUEST,
            max_cash_flows: int = MAX_CASH_FLOWS_PER_REQUEST,
            max_iterations: int = XIRR_MAX_ITERATIONS,
            tolerance: float = XIRR_TOLERANCE,
            initial_guess: float = XIRR_INITIAL_GUESS,
    ) -> None:
        self.max_holdings = max_holdings
        self.max_cash_flows = max_cash_flows
        self.max_iterations = max_iterations
        self.tolerance = tolerance
        self.initial_guess = initial_guess

    def get_xirr(self, cash_flows: Sequence[CashFlow]) -> AnnualizedReturn:
        """
        Calculate XIRR for raw cash flows.

        Raises:
            TooManyItemsError: More than max_cash_flows cash flows
            NonFiniteAmountError: An amount is NaN or Infinity
        """
        if len(cash_flows) > self.max_cash_flows:
            raise TooManyItemsError("cash_flows", len(cash_flows), self.max_cash_flows)

        for i, cf in enumerate(cash_flows):
            _check_finite(cf.amount, f"cash_flows[{i}].amount")

        result = solve_xirr(
            cash_flows,
            max_iterations=self.max_iterations,
            tolerance=self.tolerance,
            initial_guess=self.initial_guess,
        )

        logger.info(
            f"XIRR for {len(cash_flows)} cash flows: "
            f"{result.outcome.value} after {result.iterations} iterations"
        )
        return result

    def get_portfolio_summary(
            self,
            holdings: Sequence[Holding],
            as_of: date,
            sort_by: HoldingSortField = HoldingSortField.PURCHASE_DATE,
            descending: bool = True,
    ) -> PortfolioSummary:
        """
        Calculate totals, returns and XIRR for a portfolio snapshot.

        Args:
            holdings: Portfolio positions
            as_of: Valuation date (the caller decides what "now" is)
            sort_by: Column for the per-holding rows
            descending: Sort direction for the per-holding rows

        Raises:
            TooManyItemsError: More than max_holdings holdings
            PurchaseAfterValuationError: A holding was bought after as_of
            NonFiniteAmountError: A price or quantity is NaN or Infinity
        """
        if len(holdings) > self.max_holdings:
            raise TooManyItemsError("holdings", len(holdings), self.max_holdings)

        for i, holding in enumerate(holdings):
            _check_finite(holding.quantity, f"holdings[{i}].quantity")
            _check_finite(holding.buying_price, f"holdings[{i}].buying_price")
            _check_finite(holding.current_price, f"holdings[{i}].current_price")

            if holding.purchase_date > as_of:
                raise PurchaseAfterValuationError(
                    symbol=holding.symbol,
                    purchase_date=holding.purchase_date,
                    as_of=as_of,
                    field=f"holdings[{i}].purchase_date",
                )

        summary = summarize_portfolio(
            holdings,
            as_of=as_of,
            sort_by=sort_by,
            descending=descending,
            max_iterations=self.max_iterations,
            tolerance=self.tolerance,
            initial_guess=self.initial_guess,
        )

        logger.info(
            f"Portfolio summary for {len(holdings)} holdings as of {as_of}: "
            f"xirr {summary.xirr.outcome.value}"
        )
        return summary
