# backend/app/services/returns/types.py
"""
Data types for the Returns Service.

This module defines the value objects flowing through the returns engine.
All types are transient: built fresh for every calculation, never mutated,
never persisted. Monetary values use Decimal; the solver works in float
internally and hands back a Decimal percentage.

Architecture:
    - Holding: One recorded position (input to the aggregator)
    - CashFlow: One signed, dated amount (aggregator output, solver input)
    - XirrOutcome: Why the solver stopped
    - AnnualizedReturn: Tagged solver result (rate or undetermined)
    - HoldingReturns: Per-holding invested / current / gain figures
    - PortfolioSummary: Combined result for a portfolio snapshot
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum


# =============================================================================
# INPUT TYPES
# =============================================================================

@dataclass(frozen=True)
class CashFlow:
    """
    A signed amount at a point in time.

    Attributes:
        date: When the cash flow occurred (only the calendar day matters)
        amount: Negative = capital committed (purchase),
                Positive = capital received or notionally recovered (valuation)
    """
    date: date
    amount: Decimal


@dataclass(frozen=True)
class Holding:
    """
    A single position in the portfolio.

    Attributes:
        symbol: Ticker or display name
        quantity: Number of units held
        buying_price: Unit cost at purchase
        purchase_date: Date of purchase
        current_price: Latest known unit price, or None when unknown
    """
    symbol: str
    quantity: Decimal
    buying_price: Decimal
    purchase_date: date
    current_price: Decimal | None = None

    @property
    def cost_basis(self) -> Decimal:
        """Capital committed: unit cost x quantity."""
        return self.buying_price * self.quantity

    @property
    def current_valuation(self) -> Decimal | None:
        """Latest price x quantity, or None if the price is unknown."""
        if self.current_price is None:
            return None
        return self.current_price * self.quantity

    @property
    def is_valued(self) -> bool:
        """True when a current price is known."""
        return self.current_price is not None


# =============================================================================
# SOLVER RESULT
# =============================================================================

class XirrOutcome(str, Enum):
    """
    Terminal state of one solver run.

    Only CONVERGED carries a rate. The other three collapse to
    "undetermined" at the public boundary.
    """
    CONVERGED = "converged"
    INSUFFICIENT_DATA = "insufficient_data"
    NON_CONVERGENCE = "non_convergence"
    NUMERIC_DOMAIN_FAILURE = "numeric_domain_failure"


@dataclass(frozen=True)
class AnnualizedReturn:
    """
    Result of an XIRR calculation.

    Attributes:
        outcome: Why the solver stopped
        percentage: Annualized rate in percent (10 = 10%), None unless converged
        iterations: Newton steps taken before stopping
    """
    outcome: XirrOutcome
    percentage: Decimal | None = None
    iterations: int = 0

    @property
    def is_determined(self) -> bool:
        return self.outcome is XirrOutcome.CONVERGED

    @classmethod
    def converged(cls, percentage: Decimal, iterations: int) -> "AnnualizedReturn":
        return cls(XirrOutcome.CONVERGED, percentage, iterations)

    @classmethod
    def undetermined(cls, outcome: XirrOutcome, iterations: int = 0) -> "AnnualizedReturn":
        if outcome is XirrOutcome.CONVERGED:
            raise ValueError("A converged result needs a percentage")
        return cls(outcome, None, iterations)


# =============================================================================
# SUMMARY TYPES
# =============================================================================

class HoldingSortField(str, Enum):
    """Columns the holdings table can be sorted by."""
    SYMBOL = "symbol"
    QUANTITY = "quantity"
    BUYING_PRICE = "buying_price"
    PURCHASE_DATE = "purchase_date"
    CURRENT_VALUE = "current_value"
    RETURNS = "returns"


@dataclass
class HoldingReturns:
    """
    Returns of a single holding.

    Attributes:
        holding: The source holding
        invested: Cost basis
        current_value: Current valuation (None if unpriced)
        absolute_return: current_value - invested (None if unpriced)
        return_percentage: absolute_return / invested * 100 (None if unpriced)
    """
    holding: Holding
    invested: Decimal
    current_value: Decimal | None = None
    absolute_return: Decimal | None = None
    return_percentage: Decimal | None = None


@dataclass
class PortfolioSummary:
    """
    Aggregate view of a portfolio snapshot.

    Invested and current value only include holdings with a known price,
    so both aggregates describe the same set of positions.

    Attributes:
        as_of: Evaluation date shared by every inflow
        total_invested: Sum of cost basis of valued holdings
        current_value: Sum of current valuation of valued holdings
        total_returns: current_value - total_invested
        returns_percentage: total_returns / total_invested * 100 (0 if nothing invested)
        xirr: Money-weighted annualized return
        holdings: Per-holding rows, in requested order
        unvalued_count: Holdings excluded for lack of a price
        warnings: Human-readable notes about the calculation
    """
    as_of: date
    total_invested: Decimal
    current_value: Decimal
    total_returns: Decimal
    returns_percentage: Decimal
    xirr: AnnualizedReturn
    holdings: list[HoldingReturns] = field(default_factory=list)
    unvalued_count: int = 0
    warnings: list[str] = field(default_factory=list)
