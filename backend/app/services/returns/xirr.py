# backend/app/services/returns/xirr.py
"""
Extended Internal Rate of Return (XIRR) solver.

XIRR is the annualized, money-weighted return implied by cash flows on
irregular dates: the discount rate r that zeroes their net present value.

Formulas (actual/365 day count, t_i = (d_i - d_0).days / 365):
    NPV(r)  = Σ CF_i / (1 + r)^t_i
    NPV'(r) = Σ -t_i * CF_i / (1 + r)^(t_i + 1)

Newton-Raphson:
    r_0     = 0.10
    r_{k+1} = r_k - NPV(r_k) / NPV'(r_k)
    stop when |r_{k+1} - r_k| < 0.0001, at most 100 steps

Ordering:
    Cash flows are sorted by date before the epoch d_0 is chosen, so the
    result does not depend on input order and elapsed days are never
    negative. The sort is stable: flows sharing a date keep their order.

Failure policy:
    The solver never raises for numeric input. Every failure becomes an
    undetermined AnnualizedReturn tagged with the reason:

    - INSUFFICIENT_DATA       fewer than two cash flows (no iteration)
    - NON_CONVERGENCE         iteration budget exhausted
    - NUMERIC_DOMAIN_FAILURE  1 + r <= 0, zero derivative, overflow, or any
                              non-finite intermediate value

    Same-sign sequences are not rejected up front. They have no root, so the
    iteration runs off and ends in one of the two failure outcomes above.

Precision Note:
    The iteration runs in float (float64, ~15 significant digits). The
    converged rate is converted to a Decimal percentage with 8 decimal places.
"""

import decimal
import logging
import math
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Sequence

from app.services.constants import (
    CALENDAR_DAYS_PER_YEAR,
    RATE_PRECISION,
    XIRR_INITIAL_GUESS,
    XIRR_MAX_ITERATIONS,
    XIRR_TOLERANCE,
)
from app.services.returns.types import AnnualizedReturn, CashFlow, XirrOutcome

logger = logging.getLogger(__name__)

# (years since epoch, amount)
_Flow = tuple[float, float]


# =============================================================================
# DAY COUNT
# =============================================================================

def _as_date(value: date) -> date:
    """Drop the time of day; only calendar days count."""
    if isinstance(value, datetime):
        return value.date()
    return value


def _year_fractions(cash_flows: Sequence[CashFlow]) -> list[_Flow]:
    """
    Convert cash flows to (years, amount) pairs measured from the earliest date.

    Args:
        cash_flows: Non-empty sequence of CashFlow, any order

    Returns:
        List of (elapsed_days / 365, float(amount)), chronologically ordered
    """
    ordered = sorted(cash_flows, key=lambda cf: _as_date(cf.date))
    epoch = _as_date(ordered[0].date)

    return [
        (
            (_as_date(cf.date) - epoch).days / CALENDAR_DAYS_PER_YEAR,
            float(cf.amount),
        )
        for cf in ordered
    ]


# =============================================================================
# NET PRESENT VALUE
# =============================================================================

def _npv(rate: float, flows: list[_Flow]) -> float:
    base = 1.0 + rate
    return sum(amount / base ** years for years, amount in flows)


def _npv_derivative(rate: float, flows: list[_Flow]) -> float:
    base = 1.0 + rate
    return sum(-years * amount / base ** (years + 1) for years, amount in flows)


def xnpv(rate: float, cash_flows: Sequence[CashFlow]) -> float:
    """
    Net present value of dated cash flows at an annual rate.

    Discounts back to the earliest cash flow date using actual/365.

    Args:
        rate: Annual rate as a fraction (0.10 = 10%)
        cash_flows: Non-empty sequence of CashFlow

    Returns:
        NPV as float

    Raises:
        ValueError: If cash_flows is empty or rate <= -1
    """
    if not cash_flows:
        raise ValueError("xnpv requires at least one cash flow")
    if 1.0 + rate <= 0:
        raise ValueError(f"Rate must be greater than -1, got {rate}")

    return _npv(rate, _year_fractions(cash_flows))


def xnpv_derivative(rate: float, cash_flows: Sequence[CashFlow]) -> float:
    """
    First derivative of xnpv() with respect to the rate.

    Raises:
        ValueError: If cash_flows is empty or rate <= -1
    """
    if not cash_flows:
        raise ValueError("xnpv_derivative requires at least one cash flow")
    if 1.0 + rate <= 0:
        raise ValueError(f"Rate must be greater than -1, got {rate}")

    return _npv_derivative(rate, _year_fractions(cash_flows))


# =============================================================================
# SOLVER
# =============================================================================

def _to_percentage(rate: float) -> Decimal:
    percentage = Decimal(str(rate * 100))
    try:
        return percentage.quantize(RATE_PRECISION, rounding=ROUND_HALF_UP)
    except decimal.InvalidOperation:
        # Too many digits for the context (absurdly large rate); keep unrounded
        return percentage


def _domain_failure(iteration: int, reason: str) -> AnnualizedReturn:
    logger.warning(f"XIRR undetermined at iteration {iteration}: {reason}")
    return AnnualizedReturn.undetermined(XirrOutcome.NUMERIC_DOMAIN_FAILURE, iteration)


def solve_xirr(
        cash_flows: Sequence[CashFlow],
        max_iterations: int = XIRR_MAX_ITERATIONS,
        tolerance: float = XIRR_TOLERANCE,
        initial_guess: float = XIRR_INITIAL_GUESS,
) -> AnnualizedReturn:
    """
    Solve for the XIRR of a cash flow sequence.

    Args:
        cash_flows: Dated, signed amounts (negative = outflow, positive = inflow).
                    Any order. Amounts must be finite.
        max_iterations: Newton step budget
        tolerance: Absolute tolerance on the rate between two steps
        initial_guess: Starting rate as a fraction

    Returns:
        AnnualizedReturn. On convergence, percentage holds the rate in percent
        (10 = 10% per year); otherwise it is None and outcome says why.

    Example:
        cash_flows = [
            CashFlow(date(2023, 1, 1), Decimal("-1000")),  # Purchase
            CashFlow(date(2024, 1, 1), Decimal("1100")),   # Valuation
        ]
        solve_xirr(cash_flows).percentage  # Decimal("10.00000000")
    """
    if len(cash_flows) < 2:
        logger.debug(f"XIRR needs at least 2 cash flows, got {len(cash_flows)}")
        return AnnualizedReturn.undetermined(XirrOutcome.INSUFFICIENT_DATA)

    flows = _year_fractions(cash_flows)
    rate = float(initial_guess)
    tolerance = float(tolerance)

    for iteration in range(1, max_iterations + 1):
        if not math.isfinite(rate) or 1.0 + rate <= 0:
            return _domain_failure(iteration, f"rate {rate} outside (-1, inf)")

        try:
            npv = _npv(rate, flows)
            npv_derivative = _npv_derivative(rate, flows)
        except (OverflowError, ZeroDivisionError) as e:
            return _domain_failure(iteration, f"discounting failed at rate {rate}: {e}")

        if not (math.isfinite(npv) and math.isfinite(npv_derivative)):
            return _domain_failure(iteration, f"non-finite NPV at rate {rate}")

        if npv_derivative == 0:
            return _domain_failure(iteration, f"zero derivative at rate {rate}")

        new_rate = rate - npv / npv_derivative

        if not math.isfinite(new_rate) or 1.0 + new_rate <= 0:
            return _domain_failure(iteration, f"step from {rate} left the domain ({new_rate})")

        if abs(new_rate - rate) < tolerance:
            logger.debug(f"XIRR converged to {new_rate:.6f} after {iteration} iterations")
            return AnnualizedReturn.converged(_to_percentage(new_rate), iteration)

        rate = new_rate

    logger.warning(f"XIRR did not converge after {max_iterations} iterations")
    return AnnualizedReturn.undetermined(XirrOutcome.NON_CONVERGENCE, max_iterations)


def calculate_xirr(
        cash_flows: Sequence[CashFlow],
        max_iterations: int = XIRR_MAX_ITERATIONS,
        tolerance: float = XIRR_TOLERANCE,
        initial_guess: float = XIRR_INITIAL_GUESS,
) -> Decimal | None:
    """
    Calculate XIRR as a percentage, or None when it cannot be determined.

    Thin wrapper around solve_xirr() for callers that only need the number.
    """
    result = solve_xirr(
        cash_flows,
        max_iterations=max_iterations,
        tolerance=tolerance,
        initial_guess=initial_guess,
    )
    return result.percentage
