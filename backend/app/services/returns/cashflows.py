# backend/app/services/returns/cashflows.py
"""
Cash-flow aggregation for portfolio returns.

Turns a portfolio snapshot into the dated cash flows the XIRR solver needs:
each valued holding is a purchase (outflow on its purchase date) followed by
a notional full liquidation (inflow on the valuation date).

    Holding(cost=1000, bought 2023-01-01, worth 1100)
        -> CashFlow(2023-01-01, -1000), CashFlow(as_of, +1100)

Holdings without a current price contribute nothing, here and in the
invested / current value totals. Fabricating a valuation for them would
distort both.

All functions are pure. The valuation date is always passed in explicitly.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable

from app.services.constants import ZERO
from app.services.returns.types import CashFlow, Holding


def build_cash_flows(holdings: Iterable[Holding], as_of: date) -> list[CashFlow]:
    """
    Build the XIRR cash flow sequence for a set of holdings.

    Args:
        holdings: Portfolio positions, in display order
        as_of: Evaluation date shared by every inflow

    Returns:
        Two cash flows per valued holding, in holding order:
        (-cost_basis, purchase_date) then (+current_valuation, as_of).
        Empty when no holding has a price.
    """
    cash_flows: list[CashFlow] = []

    for holding in holdings:
        valuation = holding.current_valuation
        if valuation is None:
            continue

        cash_flows.append(CashFlow(date=holding.purchase_date, amount=-holding.cost_basis))
        cash_flows.append(CashFlow(date=as_of, amount=valuation))

    return cash_flows


def calculate_totals(holdings: Iterable[Holding]) -> tuple[Decimal, Decimal]:
    """
    Sum invested capital and current value over valued holdings.

    Returns:
        (total_invested, current_value)
    """
    total_invested = ZERO
    current_value = ZERO

    for holding in holdings:
        valuation = holding.current_valuation
        if valuation is None:
            continue
        total_invested += holding.cost_basis
        current_value += valuation

    return total_invested, current_value
