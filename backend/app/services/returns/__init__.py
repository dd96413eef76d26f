# backend/app/services/returns/__init__.py
"""
Returns Service Package.

This package computes what a portfolio has earned:
- Cash-flow aggregation (holdings -> dated, signed cash flows)
- XIRR (annualized money-weighted return, Newton-Raphson solver)
- Portfolio summary (invested, current value, returns, per-holding rows)

Architecture:
    returns/
    ├── __init__.py              # This file - package exports
    ├── types.py                 # Value objects (CashFlow, Holding, results)
    ├── cashflows.py             # Aggregator: holdings -> cash flows, totals
    ├── xirr.py                  # XIRR solver
    ├── summary.py               # Per-holding returns, sorting, summary
    └── service.py               # ReturnsService (validation + orchestration)

Data Flow:
    list[Holding] + as_of
        ↓
    build_cash_flows()  ->  list[CashFlow]
        ↓
    solve_xirr()        ->  AnnualizedReturn (rate or undetermined)
        ↓
    PortfolioSummary

Usage:
    from app.services.returns import CashFlow, calculate_xirr

    rate = calculate_xirr([
        CashFlow(date(2023, 1, 1), Decimal("-1000")),
        CashFlow(date(2024, 1, 1), Decimal("1100")),
    ])  # Decimal("10.00000000"), or None when undetermined
"""

from app.services.returns.cashflows import build_cash_flows, calculate_totals
from app.services.returns.service import ReturnsService
from app.services.returns.summary import (
    calculate_holding_returns,
    sort_holding_returns,
    summarize_portfolio,
)
from app.services.returns.types import (
    AnnualizedReturn,
    CashFlow,
    Holding,
    HoldingReturns,
    HoldingSortField,
    PortfolioSummary,
    XirrOutcome,
)
from app.services.returns.xirr import (
    calculate_xirr,
    solve_xirr,
    xnpv,
    xnpv_derivative,
)

__all__ = [
    # Service
    "ReturnsService",

    # Types
    "AnnualizedReturn",
    "CashFlow",
    "Holding",
    "HoldingReturns",
    "HoldingSortField",
    "PortfolioSummary",
    "XirrOutcome",

    # Functions
    "build_cash_flows",
    "calculate_totals",
    "calculate_xirr",
    "solve_xirr",
    "xnpv",
    "xnpv_derivative",
    "calculate_holding_returns",
    "sort_holding_returns",
    "summarize_portfolio",
]
