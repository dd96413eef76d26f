# backend/tests/services/returns/test_returns_service.py
"""
Tests for ReturnsService.

The service adds caller-contract checks on top of the pure functions, so
these tests focus on what it rejects and on what it passes through.
"""

from datetime import date
from decimal import Decimal

import pytest

from app.services.exceptions import (
    NonFiniteAmountError,
    PurchaseAfterValuationError,
    TooManyItemsError,
    ValidationError,
)
from app.services.returns import CashFlow, HoldingSortField, ReturnsService, XirrOutcome
from tests.conftest import make_holding

AS_OF = date(2024, 1, 1)


@pytest.fixture
def service() -> ReturnsService:
    return ReturnsService()


class TestGetXirr:
    """Tests for ReturnsService.get_xirr."""

    def test_converges(self, service):
        cash_flows = [
            CashFlow(date=date(2023, 1, 1), amount=Decimal("-1000")),
            CashFlow(date=date(2024, 1, 1), amount=Decimal("1100")),
        ]

        result = service.get_xirr(cash_flows)

        assert result.is_determined
        assert abs(result.percentage - Decimal("10")) < Decimal("0.01")

    def test_undetermined_is_not_an_error(self, service):
        result = service.get_xirr([])

        assert result.outcome is XirrOutcome.INSUFFICIENT_DATA

    def test_too_many_cash_flows(self):
        service = ReturnsService(max_cash_flows=3)
        cash_flows = [CashFlow(date=AS_OF, amount=Decimal("-1"))] * 4

        with pytest.raises(TooManyItemsError) as exc_info:
            service.get_xirr(cash_flows)

        assert exc_info.value.count == 4
        assert exc_info.value.limit == 3
        assert exc_info.value.field == "cash_flows"

    def test_cash_flow_limit_is_twice_the_holding_limit(self, service):
        assert service.max_cash_flows == 2 * service.max_holdings

        half = service.max_cash_flows // 2
        cash_flows = (
            [CashFlow(date=date(2020, 1, 1), amount=Decimal("-1"))] * half
            + [CashFlow(date=AS_OF, amount=Decimal("1.5"))] * half
        )

        assert service.get_xirr(cash_flows).is_determined

    @pytest.mark.parametrize("amount", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_amount(self, service, amount):
        cash_flows = [
            CashFlow(date=date(2023, 1, 1), amount=Decimal("-1000")),
            CashFlow(date=AS_OF, amount=Decimal(amount)),
        ]

        with pytest.raises(NonFiniteAmountError) as exc_info:
            service.get_xirr(cash_flows)

        assert exc_info.value.field == "cash_flows[1].amount"

    def test_solver_settings_are_used(self):
        service = ReturnsService(max_iterations=1)
        cash_flows = [
            CashFlow(date=date(2023, 1, 1), amount=Decimal("-1000")),
            CashFlow(date=date(2024, 1, 1), amount=Decimal("1200")),
        ]

        assert service.get_xirr(cash_flows).outcome is XirrOutcome.NON_CONVERGENCE


class TestGetPortfolioSummary:
    """Tests for ReturnsService.get_portfolio_summary."""

    def test_summary(self, service, sample_holdings):
        summary = service.get_portfolio_summary(sample_holdings, as_of=AS_OF)

        assert summary.total_invested == Decimal("1500")
        assert summary.xirr.is_determined

    def test_sorting_is_forwarded(self, service, sample_holdings):
        summary = service.get_portfolio_summary(
            sample_holdings,
            as_of=AS_OF,
            sort_by=HoldingSortField.SYMBOL,
            descending=False,
        )

        assert [row.holding.symbol for row in summary.holdings] == ["INFY", "TCS", "WIPRO"]

    def test_purchase_after_valuation_date(self, service):
        holdings = [
            make_holding("INFY", purchase_date=date(2023, 1, 1)),
            make_holding("TCS", purchase_date=date(2024, 2, 1)),
        ]

        with pytest.raises(PurchaseAfterValuationError) as exc_info:
            service.get_portfolio_summary(holdings, as_of=AS_OF)

        assert exc_info.value.symbol == "TCS"
        assert exc_info.value.field == "holdings[1].purchase_date"
        assert isinstance(exc_info.value, ValidationError)

    def test_purchase_on_valuation_date_is_allowed(self, service):
        summary = service.get_portfolio_summary([make_holding(purchase_date=AS_OF)], as_of=AS_OF)

        assert not summary.xirr.is_determined

    def test_too_many_holdings(self):
        service = ReturnsService(max_holdings=1)

        with pytest.raises(TooManyItemsError):
            service.get_portfolio_summary([make_holding(), make_holding()], as_of=AS_OF)

    def test_non_finite_price(self, service):
        holdings = [make_holding(current_price="NaN")]

        with pytest.raises(NonFiniteAmountError) as exc_info:
            service.get_portfolio_summary(holdings, as_of=AS_OF)

        assert exc_info.value.field == "holdings[0].current_price"
