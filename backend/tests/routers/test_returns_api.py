# backend/tests/routers/test_returns_api.py
"""
API layer tests for returns endpoints.

These tests verify the HTTP layer using FastAPI's TestClient:
- Correct status codes (200, 400, 413, 422)
- Response JSON structure matches Pydantic schemas
- Query parameter handling
- Error envelopes
"""

from datetime import date
from decimal import Decimal

from app.dependencies import get_returns_service
from app.services.constants import MAX_CASH_FLOWS_PER_REQUEST, MAX_HOLDINGS_PER_REQUEST
from app.services.returns import ReturnsService


def holding_payload(
        symbol: str = "INFY",
        quantity: str = "10",
        buying_price: str = "100",
        purchase_date: str = "2023-01-01",
        current_price: str | None = "110",
) -> dict:
    payload = {
        "symbol": symbol,
        "quantity": quantity,
        "buying_price": buying_price,
        "purchase_date": purchase_date,
    }
    if current_price is not None:
        payload["current_price"] = current_price
    return payload


SAMPLE_PORTFOLIO = {
    "as_of": "2024-01-01",
    "holdings": [
        holding_payload("INFY", "10", "100", "2023-01-01", "110"),
        holding_payload("TCS", "5", "100", "2023-07-02", "104.894"),
        holding_payload("WIPRO", "3", "100", "2023-03-01", None),
    ],
}


# =============================================================================
# POST /returns/xirr
# =============================================================================

class TestXirrEndpoint:
    """Tests for POST /returns/xirr."""

    def test_converged(self, client):
        response = client.post("/returns/xirr", json={
            "cash_flows": [
                {"date": "2023-01-01", "amount": "-1000"},
                {"date": "2024-01-01", "amount": "1100"},
            ]
        })

        assert response.status_code == 200
        data = response.json()
        assert data["is_determined"] is True
        assert data["outcome"] == "converged"
        assert abs(Decimal(data["xirr"]) - Decimal("10")) < Decimal("0.01")
        assert data["iterations"] >= 1

    def test_numeric_amounts_accepted(self, client):
        response = client.post("/returns/xirr", json={
            "cash_flows": [
                {"date": "2023-01-01", "amount": -1000},
                {"date": "2024-01-01", "amount": 800},
            ]
        })

        assert response.status_code == 200
        assert abs(Decimal(response.json()["xirr"]) - Decimal("-20")) < Decimal("0.01")

    def test_insufficient_data_is_null_not_error(self, client):
        response = client.post("/returns/xirr", json={
            "cash_flows": [{"date": "2023-01-01", "amount": "-1000"}]
        })

        assert response.status_code == 200
        data = response.json()
        assert data["xirr"] is None
        assert data["is_determined"] is False
        assert data["outcome"] == "insufficient_data"

    def test_domain_failure_is_null(self, client):
        response = client.post("/returns/xirr", json={
            "cash_flows": [
                {"date": "2020-01-01", "amount": "-1000000"},
                {"date": "2030-01-01", "amount": "1"},
            ]
        })

        assert response.status_code == 200
        assert response.json()["outcome"] == "numeric_domain_failure"
        assert response.json()["xirr"] is None

    def test_missing_body_field(self, client):
        response = client.post("/returns/xirr", json={})

        assert response.status_code == 422
        data = response.json()
        assert data["error"] == "ValidationError"
        assert data["details"][0]["field"] == "body.cash_flows"

    def test_invalid_date(self, client):
        response = client.post("/returns/xirr", json={
            "cash_flows": [{"date": "not-a-date", "amount": "1"}]
        })

        assert response.status_code == 422

    def test_full_cash_flow_limit_accepted(self, client):
        half = MAX_CASH_FLOWS_PER_REQUEST // 2
        cash_flows = (
            [{"date": "2020-01-01", "amount": "-1"}] * half
            + [{"date": "2024-01-01", "amount": "1.5"}] * half
        )

        response = client.post("/returns/xirr", json={"cash_flows": cash_flows})

        assert response.status_code == 200
        assert response.json()["is_determined"] is True

    def test_flows_of_a_full_portfolio_accepted(self, client):
        portfolio = client.post("/returns/portfolio", json={
            "as_of": "2024-01-01",
            "holdings": [
                holding_payload(quantity="1", buying_price="1", purchase_date="2020-01-01", current_price="1.5")
            ] * MAX_HOLDINGS_PER_REQUEST,
        })
        cash_flows = (
            [{"date": "2020-01-01", "amount": "-1"}] * MAX_HOLDINGS_PER_REQUEST
            + [{"date": "2024-01-01", "amount": "1.5"}] * MAX_HOLDINGS_PER_REQUEST
        )

        xirr = client.post("/returns/xirr", json={"cash_flows": cash_flows})

        assert portfolio.status_code == 200
        assert xirr.status_code == 200
        assert xirr.json()["xirr"] == portfolio.json()["xirr"]

    def test_over_cash_flow_limit_rejected(self, client):
        cash_flows = [{"date": "2020-01-01", "amount": "-1"}] * (MAX_CASH_FLOWS_PER_REQUEST + 1)

        response = client.post("/returns/xirr", json={"cash_flows": cash_flows})

        assert response.status_code == 422


# =============================================================================
# POST /returns/portfolio
# =============================================================================

class TestPortfolioEndpoint:
    """Tests for POST /returns/portfolio."""

    def test_summary(self, client):
        response = client.post("/returns/portfolio", json=SAMPLE_PORTFOLIO)

        assert response.status_code == 200
        data = response.json()
        assert data["as_of"] == "2024-01-01"
        assert data["total_invested"] == "1500"
        assert data["current_value"] == "1624.47"
        assert data["total_returns"] == "124.47"
        assert data["returns_percentage"] == "8.298"
        assert data["xirr_status"] == "determined"
        assert data["xirr_outcome"] == "converged"
        assert abs(Decimal(data["xirr"]) - Decimal("10")) < Decimal("0.01")
        assert data["holdings_count"] == 3
        assert data["unvalued_count"] == 1
        assert len(data["warnings"]) == 1

    def test_holding_rows(self, client):
        response = client.post("/returns/portfolio", json=SAMPLE_PORTFOLIO)

        rows = {row["symbol"]: row for row in response.json()["holdings"]}
        assert rows["INFY"]["invested"] == "1000"
        assert rows["INFY"]["current_value"] == "1100"
        assert rows["INFY"]["absolute_return"] == "100"
        assert rows["INFY"]["return_percentage"] == "10"
        assert rows["WIPRO"]["current_price"] is None
        assert rows["WIPRO"]["current_value"] is None
        assert rows["WIPRO"]["return_percentage"] is None

    def test_default_sort_is_latest_purchase_first(self, client):
        response = client.post("/returns/portfolio", json=SAMPLE_PORTFOLIO)

        symbols = [row["symbol"] for row in response.json()["holdings"]]
        assert symbols == ["TCS", "WIPRO", "INFY"]

    def test_sort_query_parameters(self, client):
        response = client.post(
            "/returns/portfolio",
            params={"sort_by": "returns", "order": "asc"},
            json=SAMPLE_PORTFOLIO,
        )

        assert response.status_code == 200
        symbols = [row["symbol"] for row in response.json()["holdings"]]
        assert symbols == ["TCS", "INFY", "WIPRO"]

    def test_invalid_sort_field(self, client):
        response = client.post(
            "/returns/portfolio",
            params={"sort_by": "colour"},
            json=SAMPLE_PORTFOLIO,
        )

        assert response.status_code == 422

    def test_empty_portfolio_is_calculating(self, client):
        response = client.post("/returns/portfolio", json={"as_of": "2024-01-01", "holdings": []})

        assert response.status_code == 200
        data = response.json()
        assert data["xirr"] is None
        assert data["xirr_status"] == "calculating"
        assert data["xirr_outcome"] == "insufficient_data"
        assert data["returns_percentage"] == "0"

    def test_as_of_defaults_to_today(self, client):
        response = client.post("/returns/portfolio", json={
            "holdings": [holding_payload(purchase_date="2020-01-01")]
        })

        assert response.status_code == 200
        assert response.json()["as_of"] == date.today().isoformat()

    def test_purchase_after_as_of(self, client):
        response = client.post("/returns/portfolio", json={
            "as_of": "2024-01-01",
            "holdings": [holding_payload(purchase_date="2024-06-01")],
        })

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "PurchaseAfterValuationError"
        assert data["details"]["symbol"] == "INFY"
        assert data["details"]["field"] == "holdings[0].purchase_date"

    def test_non_positive_quantity(self, client):
        response = client.post("/returns/portfolio", json={
            "as_of": "2024-01-01",
            "holdings": [holding_payload(quantity="0")],
        })

        assert response.status_code == 422
        fields = [d["field"] for d in response.json()["details"]]
        assert "body.holdings.0.quantity" in fields

    def test_negative_price(self, client):
        response = client.post("/returns/portfolio", json={
            "as_of": "2024-01-01",
            "holdings": [holding_payload(current_price="-5")],
        })

        assert response.status_code == 422

    def test_too_many_holdings(self, client):
        from app.main import app

        app.dependency_overrides[get_returns_service] = lambda: ReturnsService(max_holdings=1)

        response = client.post("/returns/portfolio", json=SAMPLE_PORTFOLIO)

        assert response.status_code == 413
        data = response.json()
        assert data["error"] == "TooManyItemsError"
        assert data["details"] == {"field": "holdings", "count": 3, "limit": 1}


# =============================================================================
# GLOBAL ENDPOINTS
# =============================================================================

class TestGlobalEndpoints:
    """Tests for root and health endpoints."""

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["docs"] == "/docs"

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["environment"] == "test"

    def test_unknown_route(self, client):
        response = client.get("/does-not-exist")

        assert response.status_code == 404
