# backend/tests/conftest.py
"""
Pytest configuration and fixtures.

This module provides shared fixtures for all tests:
- Test environment settings (applied before any app module is imported)
- Sample holding factories
- A TestClient for API tests
"""

import os

# Must run before app.config builds its Settings instance
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("APP_NAME", "Test App")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from datetime import date
from decimal import Decimal
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from app.services.returns import Holding


# =============================================================================
# SAMPLE DATA FACTORIES
# =============================================================================

def make_holding(
        symbol: str = "INFY",
        quantity: str = "10",
        buying_price: str = "100",
        purchase_date: date = date(2023, 1, 1),
        current_price: str | None = "110",
) -> Holding:
    """Create a Holding from string amounts."""
    return Holding(
        symbol=symbol,
        quantity=Decimal(quantity),
        buying_price=Decimal(buying_price),
        purchase_date=purchase_date,
        current_price=Decimal(current_price) if current_price is not None else None,
    )


@pytest.fixture
def holding_factory():
    """Factory fixture for creating holdings in tests."""
    return make_holding


@pytest.fixture
def sample_holdings() -> list[Holding]:
    """
    A small portfolio valued on 2024-01-01.

    - INFY: 1000 invested on 2023-01-01, worth 1100 (+10% in 365 days)
    - TCS:  500 invested on 2023-07-02, worth 524.47 (+10% p.a. over 183 days)
    - WIPRO: 300 invested, no current price
    """
    return [
        make_holding("INFY", "10", "100", date(2023, 1, 1), "110"),
        make_holding("TCS", "5", "100", date(2023, 7, 2), "104.894"),
        make_holding("WIPRO", "3", "100", date(2023, 3, 1), None),
    ]


# =============================================================================
# API CLIENT
# =============================================================================

@pytest.fixture
def client() -> Iterator[TestClient]:
    """TestClient for the FastAPI app with dependency overrides reset afterwards."""
    from app.main import app

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
