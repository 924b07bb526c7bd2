"""Shared fixtures: pin pricing config so tests don't depend on the host env."""
from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone

# Set env vars BEFORE any storefront imports
os.environ["BASE_CURRENCY"] = "NGN"
os.environ["SERVICE_FEE_RATE"] = "0.02"
os.environ["TAX_RATE"] = "0.075"
os.environ["DEFAULT_DELIVERY_TIER"] = "international"
os.environ.pop("DELIVERY_FEES", None)
os.environ.pop("EXCHANGE_RATES", None)
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest

from storefront.schemas.pricing import LineItem, PromoCode


NOW = datetime(2025, 7, 1, 12, 0, tzinfo=timezone.utc)

# flat 500 for the home city, as in the worked checkout examples
TEST_FEES = {"local": 500.0, "national": 1500.0, "international": 9000.0}


@pytest.fixture()
def now() -> datetime:
    return NOW


@pytest.fixture()
def fees() -> dict:
    return dict(TEST_FEES)


@pytest.fixture()
def promo10() -> PromoCode:
    """10% off, capped at 800, valid around NOW."""
    return PromoCode(
        id="promo-1",
        code="SAVE10",
        description="10% off",
        discount=0.10,
        max_discount_amount=800,
        start_date=NOW - timedelta(days=7),
        end_date=NOW + timedelta(days=7),
    )


@pytest.fixture()
def cart() -> list[LineItem]:
    return [
        LineItem(product_id="shirt", name="Ankara shirt", price=4000, quantity=2, size="M", color="blue"),
        LineItem(product_id="cap", name="Cap", price=2000, quantity=1),
    ]


@pytest.fixture()
def client():
    """FastAPI TestClient (sync)."""
    from fastapi.testclient import TestClient
    from storefront.main import app
    return TestClient(app)
