"""Tests for currency conversion and display formatting."""
from __future__ import annotations

import pytest

from storefront.services import currency as currency_mod
from storefront.services.currency import (
    SUPPORTED_CURRENCIES,
    CurrencyConverter,
    format_currency,
    get_converter,
    get_currency,
    get_default_currency,
    minimum_order_amount,
    payment_provider,
    to_base,
    to_display,
)
from storefront.settings import Settings


def test_identity_for_base_currency():
    assert to_display(12345.67, "NGN") == 12345.67
    assert to_base(12345.67, "ngn") == 12345.67


def test_to_display_and_back():
    assert to_display(15000, "USD") == pytest.approx(10.05)
    assert to_base(10.05, "USD") == pytest.approx(15000)


@pytest.mark.parametrize("code", [c.code for c in SUPPORTED_CURRENCIES])
@pytest.mark.parametrize("amount", [0, 1, 999.99, 15000, 2_750_000.5])
def test_round_trip_within_tolerance(code, amount):
    assert to_base(to_display(amount, code), code) == pytest.approx(amount, abs=0.05)


def test_unknown_currency_falls_back_to_rate_one():
    conv = get_converter().convert(5000, "XYZ")
    assert conv.fallback is True
    assert conv.rate == 1.0
    assert conv.value == 5000
    assert to_display(5000, "XYZ") == 5000
    assert to_base(5000, None) == 5000


def test_bad_amount_clamped():
    assert to_display(float("nan"), "USD") == 0
    assert to_base(-10, "USD") == 0


def test_injected_rate_table():
    conv = CurrencyConverter({"USD": 0.001, "EUR": 0}, base_currency="NGN")
    assert conv.to_display(1000, "USD") == pytest.approx(1.0)
    assert conv.to_base(2, "usd") == pytest.approx(2000)
    # zero rates are dropped rather than dividing by zero
    assert conv.convert(1000, "EUR").fallback is True
    assert conv.rate("NGN") == 1.0


def test_settings_rate_override(monkeypatch):
    monkeypatch.setattr(currency_mod.settings, "exchange_rates_raw", '{"USD": 0.002}')
    assert to_display(1000, "USD") == pytest.approx(2.0)
    # base currency is always present
    assert to_display(1000, "NGN") == 1000


def test_to_ledger_keeps_original_amount():
    ledger = get_converter().to_ledger(10.05, "USD")
    assert ledger.currency == "USD"
    assert ledger.amount == pytest.approx(15000, abs=0.01)
    assert ledger.original_amount == 10.05

    base = get_converter().to_ledger(5000, "NGN")
    assert base.amount == 5000
    assert base.original_amount is None


# ---------- Formatting ----------

@pytest.mark.parametrize(
    "amount,code,expected",
    [
        (1500000, "NGN", "₦1,500,000"),
        (1499.6, "NGN", "₦1,500"),
        (10.05, "USD", "$10.05"),
        (1234567.891, "EUR", "€1,234,567.89"),
        (1234.4, "JPY", "¥1,234"),
        (12, "CHF", "CHF 12.00"),
        (250, "KES", "KSh 250.00"),
        (99.5, "CAD", "C$99.50"),
        (-5, "USD", "-$5.00"),
        (12, "XYZ", "12.00 XYZ"),
        (float("nan"), "USD", "$0.00"),
    ],
)
def test_format_currency(amount, code, expected):
    assert format_currency(amount, code) == expected


# ---------- Lookups ----------

def test_currency_lookups():
    assert get_currency("usd").symbol == "$"
    assert get_currency("XYZ") is None
    assert get_default_currency().code == "NGN"


def test_payment_provider():
    assert payment_provider("NGN") == "paystack"
    assert payment_provider("usd") == "paypal"


def test_minimum_order_amount():
    assert minimum_order_amount("NGN") == 1000
    assert minimum_order_amount("JPY") == 100
    assert minimum_order_amount("XYZ") == 1


def test_default_currency_follows_base(monkeypatch):
    monkeypatch.setenv("BASE_CURRENCY", "USD")
    monkeypatch.setattr(currency_mod, "settings", Settings())
    default = get_default_currency()
    assert default.code == "USD"
    assert default.is_default is True
    assert payment_provider("USD") == "paystack"
    # built-in table is re-expressed against the new base
    assert to_display(1, "USD") == 1
    assert to_display(1, "NGN") == pytest.approx(1 / 0.00067)
    assert to_display(100, "EUR") == pytest.approx(100 * 0.00061 / 0.00067)


def test_default_currency_is_flagged():
    assert get_default_currency().is_default is True
    assert get_currency("NGN").is_default is False
