"""Tests for the persisted order record."""
from __future__ import annotations

import pytest

from storefront.services.currency import get_converter
from storefront.services.fees import calculate_cart_totals
from storefront.services.orders import build_order_record


def test_record_in_base_currency(cart, fees, promo10, now):
    totals = calculate_cart_totals(cart, "Lagos", promo10, now=now, fees=fees)
    record = build_order_record(cart, totals, promo10, "NGN", "Lagos")
    assert record["total"] == 10650
    assert record["discount_amount"] == 800
    assert record["promo_code"] == "SAVE10"
    assert record["promo_code_id"] == "promo-1"
    assert record["currency"] == "NGN"
    assert record["original_currency"] is None
    assert record["original_amount"] is None
    assert record["items"][0]["line_total"] == 8000


def test_record_keeps_original_currency(cart, fees):
    totals = calculate_cart_totals(cart, "Lagos", fees=fees)
    record = build_order_record(cart, totals, currency="usd", address="Lagos")
    assert record["currency"] == "NGN"
    assert record["total"] == 11450
    assert record["original_currency"] == "USD"
    assert record["original_amount"] == pytest.approx(11450 * 0.00067, abs=0.01)


def test_unknown_currency_stored_in_base_only(cart, fees):
    totals = calculate_cart_totals(cart, "Lagos", fees=fees)
    record = build_order_record(cart, totals, currency="XYZ", address="Lagos")
    assert record["original_currency"] is None


def test_ineligible_promo_not_recorded(cart, fees, promo10, now):
    first = promo10.model_copy(update={"first_time_only": True})
    totals = calculate_cart_totals(cart, "Lagos", first, has_prior_paid_order=True, now=now, fees=fees)
    record = build_order_record(cart, totals, first, "NGN", "Lagos")
    assert record["promo_code"] is None
    assert record["discount_amount"] == 0


def test_provisional_totals_rejected(cart, fees):
    totals = calculate_cart_totals(cart, None, fees=fees)
    with pytest.raises(ValueError):
        build_order_record(cart, totals)


def test_empty_cart_rejected(fees):
    totals = calculate_cart_totals([], "Lagos", fees=fees)
    with pytest.raises(ValueError):
        build_order_record([], totals)


def test_original_amount_matches_ledger_entry(cart, fees):
    totals = calculate_cart_totals(cart, "Lagos", fees=fees)
    record = build_order_record(cart, totals, currency="EUR", address="Lagos")
    ledger = get_converter().to_ledger(totals.total * 0.00061, "EUR")
    assert record["original_currency"] == ledger.currency == "EUR"
    assert record["original_amount"] == ledger.original_amount
    assert ledger.amount == pytest.approx(record["total"], abs=0.01)
