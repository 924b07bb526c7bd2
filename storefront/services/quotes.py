# storefront/services/quotes.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from ..schemas.pricing import LineItem, OrderTotals, PromoCode
from .currency import CurrencyConverter, get_converter, minimum_order_amount, payment_provider
from .fees import calculate_order_totals, cart_subtotal
from .promos import check_promo

_AMOUNT_FIELDS = {
    "subtotal": "subtotal",
    "serviceFee": "service_fee",
    "deliveryFee": "delivery_fee",
    "tax": "tax",
    "discountAmount": "discount_amount",
    "total": "total",
}


def _amounts(totals: OrderTotals, convert, currency: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {k: convert(getattr(totals, attr)) for k, attr in _AMOUNT_FIELDS.items()}
    out["currency"] = currency
    return out


def build_quote(
    items: Iterable[LineItem],
    address: Optional[str] = None,
    promo: Optional[PromoCode] = None,
    currency: Optional[str] = None,
    has_prior_paid_order: bool = False,
    now: Optional[datetime] = None,
    converter: Optional[CurrencyConverter] = None,
) -> Dict[str, Any]:
    """
    Price a cart for the checkout screen.

    `amounts` is the base-currency breakdown that gets persisted; `display`
    and `formatted` are the same numbers in the customer's currency and are
    for rendering only.
    """
    converter = converter or get_converter()
    items = list(items)
    subtotal = cart_subtotal(items)
    totals = calculate_order_totals(
        subtotal, address, promo, has_prior_paid_order=has_prior_paid_order, now=now
    )

    code = (currency or converter.base_currency).strip().upper()
    fallback = converter.convert(0, code).fallback
    # unknown codes are rendered in the base currency
    display_code = converter.base_currency if fallback else code

    display = _amounts(totals, lambda v: round(converter.to_display(v, display_code), 2), display_code)
    formatted = {
        k: converter.format(v, display_code)
        for k, v in display.items()
        if k != "currency"
    }

    promo_info = None
    if promo is not None:
        check = check_promo(promo, subtotal, has_prior_paid_order, now=now)
        promo_info = {"code": promo.code, "eligible": check.eligible, "reason": check.reason}

    return {
        "itemCount": sum(i.quantity for i in items),
        "amounts": _amounts(totals, lambda v: v, converter.base_currency),
        "display": display,
        "formatted": formatted,
        "deliveryTier": totals.delivery_tier,
        "provisional": totals.provisional,
        "currencyFallback": fallback,
        "paymentProvider": payment_provider(display_code),
        "minimumOrderMet": display["subtotal"] >= minimum_order_amount(display_code),
        "promo": promo_info,
    }
