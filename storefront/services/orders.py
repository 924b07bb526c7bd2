# storefront/services/orders.py
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional

from ..schemas.pricing import LineItem, OrderTotals, PromoCode
from ..settings import settings
from .currency import CurrencyConverter, get_converter

logger = logging.getLogger(__name__)


def _line_to_dict(item: LineItem) -> Dict[str, Any]:
    return {
        "product_id": item.product_id,
        "name": item.name,
        "price": item.price,
        "quantity": item.quantity,
        "size": item.size,
        "color": item.color,
        "line_total": item.line_total,
    }


def build_order_record(
    items: Iterable[LineItem],
    totals: OrderTotals,
    promo: Optional[PromoCode] = None,
    currency: Optional[str] = None,
    address: Optional[str] = None,
    converter: Optional[CurrencyConverter] = None,
) -> Dict[str, Any]:
    """
    Flatten an order into the row handed to the order-creation call.

    Amounts stay in the base currency. When the customer pays in another
    currency the converted total is kept next to it for audit.
    """
    if totals.provisional:
        raise ValueError("totals are provisional; recompute with a delivery address first")

    converter = converter or get_converter()
    currency = (currency or settings.base_currency).strip().upper()
    lines = [_line_to_dict(i) for i in items]
    if not lines:
        raise ValueError("cannot create an order from an empty cart")

    record: Dict[str, Any] = {
        "items": lines,
        "subtotal": totals.subtotal,
        "service_fee": totals.service_fee,
        "delivery_fee": totals.delivery_fee,
        "tax": totals.tax,
        "discount_amount": totals.discount_amount,
        "total": totals.total,
        "delivery_address": address,
        "delivery_tier": totals.delivery_tier,
        "promo_code": promo.code if promo and totals.discount_amount > 0 else None,
        "promo_code_id": promo.id if promo and totals.discount_amount > 0 else None,
        "currency": converter.base_currency,
        "original_currency": None,
        "original_amount": None,
    }

    if not converter.is_base(currency):
        conv = converter.convert(totals.total, currency, "to_display")
        if conv.fallback:
            logger.warning("order in unsupported currency %s stored in %s only", currency,
                           converter.base_currency, extra={"currency": currency})
        else:
            ledger = converter.to_ledger(conv.value, currency)
            record["original_currency"] = ledger.currency
            record["original_amount"] = ledger.original_amount

    return record
