# storefront/routes/pricing.py
from __future__ import annotations
from typing import Any, Dict

from fastapi import APIRouter, HTTPException

from ..schemas.api import QuoteIn, QuoteOut
from ..services.fees import calculate_cart_totals
from ..services.orders import build_order_record
from ..services.quotes import build_quote

router = APIRouter(prefix="/pricing", tags=["pricing"])


@router.post("/quote", response_model=QuoteOut)
def quote_endpoint(body: QuoteIn):
    """Recomputed on every cart/address change; nothing is stored."""
    items = [li.to_line_item() for li in body.items]
    promo = body.promo.to_promo() if body.promo else None
    return build_quote(
        items,
        address=body.address,
        promo=promo,
        currency=body.currency,
        has_prior_paid_order=body.hasPriorPaidOrder,
    )


@router.post("/order-record")
def order_record_endpoint(body: QuoteIn) -> Dict[str, Any]:
    """
    Freeze the totals for order creation. Rejected until a delivery
    address is known.
    """
    items = [li.to_line_item() for li in body.items]
    promo = body.promo.to_promo() if body.promo else None
    totals = calculate_cart_totals(
        items, body.address, promo, has_prior_paid_order=body.hasPriorPaidOrder
    )
    try:
        return build_order_record(items, totals, promo, body.currency, body.address)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
