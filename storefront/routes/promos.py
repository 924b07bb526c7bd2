# storefront/routes/promos.py
from __future__ import annotations
from fastapi import APIRouter

from ..schemas.api import PromoValidateIn, PromoValidateOut
from ..services.promos import check_promo, promo_discount

router = APIRouter(prefix="/promos", tags=["promos"])


@router.post("/validate", response_model=PromoValidateOut)
def validate_promo_endpoint(body: PromoValidateIn):
    """
    Ineligible promos are a normal 200 with discount 0; the client turns
    `reason` into a message.
    """
    promo = body.promo.to_promo() if body.promo else None
    check = check_promo(promo, body.subtotal, body.hasPriorPaidOrder, body.currentUses)
    discount = promo_discount(promo, body.subtotal, body.hasPriorPaidOrder, body.currentUses)
    return PromoValidateOut(eligible=check.eligible, reason=check.reason, discount=discount)
