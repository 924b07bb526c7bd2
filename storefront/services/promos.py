# storefront/services/promos.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from ..schemas.pricing import PromoCheck, PromoCode, clamp_amount, clamp_quantity

logger = logging.getLogger(__name__)

# Reason codes returned with an ineligible check; the UI maps them to messages.
MISSING = "missing"
INACTIVE = "inactive"
NOT_STARTED = "not_started"
EXPIRED = "expired"
USAGE_LIMIT = "usage_limit"
BELOW_MINIMUM = "below_minimum"
FIRST_TIME_ONLY = "first_time_only"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _aware(dt: datetime) -> datetime:
    # stored timestamps without an offset are UTC
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)


def normalize_code(raw: Optional[str]) -> str:
    return (raw or "").strip().upper()


def check_promo(
    promo: Optional[PromoCode],
    subtotal: float,
    has_prior_paid_order: bool = False,
    current_uses: Optional[int] = None,
    now: Optional[datetime] = None,
) -> PromoCheck:
    """
    Decide whether a promo applies to an order. Fails closed: the first
    failed condition wins and the order gets no discount at all.

    `current_uses` overrides the count stored on the promo when the caller
    has a fresher one.
    """
    if promo is None:
        return PromoCheck(eligible=False, reason=MISSING)
    if not promo.is_active:
        return PromoCheck(eligible=False, reason=INACTIVE)

    now = _aware(now or _now())
    if promo.start_date and _aware(promo.start_date) > now:
        return PromoCheck(eligible=False, reason=NOT_STARTED)
    if promo.end_date and _aware(promo.end_date) < now:
        return PromoCheck(eligible=False, reason=EXPIRED)

    uses = promo.current_uses if current_uses is None else clamp_quantity(current_uses)
    if promo.max_uses is not None and uses >= promo.max_uses:
        return PromoCheck(eligible=False, reason=USAGE_LIMIT)

    if promo.min_order_amount and clamp_amount(subtotal) < promo.min_order_amount:
        return PromoCheck(eligible=False, reason=BELOW_MINIMUM)

    if promo.first_time_only and has_prior_paid_order:
        return PromoCheck(eligible=False, reason=FIRST_TIME_ONLY)

    return PromoCheck(eligible=True)


def is_promo_eligible(
    promo: Optional[PromoCode],
    subtotal: float,
    has_prior_paid_order: bool = False,
    current_uses: Optional[int] = None,
    now: Optional[datetime] = None,
) -> bool:
    return check_promo(promo, subtotal, has_prior_paid_order, current_uses, now).eligible


def promo_discount(
    promo: Optional[PromoCode],
    subtotal: float,
    has_prior_paid_order: bool = False,
    current_uses: Optional[int] = None,
    now: Optional[datetime] = None,
) -> float:
    """subtotal x discount fraction, capped at max_discount_amount; 0 when ineligible."""
    subtotal = clamp_amount(subtotal)
    check = check_promo(promo, subtotal, has_prior_paid_order, current_uses, now)
    if not check.eligible:
        if promo is not None:
            logger.debug("promo %s not applied: %s", promo.code, check.reason)
        return 0.0

    amount = subtotal * promo.discount
    if promo.max_discount_amount is not None:
        amount = min(amount, clamp_amount(promo.max_discount_amount))
    return round(amount, 2)


def redeem(promo: PromoCode) -> PromoCode:
    """
    Record one use of the promo against a committed order. The returned copy
    is deactivated once it reaches its usage limit.
    """
    uses = promo.current_uses + 1
    active = promo.is_active and (promo.max_uses is None or uses < promo.max_uses)
    return promo.model_copy(update={"current_uses": uses, "is_active": active})
