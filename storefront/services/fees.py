# storefront/services/fees.py
from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Dict, Iterable, Optional

from ..schemas.pricing import LineItem, OrderTotals, PromoCode, clamp_amount
from ..settings import settings
from .promos import promo_discount

logger = logging.getLogger(__name__)

LOCAL_TIER = "local"
NATIONAL_TIER = "national"
INTERNATIONAL_TIER = "international"

LOCAL_KEYWORDS = ["lagos"]

NATIONAL_KEYWORDS = [
    "nigeria",
    # states
    "abia", "adamawa", "akwa ibom", "anambra", "bauchi", "bayelsa", "benue", "borno",
    "cross river", "delta", "ebonyi", "edo", "ekiti", "enugu", "gombe", "imo",
    "jigawa", "kaduna", "kano", "katsina", "kebbi", "kogi", "kwara", "nasarawa",
    "niger", "ogun", "ondo", "osun", "oyo", "plateau", "rivers", "sokoto",
    "taraba", "yobe", "zamfara", "abuja", "fct",
    # cities
    "ibadan", "port harcourt", "benin", "maiduguri", "zaria", "aba", "jos",
    "ilorin", "abeokuta", "onitsha", "warri", "okene", "calabar", "uyo",
    "ado-ekiti", "awka", "akure", "makurdi", "lafia", "yenagoa", "jalingo",
    "owerri", "abakaliki", "dutse", "damaturu", "gusau", "yola", "minna",
    "birnin kebbi", "lokoja", "osogbo",
]

# "benin" and "niger" are also neighbouring countries; these phrases mark the foreign ones
FOREIGN_KEYWORDS = [
    "republic of benin", "benin republic", "cotonou", "porto-novo", "porto novo", "parakou",
    "republic of niger", "niger republic", "niamey", "zinder", "maradi",
]


def _keyword_pattern(words: Iterable[str]) -> re.Pattern:
    # whole words only: "london" must not match "ondo"
    alts = sorted({re.escape(w) for w in words}, key=len, reverse=True)
    return re.compile(r"\b(?:" + "|".join(alts) + r")\b")


_LOCAL_RE = _keyword_pattern(LOCAL_KEYWORDS)
_FOREIGN_RE = _keyword_pattern(FOREIGN_KEYWORDS)
_NATIONAL_RE = _keyword_pattern(NATIONAL_KEYWORDS)


def _money(x: float) -> float:
    return round(x, 2)


# ---- Line items --------------------------------------------------------------
def cart_subtotal(items: Iterable[LineItem]) -> float:
    """Sum of price x quantity over the cart, in the base currency."""
    return _money(sum((clamp_amount(i.price) * clamp_amount(i.quantity) for i in items), 0.0))


# ---- Individual fees ---------------------------------------------------------
def service_fee(subtotal: float, rate: Optional[float] = None) -> float:
    rate = settings.service_fee_rate if rate is None else rate
    return _money(clamp_amount(subtotal) * clamp_amount(rate))


def tax(subtotal: float, rate: Optional[float] = None) -> float:
    rate = settings.tax_rate if rate is None else rate
    return _money(clamp_amount(subtotal) * clamp_amount(rate))


def resolve_delivery_tier(address: Optional[str], default_tier: Optional[str] = None) -> Optional[str]:
    """
    Map a free-text destination onto a coarse delivery tier.
    Returns None when no address has been entered yet.
    """
    if not address or not address.strip():
        return None
    normalized = " ".join(address.lower().split())
    if _LOCAL_RE.search(normalized):
        return LOCAL_TIER
    if _FOREIGN_RE.search(normalized):
        return INTERNATIONAL_TIER
    if _NATIONAL_RE.search(normalized):
        return NATIONAL_TIER
    return (default_tier or settings.default_delivery_tier).lower()


def delivery_fee(
    address: Optional[str],
    fees: Optional[Dict[str, float]] = None,
    default_tier: Optional[str] = None,
) -> float:
    fees = settings.delivery_fees if fees is None else fees
    default_tier = (default_tier or settings.default_delivery_tier).lower()
    tier = resolve_delivery_tier(address, default_tier)
    if tier is None:
        return 0.0
    if tier in fees:
        return _money(clamp_amount(fees[tier]))
    logger.debug("no fee configured for tier %s; using %s", tier, default_tier, extra={"tier": tier})
    return _money(clamp_amount(fees.get(default_tier)))


# ---- Order totals ------------------------------------------------------------
def calculate_order_totals(
    subtotal: float,
    address: Optional[str] = None,
    promo: Optional[PromoCode] = None,
    *,
    has_prior_paid_order: bool = False,
    current_uses: Optional[int] = None,
    now: Optional[datetime] = None,
    fees: Optional[Dict[str, float]] = None,
) -> OrderTotals:
    """
    Compute the fee breakdown for an order, all in the base currency:

        total = subtotal - discount + service fee + delivery fee + tax

    Service fee and tax are charged on the undiscounted subtotal. Without an
    address the delivery fee and tax are 0 and the result is marked
    provisional; callers must recompute once the address is known.
    Bad numeric input is treated as 0, nothing here raises.
    """
    subtotal = _money(clamp_amount(subtotal))

    tier = resolve_delivery_tier(address)
    provisional = tier is None

    discount = promo_discount(
        promo,
        subtotal,
        has_prior_paid_order=has_prior_paid_order,
        current_uses=current_uses,
        now=now,
    )
    fee = service_fee(subtotal)
    shipping = 0.0 if provisional else delivery_fee(address, fees)
    vat = 0.0 if provisional else tax(subtotal)
    total = _money(subtotal - discount + fee + shipping + vat)

    return OrderTotals(
        subtotal=subtotal,
        service_fee=fee,
        delivery_fee=shipping,
        tax=vat,
        discount_amount=discount,
        total=total,
        delivery_tier=tier,
        provisional=provisional,
    )


def calculate_cart_totals(
    items: Iterable[LineItem],
    address: Optional[str] = None,
    promo: Optional[PromoCode] = None,
    **kwargs,
) -> OrderTotals:
    return calculate_order_totals(cart_subtotal(items), address, promo, **kwargs)
