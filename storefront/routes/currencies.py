# storefront/routes/currencies.py
from __future__ import annotations
from typing import List

from fastapi import APIRouter

from ..schemas.api import ConvertIn, ConvertOut, CurrencyOut
from ..services.currency import SUPPORTED_CURRENCIES, get_converter

router = APIRouter(prefix="/currencies", tags=["currencies"])


@router.get("", response_model=List[CurrencyOut])
def list_currencies_endpoint():
    conv = get_converter()
    return [
        CurrencyOut(code=c.code, name=c.name, symbol=c.symbol, isDefault=conv.is_base(c.code), rate=conv.rate(c.code))
        for c in SUPPORTED_CURRENCIES
    ]


@router.post("/convert", response_model=ConvertOut)
def convert_endpoint(body: ConvertIn):
    conv = get_converter()
    result = conv.convert(body.amount, body.currency, body.direction)
    # the formatted string is always in the currency the value ends up in
    shown_in = result.currency if body.direction == "to_display" else conv.base_currency
    if result.fallback:
        shown_in = conv.base_currency
    return ConvertOut(
        amount=round(result.value, 2),
        currency=result.currency,
        rate=result.rate,
        fallback=result.fallback,
        formatted=conv.format(result.value, shown_in),
    )
