# storefront/services/currency.py
from __future__ import annotations

import logging
import math
from typing import Dict, List, Literal, Optional

from ..schemas.pricing import Conversion, Currency, LedgerAmount, clamp_amount
from ..settings import settings

logger = logging.getLogger(__name__)

SUPPORTED_CURRENCIES: List[Currency] = [
    Currency(code="NGN", name="Nigerian Naira", symbol="₦"),
    Currency(code="USD", name="US Dollar", symbol="$"),
    Currency(code="EUR", name="Euro", symbol="€"),
    Currency(code="GBP", name="British Pound", symbol="£"),
    Currency(code="CAD", name="Canadian Dollar", symbol="C$"),
    Currency(code="AUD", name="Australian Dollar", symbol="A$"),
    Currency(code="JPY", name="Japanese Yen", symbol="¥"),
    Currency(code="CHF", name="Swiss Franc", symbol="CHF"),
    Currency(code="CNY", name="Chinese Yuan", symbol="¥"),
    Currency(code="INR", name="Indian Rupee", symbol="₹"),
    Currency(code="ZAR", name="South African Rand", symbol="R"),
    Currency(code="KES", name="Kenyan Shilling", symbol="KSh"),
    Currency(code="GHS", name="Ghanaian Cedi", symbol="₵"),
]

_BY_CODE: Dict[str, Currency] = {c.code: c for c in SUPPORTED_CURRENCIES}

# no minor unit shown on screen
ZERO_DECIMAL_CURRENCIES = {"JPY", "KRW"}

# smallest order accepted at checkout, in each currency's own units
MINIMUM_ORDER_AMOUNTS: Dict[str, float] = {
    "NGN": 1000, "USD": 1, "EUR": 1, "GBP": 1, "CAD": 1, "AUD": 1,
    "JPY": 100, "CHF": 1, "CNY": 5, "INR": 50, "ZAR": 10, "KES": 100, "GHS": 5,
}

Direction = Literal["to_display", "to_base"]


def _code(code: Optional[str]) -> str:
    return (code or "").strip().upper()


class CurrencyConverter:
    """
    Converts between the base ledger currency and display currencies.

    `rates` maps a currency code to the value of one base unit in that
    currency. Swap the table (e.g. for one fetched from a rates API) without
    touching callers.
    """

    def __init__(self, rates: Dict[str, float], base_currency: str = "NGN"):
        self.base_currency = _code(base_currency)
        self.rates = {_code(k): float(v) for k, v in rates.items() if clamp_amount(v) > 0}
        self.rates[self.base_currency] = 1.0

    def rate(self, code: Optional[str]) -> Optional[float]:
        return self.rates.get(_code(code))

    def is_base(self, code: Optional[str]) -> bool:
        return _code(code) == self.base_currency

    def convert(self, amount: float, code: Optional[str], direction: Direction = "to_display") -> Conversion:
        """
        Unknown codes are not an error: the amount passes through at rate 1
        and `fallback` is set so the caller can adjust the display.
        """
        amount = clamp_amount(amount)
        cc = _code(code)
        rate = self.rates.get(cc)
        if rate is None:
            logger.warning("no exchange rate for %r; treating amount as %s", code, self.base_currency,
                           extra={"currency": cc})
            return Conversion(value=amount, currency=cc, rate=1.0, fallback=True)
        if cc == self.base_currency:
            return Conversion(value=amount, currency=cc, rate=1.0)
        value = amount * rate if direction == "to_display" else amount / rate
        return Conversion(value=value, currency=cc, rate=rate)

    def to_display(self, amount_base: float, code: Optional[str]) -> float:
        return self.convert(amount_base, code, "to_display").value

    def to_base(self, amount_display: float, code: Optional[str]) -> float:
        return self.convert(amount_display, code, "to_base").value

    def to_ledger(self, amount: float, code: Optional[str]) -> LedgerAmount:
        """Persisted shape for an amount the user transacted in `code`."""
        cc = _code(code) or self.base_currency
        base_amount = round(self.to_base(amount, cc), 2)
        if cc == self.base_currency:
            return LedgerAmount(amount=base_amount, currency=cc)
        return LedgerAmount(amount=base_amount, currency=cc, original_amount=round(clamp_amount(amount), 2))

    def decimals(self, code: Optional[str]) -> int:
        cc = _code(code)
        if cc == self.base_currency or cc in ZERO_DECIMAL_CURRENCIES:
            return 0
        return 2

    def format(self, amount: float, code: Optional[str]) -> str:
        """
        Render an amount already expressed in `code`: symbol, comma thousands
        grouping, no decimals for the base currency, two for the rest.
        """
        cc = _code(code)
        try:
            value = float(amount)
        except (TypeError, ValueError):
            value = 0.0
        if not math.isfinite(value):
            value = 0.0

        currency = _BY_CODE.get(cc)
        if currency is None:
            return f"{value:,.2f} {cc}".strip()

        digits = self.decimals(cc)
        sign = "-" if round(value, digits) < 0 else ""
        number = f"{abs(value):,.{digits}f}"
        sym = currency.symbol
        sep = " " if len(sym) > 1 and sym[-1].isalpha() else ""
        return f"{sign}{sym}{sep}{number}"


# ---- Module-level helpers backed by the configured rate table ----------------
def get_converter() -> CurrencyConverter:
    return CurrencyConverter(settings.exchange_rates, settings.base_currency)


def to_display(amount_base: float, code: Optional[str]) -> float:
    return get_converter().to_display(amount_base, code)


def to_base(amount_display: float, code: Optional[str]) -> float:
    return get_converter().to_base(amount_display, code)


def format_currency(amount: float, code: Optional[str]) -> str:
    return get_converter().format(amount, code)


def get_currency(code: Optional[str]) -> Optional[Currency]:
    return _BY_CODE.get(_code(code))


def get_default_currency() -> Currency:
    """The configured base currency."""
    base = _code(settings.base_currency)
    currency = _BY_CODE.get(base) or Currency(code=base, name=base, symbol=base)
    return currency.model_copy(update={"is_default": True})


def payment_provider(code: Optional[str]) -> str:
    """Card gateway for the base currency, PayPal for everything else."""
    return "paystack" if _code(code) == _code(settings.base_currency) else "paypal"


def minimum_order_amount(code: Optional[str]) -> float:
    return float(MINIMUM_ORDER_AMOUNTS.get(_code(code), 1))
