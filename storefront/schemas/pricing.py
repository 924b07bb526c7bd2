# storefront/schemas/pricing.py
from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def clamp_amount(value: Any) -> float:
    """
    Coerce user-editable numeric input to a non-negative finite float.
    None, NaN, +/-inf, negatives and anything non-numeric become 0.0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        num = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(num) or num < 0:
        return 0.0
    return num


def clamp_quantity(value: Any) -> int:
    return int(clamp_amount(value))


class LineItem(BaseModel):
    """One cart line. Prices are in the base currency."""
    model_config = ConfigDict(frozen=True)

    product_id: str
    name: Optional[str] = None
    price: float = 0.0
    quantity: int = 1
    size: Optional[str] = None
    color: Optional[str] = None

    @field_validator("price", mode="before")
    @classmethod
    def _price(cls, v: Any) -> float:
        return clamp_amount(v)

    @field_validator("quantity", mode="before")
    @classmethod
    def _quantity(cls, v: Any) -> int:
        return clamp_quantity(v)

    @property
    def line_total(self) -> float:
        return round(self.price * self.quantity, 2)

    def same_variant(self, other: "LineItem") -> bool:
        return (
            self.product_id == other.product_id
            and self.size == other.size
            and self.color == other.color
        )


class OrderTotals(BaseModel):
    model_config = ConfigDict(frozen=True)

    subtotal: float = 0.0
    service_fee: float = 0.0
    delivery_fee: float = 0.0
    tax: float = 0.0
    discount_amount: float = 0.0
    total: float = 0.0
    delivery_tier: Optional[str] = None
    # True until a delivery address is known; delivery fee and tax are 0 meanwhile
    provisional: bool = False


class PromoCode(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    code: str
    description: str = ""
    discount: float = Field(0.0, description="Fraction of the subtotal, 0..1")
    max_discount_amount: Optional[float] = None
    min_order_amount: Optional[float] = None
    max_uses: Optional[int] = None
    current_uses: int = 0
    is_active: bool = True
    first_time_only: bool = False
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator("discount", mode="before")
    @classmethod
    def _discount(cls, v: Any) -> float:
        return min(clamp_amount(v), 1.0)

    @field_validator("current_uses", mode="before")
    @classmethod
    def _uses(cls, v: Any) -> int:
        return clamp_quantity(v)

    @classmethod
    def from_percentage(cls, discount_percentage: float, **fields: Any) -> "PromoCode":
        """Build from the stored row shape, where the discount is 0..100."""
        return cls(discount=clamp_amount(discount_percentage) / 100, **fields)


class PromoCheck(BaseModel):
    eligible: bool
    reason: Optional[str] = None


class Currency(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    name: str
    symbol: str
    is_default: bool = False


class CurrencyAmount(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: float
    currency: str


class Conversion(BaseModel):
    value: float
    currency: str
    rate: float
    # set when the code had no known rate and the amount was passed through as-is
    fallback: bool = False


class LedgerAmount(BaseModel):
    """
    What gets persisted for wallet balances, order totals and transactions:
    always the base-currency amount, plus the transacting currency and its
    original amount when they differ.
    """
    amount: float
    currency: str
    original_amount: Optional[float] = None
