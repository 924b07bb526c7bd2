# storefront/schemas/api.py
from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from ..services.promos import normalize_code
from .pricing import LineItem, PromoCode

# Bodies keep camelCase to match the mobile client's JSON exactly.


class LineItemIn(BaseModel):
    productId: str
    name: Optional[str] = None
    price: float = 0.0
    quantity: int = 1
    size: Optional[str] = None
    color: Optional[str] = None

    def to_line_item(self) -> LineItem:
        return LineItem(
            product_id=self.productId,
            name=self.name,
            price=self.price,
            quantity=self.quantity,
            size=self.size,
            color=self.color,
        )


class PromoIn(BaseModel):
    """Promo row as stored: the discount is a percentage (0..100)."""
    id: Optional[str] = None
    code: str
    description: str = ""
    discountPercentage: float = Field(0, ge=0, le=100)
    maxDiscountAmount: Optional[float] = None
    minOrderAmount: Optional[float] = None
    maxUses: Optional[int] = None
    currentUses: int = 0
    isActive: bool = True
    firstTimeOnly: bool = False
    startDate: Optional[datetime] = None
    endDate: Optional[datetime] = None

    def to_promo(self) -> PromoCode:
        return PromoCode.from_percentage(
            self.discountPercentage,
            id=self.id,
            code=normalize_code(self.code),
            description=self.description,
            max_discount_amount=self.maxDiscountAmount,
            min_order_amount=self.minOrderAmount,
            max_uses=self.maxUses,
            current_uses=self.currentUses,
            is_active=self.isActive,
            first_time_only=self.firstTimeOnly,
            start_date=self.startDate,
            end_date=self.endDate,
        )


class QuoteIn(BaseModel):
    items: List[LineItemIn]
    address: Optional[str] = None
    promo: Optional[PromoIn] = None
    currency: Optional[str] = None
    hasPriorPaidOrder: bool = False


class AmountsOut(BaseModel):
    subtotal: float
    serviceFee: float
    deliveryFee: float
    tax: float
    discountAmount: float
    total: float
    currency: str


class PromoStatusOut(BaseModel):
    code: str
    eligible: bool
    reason: Optional[str] = None


class QuoteOut(BaseModel):
    itemCount: int
    amounts: AmountsOut
    display: AmountsOut
    formatted: Dict[str, str]
    deliveryTier: Optional[str] = None
    provisional: bool
    currencyFallback: bool
    paymentProvider: str
    minimumOrderMet: bool
    promo: Optional[PromoStatusOut] = None


class PromoValidateIn(BaseModel):
    promo: Optional[PromoIn] = None
    subtotal: float = 0.0
    hasPriorPaidOrder: bool = False
    currentUses: Optional[int] = None


class PromoValidateOut(BaseModel):
    eligible: bool
    reason: Optional[str] = None
    discount: float


class CurrencyOut(BaseModel):
    code: str
    name: str
    symbol: str
    isDefault: bool
    rate: Optional[float] = None


class ConvertIn(BaseModel):
    amount: float
    currency: str
    direction: Literal["to_display", "to_base"] = "to_display"


class ConvertOut(BaseModel):
    amount: float
    currency: str
    rate: float
    fallback: bool
    formatted: str
