# storefront/services/cart.py
from __future__ import annotations
from typing import Iterable, Tuple

from ..schemas.pricing import LineItem, clamp_quantity
from .fees import cart_subtotal

Cart = Tuple[LineItem, ...]

__all__ = ["Cart", "add_items", "update_quantity", "remove_item", "total_items", "cart_subtotal"]


def add_items(cart: Iterable[LineItem], new_items: Iterable[LineItem]) -> Cart:
    """
    Return a new cart with `new_items` added. A line for the same product,
    size and colour absorbs the extra quantity instead of being duplicated.
    """
    out = list(cart)
    for item in new_items:
        if item.quantity <= 0:
            continue
        idx = next((i for i, line in enumerate(out) if line.same_variant(item)), None)
        if idx is None:
            out.append(item)
        else:
            out[idx] = out[idx].model_copy(update={"quantity": out[idx].quantity + item.quantity})
    return tuple(out)


def update_quantity(cart: Iterable[LineItem], index: int, quantity: int) -> Cart:
    out = list(cart)
    if not 0 <= index < len(out):
        return tuple(out)
    quantity = clamp_quantity(quantity)
    if quantity <= 0:
        return remove_item(out, index)
    out[index] = out[index].model_copy(update={"quantity": quantity})
    return tuple(out)


def remove_item(cart: Iterable[LineItem], index: int) -> Cart:
    return tuple(line for i, line in enumerate(cart) if i != index)


def total_items(cart: Iterable[LineItem]) -> int:
    return sum(line.quantity for line in cart)
