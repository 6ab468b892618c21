"""Cart Service - in-memory cart operations for the order wizard."""

from types import MappingProxyType
from typing import Mapping

Cart = Mapping[int, int]

_EMPTY_CART: Cart = MappingProxyType({})


def empty_cart() -> Cart:
    """Canonical empty cart, used at session start and after a successful submit."""
    return _EMPTY_CART


def cart_from_mapping(items: Mapping) -> Cart:
    """Build a read-only cart from any mapping, dropping non-positive quantities."""
    cart = {}
    for product_id, qty in items.items():
        qty = int(qty)
        if qty > 0:
            cart[int(product_id)] = qty
    return MappingProxyType(cart) if cart else _EMPTY_CART


def current_quantity(cart: Cart, product_id: int) -> int:
    return cart.get(product_id, 0)


def adjust_quantity(cart: Cart, product_id: int, delta: int) -> Cart:
    """
    Return a new cart with ``product_id`` moved by ``delta``.

    The quantity is clamped at zero and a zero quantity removes the entry.
    The given cart is never modified.
    """
    next_qty = max(0, current_quantity(cart, product_id) + int(delta))

    updated = dict(cart)
    if next_qty == 0:
        updated.pop(product_id, None)
    else:
        updated[product_id] = next_qty

    return MappingProxyType(updated) if updated else _EMPTY_CART


def cart_to_dict(cart: Cart) -> dict:
    """JSON-friendly copy (string keys)."""
    return {str(product_id): qty for product_id, qty in cart.items()}
