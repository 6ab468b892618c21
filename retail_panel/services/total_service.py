"""Total Service - derived money totals for the order wizard."""

from decimal import Decimal
from typing import Any, Dict, Iterable, Mapping, Optional

from retail_panel.models import Product
from retail_panel.services.cart_service import Cart
from retail_panel.utils.formatters import money


def _index(products: Iterable[Product]) -> Dict[int, Product]:
    return {product.id: product for product in products}


def calculate_total(cart: Cart, products: Iterable[Product]) -> Decimal:
    """
    Sum ``price * quantity`` over the cart.

    Entries whose product is not in ``products`` add zero. The result is
    not quantized; rounding is left to presentation.
    """
    by_id = _index(products)
    total = Decimal('0')
    for product_id, qty in cart.items():
        product = by_id.get(product_id)
        if product is not None:
            total += product.price * qty
    return total


def cart_summary(
    cart: Cart,
    products: Iterable[Product],
    cache: Optional[Mapping[int, Product]] = None,
) -> Dict[str, Any]:
    """
    Display lines and total for the cart.

    Names resolve against the current catalog first, then the session
    product cache. The total only uses the current catalog, so an entry
    known only through the cache shows up in the lines with no subtotal.
    """
    current = _index(products)
    cache = cache or {}
    lines = []

    for product_id, qty in cart.items():
        product = current.get(product_id)
        orphaned = product is None
        if orphaned:
            product = cache.get(product_id)
        if product is None:
            continue

        line_subtotal = Decimal('0') if orphaned else product.price * qty
        lines.append({
            'product_id': product_id,
            'product_name': product.name,
            'qty': qty,
            'unit_price': money(product.price),
            'line_subtotal': money(line_subtotal),
            'orphaned': orphaned,
        })

    total = calculate_total(cart, current.values())
    return {
        'lines': lines,
        'total': money(total),
        'total_raw': str(total),
    }
