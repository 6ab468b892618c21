"""
Entity Adapter - normalizes raw backend records.

The backend is not consistent about identifier naming: stores come as
``store_id`` or ``id``, users as ``user_id`` or ``id`` and so on. Everything
past this module sees one canonical record shape per entity.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, Optional, Sequence

from retail_panel.exceptions import SchemaError
from retail_panel.models import Order, OrderLine, OrderStatus, Product, Store, User

PRODUCT_ID_FIELDS = ('product_id', 'id')
STORE_ID_FIELDS = ('store_id', 'id')
USER_ID_FIELDS = ('user_id', 'id')
ORDER_ID_FIELDS = ('order_id', 'id')

STORE_LABEL_FIELDS = ('store_location', 'location', 'name')
USER_LABEL_FIELDS = ('username', 'name', 'full_name')


def _coerce_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def resolve_identifier(raw: Dict[str, Any], fields: Sequence[str], entity: str) -> int:
    """
    Return the first usable identifier among ``fields``.

    Raises:
        SchemaError: if none of the fields holds an integer-like value
    """
    for name in fields:
        value = _coerce_int(raw.get(name))
        if value is not None:
            return value
    raise SchemaError(entity, fields)


def resolve_label(raw: Dict[str, Any], fields: Iterable[str], fallback: str) -> str:
    """First non-blank candidate field, else ``fallback``."""
    for name in fields:
        value = raw.get(name)
        if value is not None and str(value).strip():
            return str(value).strip()
    return fallback


def adapt_product(raw: Dict[str, Any]) -> Product:
    product_id = resolve_identifier(raw, PRODUCT_ID_FIELDS, 'Product')
    try:
        price = Decimal(str(raw.get('price', '0')))
    except (InvalidOperation, ValueError):
        price = Decimal('0')
    if price < 0:
        price = Decimal('0')
    name = resolve_label(raw, ('name',), f'Product #{product_id}')
    return Product(id=product_id, name=name, price=price)


def adapt_store(raw: Dict[str, Any]) -> Store:
    store_id = resolve_identifier(raw, STORE_ID_FIELDS, 'Store')
    return Store(id=store_id, label=resolve_label(raw, STORE_LABEL_FIELDS, f'Store #{store_id}'))


def adapt_user(raw: Dict[str, Any]) -> User:
    user_id = resolve_identifier(raw, USER_ID_FIELDS, 'User')
    return User(id=user_id, label=resolve_label(raw, USER_LABEL_FIELDS, f'User #{user_id}'))


def _parse_status(value: Any):
    if value is None:
        return OrderStatus.PENDING
    try:
        return OrderStatus(str(value).upper())
    except ValueError:
        return str(value)


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        # Python < 3.11 does not accept the trailing Z
        return datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    except ValueError:
        return None


def adapt_order(raw: Dict[str, Any]) -> Order:
    order_id = resolve_identifier(raw, ORDER_ID_FIELDS, 'Order')
    items = []
    for item in raw.get('items') or []:
        product_id = _coerce_int(item.get('product', item.get('product_id')))
        quantity = _coerce_int(item.get('quantity'))
        if product_id is None or quantity is None:
            continue
        items.append(OrderLine(product_id=product_id, quantity=quantity))

    return Order(
        id=order_id,
        items=tuple(items),
        store_id=_coerce_int(raw.get('store_id', raw.get('store'))),
        user_id=_coerce_int(raw.get('user_id', raw.get('user'))),
        status=_parse_status(raw.get('status')),
        created_at=_parse_timestamp(raw.get('created_at')),
    )
