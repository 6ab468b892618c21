"""Models package - exports all domain records."""
from retail_panel.models.product import Product
from retail_panel.models.store import Store
from retail_panel.models.user import User
from retail_panel.models.catalog import Catalog
from retail_panel.models.order import Order, OrderLine, OrderStatus
from retail_panel.models.order_draft import OrderDraft

__all__ = [
    'Product', 'Store', 'User', 'Catalog',
    'Order', 'OrderLine', 'OrderStatus',
    'OrderDraft',
]
