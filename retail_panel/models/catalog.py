"""Catalog snapshot loaded for one wizard session."""
from dataclasses import dataclass, field
from typing import Tuple

from retail_panel.models.product import Product
from retail_panel.models.store import Store
from retail_panel.models.user import User


@dataclass(frozen=True)
class Catalog:
    """Products, stores and users as returned by a single load."""

    products: Tuple[Product, ...] = field(default_factory=tuple)
    stores: Tuple[Store, ...] = field(default_factory=tuple)
    users: Tuple[User, ...] = field(default_factory=tuple)

    @classmethod
    def empty(cls) -> 'Catalog':
        return cls()

    def to_dict(self) -> dict:
        return {
            'products': [
                {'id': p.id, 'name': p.name, 'price': str(p.price)} for p in self.products
            ],
            'stores': [{'id': s.id, 'label': s.label} for s in self.stores],
            'users': [{'id': u.id, 'label': u.label} for u in self.users],
        }
