"""Product model."""
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class Product:
    """Catalog product. Owned by the backend, read-only for the panel."""

    id: int
    name: str
    price: Decimal

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', price={self.price})>"
