"""Order model (post-submission, owned by the backend)."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple, Union
import enum


class OrderStatus(str, enum.Enum):
    """Known order statuses. The backend may send others."""
    PENDING = 'PENDING'
    COMPLETED = 'COMPLETED'


@dataclass(frozen=True)
class OrderLine:
    """One product line of a created order."""

    product_id: int
    quantity: int


@dataclass(frozen=True)
class Order:
    """Created order. Read-only for the panel except delete-by-id."""

    id: int
    items: Tuple[OrderLine, ...] = field(default_factory=tuple)
    store_id: Optional[int] = None
    user_id: Optional[int] = None
    # Unknown statuses are kept as the raw string
    status: Union[OrderStatus, str] = OrderStatus.PENDING
    created_at: Optional[datetime] = None

    @property
    def item_count(self) -> int:
        return len(self.items)

    def __repr__(self):
        status = self.status.value if isinstance(self.status, OrderStatus) else self.status
        return f"<Order(id={self.id}, status={status}, items={self.item_count})>"
