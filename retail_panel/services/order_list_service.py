"""Order List Service - loads, displays and deletes created orders."""

import logging
from typing import Any, Dict, List, Tuple

from retail_panel.exceptions import DeletionError
from retail_panel.models import Order, OrderStatus
from retail_panel.services.entity_adapter import adapt_order
from retail_panel.utils.formatters import date_short, status_tone

logger = logging.getLogger(__name__)

DEFAULT_CONFIRM_MESSAGE = 'Delete order?'


class ConfirmationPort:
    """Asks the operator to confirm a destructive action."""

    def confirm(self, message: str) -> bool:
        raise NotImplementedError


class AlwaysConfirm(ConfirmationPort):
    """Non-interactive confirmation, e.g. for scripted runs and tests."""

    def confirm(self, message: str) -> bool:
        return True


class PresetConfirmation(ConfirmationPort):
    """Answer decided up front, e.g. from a ``confirm`` request flag."""

    def __init__(self, answer: bool):
        self.answer = bool(answer)
        self.asked: List[str] = []

    def confirm(self, message: str) -> bool:
        self.asked.append(message)
        return self.answer


class OrderListController:
    """
    Displayed order list for one operator.

    ``refresh`` always replaces the whole list with whatever the latest
    completed fetch returned; overlapping refreshes are not sequenced.
    """

    def __init__(self, confirm_message: str = DEFAULT_CONFIRM_MESSAGE):
        self.orders: Tuple[Order, ...] = ()
        self.loading = True
        self.confirm_message = confirm_message

    async def refresh(self, api) -> Tuple[Order, ...]:
        try:
            raw_orders = await api.orders.list()
            self.orders = tuple(adapt_order(r) for r in raw_orders)
            logger.info(f"[ORDERS] List refreshed: {len(self.orders)} orders")
        except Exception as e:
            logger.error(f"[ORDERS] Error refreshing order list: {e}")
        finally:
            self.loading = False
        return self.orders

    async def delete_order(self, api, order_id: int, confirmation: ConfirmationPort) -> bool:
        """
        Delete ``order_id`` once the operator confirms.

        Returns True when the order was deleted. Failures are logged only;
        the displayed list is left as it was until the next refresh.
        """
        if not confirmation.confirm(self.confirm_message):
            logger.info(f"[ORDERS] Deletion of order #{order_id} declined")
            return False

        try:
            await api.orders.delete(order_id)
        except Exception as e:
            error = DeletionError(order_id, str(e))
            logger.error(f"[ORDERS] {error.message}")
            return False

        logger.info(f"[ORDERS] Order #{order_id} deleted")
        await self.refresh(api)
        return True

    def rows(self) -> List[Dict[str, Any]]:
        """Display rows for the orders table."""
        rows = []
        for order in self.orders:
            status = order.status.value if isinstance(order.status, OrderStatus) else order.status
            rows.append({
                'id': order.id,
                'label': f'#{order.id}',
                'status': status,
                'status_tone': status_tone(status),
                'created': date_short(order.created_at),
                'item_count': order.item_count,
                'store_id': order.store_id,
                'user_id': order.user_id,
            })
        return rows
