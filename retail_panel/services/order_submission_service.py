"""
Order Submission Service.

Turns an order draft into a single order-creation call, guarded by an
explicit state machine so that repeated confirmations while a request is
in flight never create a second order.
"""

import enum
import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional

from retail_panel.exceptions import IllegalTransition, SubmissionError, ValidationError
from retail_panel.models import Order, OrderDraft
from retail_panel.services.entity_adapter import adapt_order

logger = logging.getLogger(__name__)


class SubmissionState(enum.Enum):
    """Order submitter states."""
    IDLE = 'IDLE'
    SUBMITTING = 'SUBMITTING'
    SUCCEEDED = 'SUCCEEDED'
    FAILED = 'FAILED'


ALLOWED_TRANSITIONS = {
    SubmissionState.IDLE: {SubmissionState.SUBMITTING},
    SubmissionState.SUBMITTING: {SubmissionState.SUCCEEDED, SubmissionState.FAILED},
    SubmissionState.SUCCEEDED: {SubmissionState.IDLE},
    SubmissionState.FAILED: {SubmissionState.IDLE},
}


def validate_draft(draft: OrderDraft) -> None:
    """
    Check the draft can be submitted.

    Raises:
        ValidationError: missing store/user selection or empty cart
    """
    if draft.store_id is None or draft.user_id is None:
        raise ValidationError('Please select a Store and User')
    if not draft.cart:
        raise ValidationError('The cart is empty. Add products to continue.')


def build_order_payload(draft: OrderDraft) -> Dict[str, Any]:
    """Flatten the draft into the order-creation request body."""
    return {
        'items': [
            {'product': int(product_id), 'quantity': int(qty)}
            for product_id, qty in draft.cart.items()
        ],
        'store_id': int(draft.store_id),
        'user_id': int(draft.user_id),
    }


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of a submit call that was not rejected."""

    accepted: bool
    order: Optional[Order] = None


IGNORED = SubmissionResult(accepted=False)


class OrderSubmitter:
    """Submission state machine for one wizard session."""

    def __init__(self):
        self.state = SubmissionState.IDLE
        self._guard = threading.Lock()

    @property
    def is_submitting(self) -> bool:
        return self.state is SubmissionState.SUBMITTING

    def _transition(self, target: SubmissionState) -> None:
        if target not in ALLOWED_TRANSITIONS[self.state]:
            raise IllegalTransition(self.state, target)
        logger.debug(f"[ORDERS] Submitter {self.state.value} -> {target.value}")
        self.state = target

    async def submit(self, api, draft: OrderDraft) -> SubmissionResult:
        """
        Validate and submit ``draft``.

        Returns an accepted result carrying the created order (None when
        the backend echo could not be read), or ``IGNORED`` when a
        submission is already in flight. The draft itself is never
        modified; resetting it after success is the caller's job.

        Raises:
            ValidationError: draft not ready, nothing was sent
            SubmissionError: the backend rejected or failed the request
        """
        # Panel requests may run on different worker threads
        with self._guard:
            if self.is_submitting:
                logger.info("[ORDERS] Submit ignored: a submission is already in flight")
                return IGNORED

            validate_draft(draft)
            payload = build_order_payload(draft)
            self._transition(SubmissionState.SUBMITTING)

        try:
            created = await api.orders.create(payload)
        except Exception as e:
            self._transition(SubmissionState.FAILED)
            logger.error(f"[ORDERS] Order creation failed: {e}")
            self._transition(SubmissionState.IDLE)
            raise SubmissionError(f"Failed to create order: {e}") from e

        self._transition(SubmissionState.SUCCEEDED)
        try:
            order = adapt_order(created) if created else None
        except Exception as e:
            # The order exists on the backend; only the echo is unreadable
            logger.warning(f"[ORDERS] Created order response could not be read: {e}")
            order = None
        self._transition(SubmissionState.IDLE)

        logger.info(
            f"[ORDERS] Order created: id={order.id if order else '?'}, "
            f"store_id={payload['store_id']}, user_id={payload['user_id']}, "
            f"lines={len(payload['items'])}"
        )
        return SubmissionResult(accepted=True, order=order)
