"""
Order Wizard Service.

One wizard instance is one operator's order-composition session: the
catalog snapshot, the draft being edited and the submission state machine.
"""

import logging
from decimal import Decimal
from typing import Any, Awaitable, Callable, Dict, Optional

from retail_panel.exceptions import LoadError, ValidationError
from retail_panel.models import Catalog, OrderDraft, Product
from retail_panel.services import cart_service
from retail_panel.services.catalog_service import CatalogLoader
from retail_panel.services.order_submission_service import OrderSubmitter, SubmissionResult
from retail_panel.services.total_service import calculate_total, cart_summary

logger = logging.getLogger(__name__)


def _parse_selection(value: Any, what: str) -> Optional[int]:
    """Selections come from form fields: blank means nothing selected."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'Invalid {what} selection: {value!r}')


class OrderWizard:
    """Order-composition session."""

    def __init__(self):
        self.is_open = False
        self.loading = False
        self.catalog = Catalog.empty()
        self.load_failed = False
        # Every product seen this session, so orphaned cart entries still display
        self.product_cache: Dict[int, Product] = {}
        self.draft = OrderDraft()
        self.submitter = OrderSubmitter()

    async def open(self, api) -> None:
        """
        Start a fresh session: reset the draft and load the catalog.

        A failed load leaves an empty catalog and is only logged.
        """
        self.is_open = True
        self.loading = True
        self.draft = OrderDraft(cart=cart_service.empty_cart())
        try:
            self.catalog = await CatalogLoader(api).load()
            self.load_failed = False
        except LoadError as e:
            # TODO: surface catalog failures to the operator once the panel has a notification area
            logger.warning(f"[WIZARD] Opening with an empty catalog: {e.message}")
            self.catalog = Catalog.empty()
            self.load_failed = True
        finally:
            self.loading = False

        for product in self.catalog.products:
            self.product_cache[product.id] = product

    def close(self) -> None:
        """Discard the draft and end the session."""
        self.is_open = False
        self.draft = OrderDraft(cart=cart_service.empty_cart())

    def _require_open(self) -> None:
        if not self.is_open:
            raise ValidationError('The order wizard is not open')

    def adjust_quantity(self, product_id: int, delta: int) -> OrderDraft:
        self._require_open()
        cart = cart_service.adjust_quantity(self.draft.cart, int(product_id), int(delta))
        self.draft = self.draft.with_cart(cart)
        return self.draft

    def select_store(self, store_id: Any) -> OrderDraft:
        self._require_open()
        self.draft = self.draft.with_store(_parse_selection(store_id, 'store'))
        return self.draft

    def select_user(self, user_id: Any) -> OrderDraft:
        self._require_open()
        self.draft = self.draft.with_user(_parse_selection(user_id, 'user'))
        return self.draft

    @property
    def total(self) -> Decimal:
        return calculate_total(self.draft.cart, self.catalog.products)

    async def submit(
        self,
        api,
        on_order_created: Optional[Callable[[], Awaitable[Any]]] = None,
    ) -> SubmissionResult:
        """
        Submit the current draft.

        On success the draft is reset, the session is closed and
        ``on_order_created`` is awaited. If the draft was replaced while the
        request was in flight (edited, or the wizard closed and reopened),
        the newer draft is left alone. On failure the draft is kept as is
        and the error propagates.
        """
        self._require_open()
        submitted_draft = self.draft
        result = await self.submitter.submit(api, submitted_draft)
        if not result.accepted:
            return result

        if self.draft is submitted_draft:
            self.close()
        else:
            logger.info("[WIZARD] Draft changed during submission; keeping the newer draft")
        if on_order_created is not None:
            await on_order_created()
        return result

    def snapshot(self) -> Dict[str, Any]:
        """JSON-friendly view of the session for the panel."""
        summary = cart_summary(self.draft.cart, self.catalog.products, self.product_cache)
        return {
            'is_open': self.is_open,
            'loading': self.loading,
            'state': self.submitter.state.value,
            'catalog': self.catalog.to_dict(),
            'cart': cart_service.cart_to_dict(self.draft.cart),
            'store_id': self.draft.store_id,
            'user_id': self.draft.user_id,
            'lines': summary['lines'],
            'total': summary['total'],
            'can_submit': bool(self.draft.cart) and not self.submitter.is_submitting,
        }
