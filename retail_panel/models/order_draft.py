"""Order draft: the in-progress state of one wizard session."""
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping, Optional


@dataclass(frozen=True)
class OrderDraft:
    """
    Cart plus store and user selections, prior to submission.

    Never persisted. Every change produces a new draft so references held
    by a rendering layer keep seeing the state they were given.
    """

    cart: Mapping[int, int] = field(default_factory=lambda: MappingProxyType({}))
    store_id: Optional[int] = None
    user_id: Optional[int] = None

    def with_cart(self, cart: Mapping[int, int]) -> 'OrderDraft':
        return replace(self, cart=cart)

    def with_store(self, store_id: Optional[int]) -> 'OrderDraft':
        return replace(self, store_id=store_id)

    def with_user(self, user_id: Optional[int]) -> 'OrderDraft':
        return replace(self, user_id=user_id)
