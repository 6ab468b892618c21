"""Catalog Service - loads products, stores and users for the order wizard."""

import logging

from retail_panel.exceptions import LoadError
from retail_panel.models import Catalog
from retail_panel.services.entity_adapter import adapt_product, adapt_store, adapt_user
from retail_panel.utils.concurrency import join_all_or_fail

logger = logging.getLogger(__name__)


class CatalogLoader:
    """
    Fetches the three wizard collections concurrently.

    All-or-nothing: if any fetch (or the normalization of its records)
    fails, ``load`` raises LoadError and no partial catalog is returned.
    """

    def __init__(self, api):
        self.api = api

    async def load(self) -> Catalog:
        try:
            raw_products, raw_stores, raw_users = await join_all_or_fail(
                self.api.products.list(),
                self.api.stores.list(),
                self.api.users.list(),
            )
            catalog = Catalog(
                products=tuple(adapt_product(r) for r in raw_products),
                stores=tuple(adapt_store(r) for r in raw_stores),
                users=tuple(adapt_user(r) for r in raw_users),
            )
        except Exception as e:
            logger.warning(f"[CATALOG] Load failed: {e}")
            raise LoadError(f"Could not load the catalog: {e}") from e

        logger.info(
            f"[CATALOG] Loaded {len(catalog.products)} products, "
            f"{len(catalog.stores)} stores, {len(catalog.users)} users"
        )
        return catalog
