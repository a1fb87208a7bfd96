"""Application service: Delete Product use case."""

from __future__ import annotations

from loguru import logger

from catalog.domain.repository.product_store import ProductStore
from catalog.domain.service.consistency_guard import ConsistencyGuard


class DeleteProductHandler:

    def __init__(self, product_store: ProductStore, guard: ConsistencyGuard) -> None:
        self._product_store = product_store
        self._guard = guard

    def handle(self, product_id: str) -> None:
        """Remove a product and every image file it references.

        The record goes first: if the process dies between the two steps
        the leftovers are unreferenced files, never a product pointing at
        missing images. Files that are already gone are skipped.
        """
        removed = self._product_store.remove(product_id)
        self._guard.reclaim(removed.images)
        logger.info("Deleted product {} ({})", removed.id, removed.name)
