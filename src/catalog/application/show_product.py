"""Application service: Show / List Products use cases (queries)."""

from __future__ import annotations

from catalog.application.dto import ProductDTO
from catalog.domain.exceptions import EntityNotFoundError
from catalog.domain.repository.product_store import ProductStore


class ShowProductHandler:

    def __init__(self, product_store: ProductStore) -> None:
        self._product_store = product_store

    def handle(self, product_id: str) -> ProductDTO:
        product = self._product_store.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError("Product not found")
        return ProductDTO.from_product(product)


class ListProductsHandler:

    def __init__(self, product_store: ProductStore) -> None:
        self._product_store = product_store

    def handle(self, pinned_first: bool = False) -> list[ProductDTO]:
        """Return every product in insertion order.

        ``pinned_first`` moves pinned products to the front while keeping
        insertion order within each group.
        """
        products = self._product_store.list_all()
        if pinned_first:
            products = sorted(products, key=lambda p: not p.pinned)
        return [ProductDTO.from_product(p) for p in products]
