"""Abstract store for the Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, in-memory) live in the
infrastructure layer and in the test fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

from catalog.domain.model.product import Product


class ProductStore(ABC):
    """Single source of truth for product metadata.

    Every mutating method must have persisted the change before it
    returns; a mutation that could not be persisted raises and leaves the
    visible collection untouched.
    """

    @abstractmethod
    def load(self) -> None:
        """Populate the collection from durable storage."""

    @abstractmethod
    def save(self) -> None:
        """Persist the whole current collection."""

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product in insertion order."""

    @abstractmethod
    def insert(self, product: Product) -> None:
        """Add a new product. Raises ValidationError on a duplicate id."""

    @abstractmethod
    def replace(self, product_id: str, product: Product) -> Product:
        """Swap in a new version and return the previous one.

        Raises EntityNotFoundError if the id is unknown.
        """

    @abstractmethod
    def update(
        self,
        product_id: str,
        change: Callable[[Product], Product],
        after_commit: Callable[[Product, Product], None] | None = None,
    ) -> tuple[Product, Product]:
        """Revise a product atomically with respect to other writers.

        ``change`` receives the current version and returns the new one;
        it may raise to abort. ``after_commit`` runs once the new version
        is persisted, before any other writer can proceed. Returns
        ``(previous, updated)``. Raises EntityNotFoundError.
        """

    @abstractmethod
    def remove(self, product_id: str) -> Product:
        """Drop a product and return it. Raises EntityNotFoundError."""
