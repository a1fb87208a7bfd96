"""JSON-file-backed implementation of ProductStore."""

from __future__ import annotations

import json
import os
import tempfile
import threading
from collections.abc import Callable
from pathlib import Path

from loguru import logger

from catalog.domain.exceptions import (
    DomainException,
    EntityNotFoundError,
    StorageError,
    ValidationError,
)
from catalog.domain.model.product import Product
from catalog.domain.model.value_objects import Price, Stock
from catalog.domain.repository.product_store import ProductStore


class JsonProductStore(ProductStore):
    """Keeps the catalog in memory and mirrors it to ``{"products": [...]}``.

    Writers are serialized by a lock. Each mutation builds a fresh dict,
    persists it, and only then publishes it, so readers (which never lock)
    always see a complete snapshot that is already on disk.

    Accepted documents are ``{"products": [...]}`` and, for older files, a
    bare list of records. Invalid records are skipped with a warning; only
    a file that is not JSON or has neither shape is replaced by an empty
    catalog.
    """

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._write_lock = threading.Lock()
        self._products: dict[str, Product] = {}
        self.load()

    # --- ProductStore interface -----------------------------------------------

    def load(self) -> None:
        with self._write_lock:
            try:
                data = self._file_path.read_bytes()
            except FileNotFoundError:
                logger.info("No database file at {}, starting empty", self._file_path)
                self._reset()
                return
            except OSError as exc:
                raise StorageError("Could not read the product catalog") from exc

            try:
                records = self._records(json.loads(data))
            except ValueError as exc:
                logger.warning(
                    "Database file {} is not valid JSON ({}), starting empty",
                    self._file_path,
                    exc,
                )
                self._reset()
                return

            if records is None:
                logger.warning(
                    "Database file {} holds no product list, starting empty",
                    self._file_path,
                )
                self._reset()
                return

            self._products = self._from_records(records)
            logger.debug("Loaded {} product(s)", len(self._products))

    def save(self) -> None:
        with self._write_lock:
            self._persist(self._products)

    def get_by_id(self, product_id: str) -> Product | None:
        return self._products.get(str(product_id))

    def list_all(self) -> list[Product]:
        return list(self._products.values())

    def insert(self, product: Product) -> None:
        with self._write_lock:
            if product.id in self._products:
                raise ValidationError(f"Product with ID '{product.id}' already exists")
            self._assert_images_unclaimed(product)
            products = dict(self._products)
            products[product.id] = product
            self._commit(products)

    def replace(self, product_id: str, product: Product) -> Product:
        previous, _ = self.update(product_id, lambda current: product)
        return previous

    def update(
        self,
        product_id: str,
        change: Callable[[Product], Product],
        after_commit: Callable[[Product, Product], None] | None = None,
    ) -> tuple[Product, Product]:
        with self._write_lock:
            previous = self._require(product_id)
            updated = change(previous)
            if updated.id != previous.id:
                raise ValidationError("Product id cannot change")
            self._assert_images_unclaimed(updated)
            products = dict(self._products)
            products[previous.id] = updated
            self._commit(products)
            if after_commit is not None:
                after_commit(previous, updated)
            return previous, updated

    def remove(self, product_id: str) -> Product:
        with self._write_lock:
            removed = self._require(product_id)
            products = dict(self._products)
            del products[removed.id]
            self._commit(products)
            return removed

    # --- Internal helpers -----------------------------------------------------

    def _require(self, product_id: str) -> Product:
        product = self._products.get(str(product_id))
        if product is None:
            raise EntityNotFoundError("Product not found")
        return product

    def _assert_images_unclaimed(self, product: Product) -> None:
        for other in self._products.values():
            if other.id == product.id:
                continue
            shared = set(other.images).intersection(product.images)
            if shared:
                raise ValidationError(
                    f"Image '{sorted(shared)[0]}' belongs to another product"
                )

    def _commit(self, products: dict[str, Product]) -> None:
        """Persist then publish. Caller must hold the write lock."""
        self._persist(products)
        self._products = products

    def _reset(self) -> None:
        """Start from an empty catalog. Caller must hold the write lock."""
        self._commit({})

    # --- Serialization helpers ------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "price": product.price.amount,
            "stock": product.stock.value,
            "description": product.description,
            "pinned": product.pinned,
            "images": list(product.images),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        return Product(
            id=str(raw["id"]),
            name=raw["name"],
            price=Price.of(raw["price"]),
            stock=Stock.of(raw.get("stock")),
            description=raw.get("description") or "",
            pinned=bool(raw.get("pinned", False)),
            images=tuple(raw.get("images") or ()),
        )

    @staticmethod
    def _records(document: object) -> list | None:
        if isinstance(document, dict) and isinstance(document.get("products"), list):
            return document["products"]
        if isinstance(document, list):
            return document
        return None

    def _from_records(self, records: list) -> dict[str, Product]:
        products: dict[str, Product] = {}
        for position, item in enumerate(records):
            try:
                product = self._to_domain(item)
            except (KeyError, TypeError, AttributeError, DomainException) as exc:
                logger.warning(
                    "Skipping invalid product record #{} in {}: {!r}",
                    position,
                    self._file_path,
                    exc,
                )
                continue
            if product.id in products:
                logger.warning("Skipping duplicate product id {} in {}", product.id, self._file_path)
                continue
            products[product.id] = product
        return products

    # --- File helpers ---------------------------------------------------------

    def _persist(self, products: dict[str, Product]) -> None:
        document = {"products": [self._to_raw(p) for p in products.values()]}
        payload = json.dumps(document, indent=2) + "\n"
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._file_path.parent, prefix=f".{self._file_path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(payload)
                    handle.flush()
                    os.fsync(handle.fileno())
                os.replace(tmp_name, self._file_path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            logger.error("Failed to write database file {}: {}", self._file_path, exc)
            raise StorageError("Could not persist the product catalog") from exc
