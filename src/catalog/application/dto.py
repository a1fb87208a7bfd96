"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI/HTTP and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from catalog.domain.exceptions import ValidationError
from catalog.domain.model.product import Product
from catalog.domain.model.value_objects import Price, Stock

_TRUE_VALUES = {"true", "1", "on", "yes"}
_FALSE_VALUES = {"false", "0", "off", "no", ""}


@dataclass(frozen=True)
class ProductFields:
    """Input: the editable fields of a product, as submitted by a form.

    Values arrive as raw strings (or None when the field was omitted) and
    are only turned into value objects by the handlers.
    """

    name: str | None = None
    price: str | float | None = None
    stock: str | int | None = None
    description: str | None = None
    pinned: str | bool | None = None

    def has_name(self) -> bool:
        return bool(self.name and self.name.strip())

    def has_price(self) -> bool:
        return self.price is not None and str(self.price).strip() != ""

    def parsed_price(self) -> Price:
        return Price.of(self.price)

    def parsed_stock(self) -> Stock:
        return Stock.of(self.stock)

    def parsed_pinned(self) -> bool:
        if self.pinned is None or isinstance(self.pinned, bool):
            return bool(self.pinned)
        value = str(self.pinned).strip().lower()
        if value in _TRUE_VALUES:
            return True
        if value in _FALSE_VALUES:
            return False
        raise ValidationError(f"Invalid pinned flag: {self.pinned!r}")


@dataclass(frozen=True)
class ProductDTO:
    """Output: a product as returned to callers."""

    id: str
    name: str
    price: float
    stock: int
    description: str
    pinned: bool
    images: list[str]

    @staticmethod
    def from_product(product: Product) -> ProductDTO:
        return ProductDTO(
            id=product.id,
            name=product.name,
            price=product.price.amount,
            stock=product.stock.value,
            description=product.description,
            pinned=product.pinned,
            images=list(product.images),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "stock": self.stock,
            "description": self.description,
            "pinned": self.pinned,
            "images": list(self.images),
        }
