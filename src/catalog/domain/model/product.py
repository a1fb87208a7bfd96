"""Product aggregate.

A product owns an ordered list of image filenames stored in the media
directory. The first image is the cover shown in listings.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from catalog.domain.exceptions import ValidationError
from catalog.domain.model.value_objects import Price, Stock


@dataclass(frozen=True)
class Product:
    """A product in the catalog.

    This is an aggregate root. It is immutable so the store can hand the
    same instance to concurrent readers; edits go through ``revised``,
    which returns a new record with the same id.
    """

    id: str
    name: str
    price: Price
    stock: Stock = field(default_factory=Stock)
    description: str = ""
    pinned: bool = False
    images: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id:
            raise ValidationError("Product id must be a non-empty string")
        if not self.name or not self.name.strip():
            raise ValidationError("Product name is required")
        if len(set(self.images)) != len(self.images):
            raise ValidationError("Product images must not repeat")
        # Lists from callers are frozen so the record stays hashable.
        object.__setattr__(self, "images", tuple(self.images))

    @property
    def cover_image(self) -> str | None:
        return self.images[0] if self.images else None

    def revised(
        self,
        name: str,
        price: Price,
        stock: Stock,
        description: str,
        pinned: bool,
        images: tuple[str, ...] | list[str],
    ) -> Product:
        """Return a copy with every mutable field replaced wholesale."""
        return replace(
            self,
            name=name.strip(),
            price=price,
            stock=stock,
            description=description,
            pinned=pinned,
            images=tuple(images),
        )
