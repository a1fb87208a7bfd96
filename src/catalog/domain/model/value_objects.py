"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from catalog.domain.exceptions import ValidationError


@dataclass(frozen=True)
class Price:
    """Non-negative product price.

    Stored as a plain number because the persisted document and the HTTP
    API both expose prices as JSON numbers.
    """

    amount: float

    def __post_init__(self) -> None:
        if isinstance(self.amount, bool) or not isinstance(self.amount, (int, float)):
            raise ValidationError(
                f"Price must be a number, got {type(self.amount).__name__}"
            )
        if math.isnan(self.amount) or math.isinf(self.amount):
            raise ValidationError(f"Price must be a finite number, got {self.amount}")
        if self.amount < 0:
            raise ValidationError(f"Price cannot be negative, got {self.amount}")

    def __str__(self) -> str:
        return f"{self.amount:,.2f}"

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def of(amount: str | float | int) -> Price:
        """Convenient factory that coerces form input to a float."""
        try:
            return Price(float(str(amount).strip()))
        except ValueError as exc:
            raise ValidationError(f"Invalid price: {amount!r}") from exc


@dataclass(frozen=True)
class Stock:
    """Units on hand. Zero is allowed, negative counts are not."""

    value: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Stock must be an integer, got {type(self.value).__name__}"
            )
        if self.value < 0:
            raise ValidationError("Stock cannot be negative")

    def __str__(self) -> str:
        return str(self.value)

    @staticmethod
    def of(value: str | int | None) -> Stock:
        """Parse a stock count; a missing or blank value means zero."""
        if value is None or str(value).strip() == "":
            return Stock(0)
        try:
            return Stock(int(str(value).strip()))
        except ValueError as exc:
            raise ValidationError(f"Invalid stock: {value!r}") from exc


@dataclass(frozen=True)
class UploadedImage:
    """A candidate upload handed over by the transport layer.

    Nothing is validated here: the media storage decides whether the
    batch is acceptable.
    """

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)
