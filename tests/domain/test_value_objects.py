"""Unit tests for domain value objects."""

import pytest

from catalog.domain.exceptions import ValidationError
from catalog.domain.model.value_objects import Price, Stock, UploadedImage


# ── Price ────────────────────────────────────────────────────────────────────


class TestPrice:

    def test_creation(self):
        assert Price(100000).amount == 100000

    def test_of_factory_from_string(self):
        assert Price.of("25.99").amount == 25.99

    def test_of_factory_strips_whitespace(self):
        assert Price.of(" 10 ").amount == 10.0

    def test_zero_allowed(self):
        assert Price.of("0").amount == 0.0

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Price(-1)

    def test_garbage_rejected(self):
        with pytest.raises(ValidationError, match="Invalid price"):
            Price.of("abc")

    def test_nan_rejected(self):
        with pytest.raises(ValidationError, match="finite"):
            Price.of("nan")

    def test_bool_rejected(self):
        with pytest.raises(ValidationError, match="must be a number"):
            Price(True)

    def test_display(self):
        assert str(Price(1234.5)) == "1,234.50"


# ── Stock ────────────────────────────────────────────────────────────────────


class TestStock:

    def test_default_is_zero(self):
        assert Stock().value == 0

    def test_of_missing_is_zero(self):
        assert Stock.of(None) == Stock(0)
        assert Stock.of("") == Stock(0)

    def test_of_from_string(self):
        assert Stock.of("5") == Stock(5)

    def test_negative_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Stock(-1)

    def test_fraction_rejected(self):
        with pytest.raises(ValidationError, match="Invalid stock"):
            Stock.of("1.5")

    def test_non_int_rejected(self):
        with pytest.raises(ValidationError, match="must be an integer"):
            Stock(2.0)


class TestUploadedImage:

    def test_size_is_byte_length(self):
        upload = UploadedImage(filename="a.png", content_type="image/png", data=b"12345")
        assert upload.size == 5
