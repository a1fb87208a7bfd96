"""Unit tests for the ConsistencyGuard domain service."""

from catalog.domain.model.product import Product
from catalog.domain.model.value_objects import Price
from catalog.domain.service.consistency_guard import ConsistencyGuard
from tests.fakes import FakeMediaStorage


class ExplodingMediaStorage(FakeMediaStorage):
    """Fails to delete one specific file."""

    def delete(self, filename: str) -> bool:
        if filename == "locked.png":
            raise PermissionError("locked")
        return super().delete(filename)


class TestReclaim:

    def test_deletes_listed_files_only(self):
        media = FakeMediaStorage({"a.png": b"", "b.png": b"", "c.png": b""})
        removed = ConsistencyGuard(media).reclaim(["a.png", "c.png"])
        assert removed == ["a.png", "c.png"]
        assert media.list_names() == {"b.png"}

    def test_missing_files_are_not_an_error(self):
        media = FakeMediaStorage({"a.png": b""})
        removed = ConsistencyGuard(media).reclaim(["gone.png", "a.png"])
        assert removed == ["a.png"]
        assert media.list_names() == set()

    def test_is_idempotent(self):
        media = FakeMediaStorage({"a.png": b""})
        guard = ConsistencyGuard(media)
        guard.reclaim(["a.png"])
        assert guard.reclaim(["a.png"]) == []

    def test_failure_on_one_file_does_not_stop_the_rest(self):
        media = ExplodingMediaStorage({"locked.png": b"", "b.png": b""})
        removed = ConsistencyGuard(media).reclaim(["locked.png", "b.png"])
        assert removed == ["b.png"]
        assert media.list_names() == {"locked.png"}


class TestReleasedImages:

    def test_returns_images_not_retained_in_order(self):
        previous = Product(id="1", name="Shirt", price=Price(1),
                           images=("a.png", "b.png", "c.png"))
        released = ConsistencyGuard.released_images(previous, ["c.png", "new.png"])
        assert released == ["a.png", "b.png"]

    def test_nothing_released_when_all_kept(self):
        previous = Product(id="1", name="Shirt", price=Price(1), images=("a.png",))
        assert ConsistencyGuard.released_images(previous, ["a.png"]) == []
