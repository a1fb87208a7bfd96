"""Tests for the local-disk media storage."""

import re

import pytest

from catalog.domain.exceptions import StorageError, UploadRejected, ValidationError
from catalog.domain.model.value_objects import UploadedImage
from catalog.domain.repository.media_storage import MAX_FILE_SIZE
from catalog.infrastructure.media.local_media_storage import LocalMediaStorage

_NAME = re.compile(r"^\d+-[0-9a-f]{16}(\.[a-z0-9]+)?$")


def _image(name: str = "photo.PNG", data: bytes = b"img", content_type: str = "image/png"):
    return UploadedImage(filename=name, content_type=content_type, data=data)


class TestIngest:

    def test_writes_files_under_generated_names(self, tmp_path):
        storage = LocalMediaStorage(tmp_path)
        names = storage.ingest([_image(data=b"one"), _image("b.jpg", b"two", "image/jpeg")])
        assert len(names) == 2
        assert all(_NAME.match(n) for n in names)
        assert names[0].endswith(".png")
        assert names[1].endswith(".jpg")
        assert (tmp_path / names[0]).read_bytes() == b"one"
        assert (tmp_path / names[1]).read_bytes() == b"two"

    def test_names_are_unique_within_a_batch(self, tmp_path):
        names = LocalMediaStorage(tmp_path).ingest([_image() for _ in range(10)])
        assert len(set(names)) == 10

    def test_no_temp_files_left_behind(self, tmp_path):
        storage = LocalMediaStorage(tmp_path)
        names = storage.ingest([_image()])
        assert {p.name for p in tmp_path.iterdir()} == set(names)

    def test_unsafe_extension_dropped(self, tmp_path):
        name = LocalMediaStorage(tmp_path).ingest([_image("evil.p/hp")])[0]
        assert "." not in name

    def test_empty_batch(self, tmp_path):
        assert LocalMediaStorage(tmp_path).ingest([]) == []


class TestIngestValidation:

    def test_non_image_rejects_whole_batch(self, tmp_path):
        storage = LocalMediaStorage(tmp_path)
        with pytest.raises(UploadRejected, match="Only image files"):
            storage.ingest([_image(), _image("doc.pdf", content_type="application/pdf")])
        assert list(tmp_path.iterdir()) == []

    def test_more_than_ten_files_rejected(self, tmp_path):
        storage = LocalMediaStorage(tmp_path)
        with pytest.raises(UploadRejected, match="Too many files"):
            storage.ingest([_image() for _ in range(11)])
        assert list(tmp_path.iterdir()) == []

    def test_oversize_file_rejected(self, tmp_path):
        storage = LocalMediaStorage(tmp_path)
        big = _image(data=b"x" * (MAX_FILE_SIZE + 1))
        with pytest.raises(UploadRejected, match="too large"):
            storage.ingest([_image(), big])
        assert list(tmp_path.iterdir()) == []

    def test_file_at_limit_accepted(self, tmp_path):
        storage = LocalMediaStorage(tmp_path, max_file_size=16)
        assert len(storage.ingest([_image(data=b"x" * 16)])) == 1

    def test_type_checked_before_count(self, tmp_path):
        storage = LocalMediaStorage(tmp_path)
        batch = [_image() for _ in range(11)] + [_image("a.txt", content_type="text/plain")]
        with pytest.raises(UploadRejected, match="Only image files"):
            storage.ingest(batch)

    def test_write_failure_rolls_back_batch(self, tmp_path, monkeypatch):
        storage = LocalMediaStorage(tmp_path)
        original_write = storage._write
        calls = []

        def flaky_write(name, data):
            calls.append(name)
            if len(calls) == 2:
                raise OSError("disk full")
            original_write(name, data)

        monkeypatch.setattr(storage, "_write", flaky_write)
        with pytest.raises(StorageError):
            storage.ingest([_image(), _image(), _image()])
        assert list(tmp_path.iterdir()) == []


class TestDeleteAndLookup:

    def test_delete_existing(self, tmp_path):
        storage = LocalMediaStorage(tmp_path)
        name = storage.ingest([_image()])[0]
        assert storage.delete(name) is True
        assert not storage.exists(name)

    def test_delete_missing_returns_false(self, tmp_path):
        assert LocalMediaStorage(tmp_path).delete("gone.png") is False

    @pytest.mark.parametrize("name", ["../database.json", "a/b.png", "..", ".hidden", ""])
    def test_unsafe_names_rejected(self, tmp_path, name):
        with pytest.raises(ValidationError, match="Invalid image name"):
            LocalMediaStorage(tmp_path).delete(name)

    def test_list_names_skips_hidden_files(self, tmp_path):
        storage = LocalMediaStorage(tmp_path)
        (tmp_path / ".incoming-123").write_bytes(b"")
        name = storage.ingest([_image()])[0]
        assert storage.list_names() == {name}
