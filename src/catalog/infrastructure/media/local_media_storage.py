"""Local-disk implementation of MediaStorage.

Files are stored flat in one directory under generated names of the form
``<epoch-millis>-<random hex><extension>``. The random part carries 64 bits
so names from concurrent requests do not collide, and no lock is needed.
"""

from __future__ import annotations

import os
import re
import secrets
import tempfile
import time
from collections.abc import Sequence
from pathlib import Path

from loguru import logger

from catalog.domain.exceptions import StorageError, UploadRejected, ValidationError
from catalog.domain.model.value_objects import UploadedImage
from catalog.domain.repository.media_storage import (
    ACCEPTED_TYPE_PREFIX,
    MAX_FILE_SIZE,
    MAX_FILES,
    MediaStorage,
)

_EXTENSION = re.compile(r"^\.[a-z0-9]{1,10}$")
_TEMP_PREFIX = ".incoming-"


class LocalMediaStorage(MediaStorage):

    def __init__(
        self,
        directory: Path,
        max_files: int = MAX_FILES,
        max_file_size: int = MAX_FILE_SIZE,
    ) -> None:
        self._directory = directory
        self._max_files = max_files
        self._max_file_size = max_file_size
        self._directory.mkdir(parents=True, exist_ok=True)

    @property
    def directory(self) -> Path:
        return self._directory

    # --- MediaStorage interface -----------------------------------------------

    def ingest(self, uploads: Sequence[UploadedImage]) -> list[str]:
        self._validate(uploads)

        stored: list[str] = []
        try:
            for upload in uploads:
                name = self.generate_name(upload.filename)
                self._write(name, upload.data)
                stored.append(name)
        except OSError as exc:
            logger.error("Failed to store upload batch: {}", exc)
            for name in stored:
                (self._directory / name).unlink(missing_ok=True)
            raise StorageError("Could not store uploaded images") from exc

        if stored:
            logger.debug("Stored {} upload(s): {}", len(stored), stored)
        return stored

    def delete(self, filename: str) -> bool:
        path = self.path_for(filename)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        return True

    def exists(self, filename: str) -> bool:
        return self.path_for(filename).is_file()

    def list_names(self) -> set[str]:
        return {
            entry.name
            for entry in self._directory.iterdir()
            if entry.is_file() and not entry.name.startswith(".")
        }

    def path_for(self, filename: str) -> Path:
        """Resolve a stored name, refusing anything that is not a plain basename."""
        if (
            not filename
            or filename != os.path.basename(filename)
            or "/" in filename
            or "\\" in filename
            or filename.startswith(".")
        ):
            raise ValidationError(f"Invalid image name: {filename!r}")
        return self._directory / filename

    # --- Naming ---------------------------------------------------------------

    @staticmethod
    def generate_name(original_filename: str) -> str:
        extension = Path(original_filename or "").suffix.lower()
        if not _EXTENSION.match(extension):
            extension = ""
        return f"{time.time_ns() // 1_000_000}-{secrets.token_hex(8)}{extension}"

    # --- Internal helpers -----------------------------------------------------

    def _validate(self, uploads: Sequence[UploadedImage]) -> None:
        for upload in uploads:
            content_type = (upload.content_type or "").lower()
            if not content_type.startswith(ACCEPTED_TYPE_PREFIX):
                raise UploadRejected("Only image files are allowed!")
        if len(uploads) > self._max_files:
            raise UploadRejected(f"Too many files: at most {self._max_files} images per request")
        for upload in uploads:
            if upload.size > self._max_file_size:
                raise UploadRejected(
                    f"File '{upload.filename}' is too large: the limit is "
                    f"{self._max_file_size // (1024 * 1024)} MB"
                )

    def _write(self, name: str, data: bytes) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=_TEMP_PREFIX)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._directory / name)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
