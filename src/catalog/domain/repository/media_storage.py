"""Abstract storage for uploaded product images."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from catalog.domain.model.value_objects import UploadedImage

MAX_FILES = 10
MAX_FILE_SIZE = 5 * 1024 * 1024  # 5 MiB
ACCEPTED_TYPE_PREFIX = "image/"


class MediaStorage(ABC):

    @abstractmethod
    def ingest(self, uploads: Sequence[UploadedImage]) -> list[str]:
        """Validate and store a batch of uploads.

        Returns the generated filenames in upload order. The batch is
        all-or-nothing: if any file is rejected (UploadRejected) or a
        write fails (StorageError), nothing from the batch remains.
        """

    @abstractmethod
    def delete(self, filename: str) -> bool:
        """Remove a stored file. Returns False if it was already absent."""

    @abstractmethod
    def exists(self, filename: str) -> bool:
        """Return True if the file is present in storage."""

    @abstractmethod
    def list_names(self) -> set[str]:
        """Return the names of every stored file."""
