"""Domain service: keeps the media directory in step with product records.

The guard never decides on its own which files are dead. Callers compute
the exact list (files ingested by an aborted request, images of a removed
product) and the guard deletes those and nothing else.
"""

from __future__ import annotations

from collections.abc import Iterable

from loguru import logger

from catalog.domain.exceptions import DomainException
from catalog.domain.model.product import Product
from catalog.domain.repository.media_storage import MediaStorage


class ConsistencyGuard:

    def __init__(self, media: MediaStorage) -> None:
        self._media = media

    def reclaim(self, filenames: Iterable[str]) -> list[str]:
        """Delete the given files, ignoring ones that are already gone.

        Cleanup is best-effort: a failure on one file is logged and the
        remaining files are still attempted. Returns the names that were
        actually removed.
        """
        removed: list[str] = []
        for name in filenames:
            try:
                if self._media.delete(name):
                    removed.append(name)
            except (OSError, DomainException) as exc:
                logger.warning("Could not remove media file {}: {}", name, exc)
        if removed:
            logger.debug("Reclaimed {} media file(s): {}", len(removed), removed)
        return removed

    @staticmethod
    def released_images(previous: Product, retained: Iterable[str]) -> list[str]:
        """Images attached to ``previous`` that are not in ``retained``.

        Order follows the previous image list so deletions are predictable.
        """
        keep = set(retained)
        return [name for name in previous.images if name not in keep]
