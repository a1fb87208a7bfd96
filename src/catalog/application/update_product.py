"""Application service: Update Product use case."""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from catalog.application.dto import ProductDTO, ProductFields
from catalog.domain.exceptions import DomainException, ValidationError
from catalog.domain.model.product import Product
from catalog.domain.model.value_objects import UploadedImage
from catalog.domain.repository.media_storage import MediaStorage
from catalog.domain.repository.product_store import ProductStore
from catalog.domain.service.consistency_guard import ConsistencyGuard


class UpdateProductHandler:

    def __init__(
        self,
        product_store: ProductStore,
        media: MediaStorage,
        guard: ConsistencyGuard,
        prune_replaced_images: bool = False,
    ) -> None:
        self._product_store = product_store
        self._media = media
        self._guard = guard
        self._prune_replaced_images = prune_replaced_images

    def handle(
        self,
        product_id: str,
        fields: ProductFields,
        uploads: Sequence[UploadedImage],
        kept_images: Sequence[str] = (),
    ) -> ProductDTO:
        """Replace a product's fields and recompute its images.

        The new image list is ``kept_images`` in the given order followed
        by the new uploads. A kept image must already belong to this
        product and still be on disk. Images left out of ``kept_images``
        stay on disk unless the handler was built with
        ``prune_replaced_images``.

        Blank name or price keep the current value; omitted stock,
        description and pinned fall back to their defaults.
        """
        new_images = self._media.ingest(uploads)

        def revise(current: Product) -> Product:
            self._check_kept_images(current, kept_images)
            return current.revised(
                name=fields.name if fields.has_name() else current.name,
                price=fields.parsed_price() if fields.has_price() else current.price,
                stock=fields.parsed_stock(),
                description=fields.description or "",
                pinned=fields.parsed_pinned(),
                images=list(kept_images) + new_images,
            )

        try:
            _, updated = self._product_store.update(
                product_id,
                revise,
                after_commit=self._prune if self._prune_replaced_images else None,
            )
        except DomainException:
            self._guard.reclaim(new_images)
            raise

        logger.info(
            "Updated product {} ({} kept, {} new image(s))",
            updated.id,
            len(kept_images),
            len(new_images),
        )
        return ProductDTO.from_product(updated)

    def _check_kept_images(self, current: Product, kept_images: Sequence[str]) -> None:
        for name in kept_images:
            if name not in current.images:
                raise ValidationError(f"Image '{name}' is not attached to this product")
            if not self._media.exists(name):
                raise ValidationError(f"Image '{name}' is missing from the media directory")

    def _prune(self, previous: Product, updated: Product) -> None:
        # Called with the store's writer lock held.
        self._guard.reclaim(self._guard.released_images(previous, updated.images))
