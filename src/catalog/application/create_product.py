"""Application service: Create Product use case."""

from __future__ import annotations

from collections.abc import Sequence
from uuid import uuid4

from loguru import logger

from catalog.application.dto import ProductDTO, ProductFields
from catalog.domain.exceptions import DomainException, ValidationError
from catalog.domain.model.product import Product
from catalog.domain.model.value_objects import UploadedImage
from catalog.domain.repository.media_storage import MediaStorage
from catalog.domain.repository.product_store import ProductStore
from catalog.domain.service.consistency_guard import ConsistencyGuard

MISSING_FIELDS_MESSAGE = "Name, price, and at least one image are required"


class CreateProductHandler:

    def __init__(
        self,
        product_store: ProductStore,
        media: MediaStorage,
        guard: ConsistencyGuard,
    ) -> None:
        self._product_store = product_store
        self._media = media
        self._guard = guard

    def handle(
        self,
        fields: ProductFields,
        uploads: Sequence[UploadedImage],
    ) -> ProductDTO:
        """Store the uploads and create a product that references them.

        If anything goes wrong after the uploads were written, those files
        are removed again so no orphan is left in the media directory.
        """
        images = self._media.ingest(uploads)

        try:
            if not fields.has_name() or not fields.has_price() or not images:
                raise ValidationError(MISSING_FIELDS_MESSAGE)

            product = Product(
                id=uuid4().hex,
                name=fields.name.strip(),
                price=fields.parsed_price(),
                stock=fields.parsed_stock(),
                description=fields.description or "",
                pinned=fields.parsed_pinned(),
                images=tuple(images),
            )
            self._product_store.insert(product)
        except DomainException:
            self._guard.reclaim(images)
            raise

        logger.info("Created product {} ({}) with {} image(s)", product.id, product.name, len(images))
        return ProductDTO.from_product(product)
