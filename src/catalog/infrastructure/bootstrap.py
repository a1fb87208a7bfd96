"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from dataclasses import dataclass

from catalog.application.create_product import CreateProductHandler
from catalog.application.delete_product import DeleteProductHandler
from catalog.application.show_product import ListProductsHandler, ShowProductHandler
from catalog.application.update_product import UpdateProductHandler
from catalog.domain.service.consistency_guard import ConsistencyGuard
from catalog.infrastructure.config import Settings
from catalog.infrastructure.media.local_media_storage import LocalMediaStorage
from catalog.infrastructure.persistence.json_product_store import JsonProductStore


@dataclass(frozen=True)
class CatalogServices:
    """Every use case, sharing one store and one media directory."""

    settings: Settings
    media: LocalMediaStorage
    create_product: CreateProductHandler
    update_product: UpdateProductHandler
    delete_product: DeleteProductHandler
    show_product: ShowProductHandler
    list_products: ListProductsHandler


def product_store(settings: Settings) -> JsonProductStore:
    return JsonProductStore(settings.database_file)


def media_storage(settings: Settings) -> LocalMediaStorage:
    return LocalMediaStorage(settings.upload_dir)


def catalog_services(settings: Settings | None = None) -> CatalogServices:
    settings = settings or Settings()
    store = product_store(settings)
    media = media_storage(settings)
    guard = ConsistencyGuard(media)
    return CatalogServices(
        settings=settings,
        media=media,
        create_product=CreateProductHandler(store, media, guard),
        update_product=UpdateProductHandler(
            store, media, guard, prune_replaced_images=settings.prune_replaced_images
        ),
        delete_product=DeleteProductHandler(store, guard),
        show_product=ShowProductHandler(store),
        list_products=ListProductsHandler(store),
    )
