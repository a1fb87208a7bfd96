"""FastAPI application exposing the catalog over HTTP."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from loguru import logger
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import FormData, UploadFile
from starlette.responses import JSONResponse

from catalog.application.dto import ProductFields
from catalog.domain.exceptions import (
    EntityNotFoundError,
    StorageError,
    ValidationError,
)
from catalog.domain.model.value_objects import UploadedImage
from catalog.domain.repository.media_storage import MAX_FILE_SIZE
from catalog.infrastructure.bootstrap import CatalogServices, catalog_services
from catalog.infrastructure.config import Settings

_KEPT_IMAGE_FIELDS = ("existingImages[]", "existingImages")


async def _read_uploads(form: FormData) -> list[UploadedImage]:
    uploads: list[UploadedImage] = []
    for item in form.getlist("images"):
        if not isinstance(item, UploadFile) or not item.filename:
            continue
        # One byte past the limit is enough for the size check to trip.
        data = await item.read(MAX_FILE_SIZE + 1)
        await item.close()
        uploads.append(
            UploadedImage(
                filename=item.filename,
                content_type=item.content_type or "",
                data=data,
            )
        )
    return uploads


def _read_fields(form: FormData) -> ProductFields:
    def text(key: str) -> str | None:
        value = form.get(key)
        return value if isinstance(value, str) else None

    return ProductFields(
        name=text("name"),
        price=text("price"),
        stock=text("stock"),
        description=text("description"),
        pinned=text("pinned"),
    )


def _read_kept_images(form: FormData) -> list[str]:
    kept: list[str] = []
    for key in _KEPT_IMAGE_FIELDS:
        kept.extend(v for v in form.getlist(key) if isinstance(v, str) and v)
    return kept


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(settings: Settings | None = None) -> FastAPI:
    services: CatalogServices = catalog_services(settings)

    app = FastAPI(title="Product Catalog API", version="1.0.0")
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Error mapping --------------------------------------------------------

    @app.exception_handler(ValidationError)
    async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        return _error(400, str(exc))

    @app.exception_handler(EntityNotFoundError)
    async def _not_found(request: Request, exc: EntityNotFoundError) -> JSONResponse:
        return _error(404, str(exc))

    @app.exception_handler(StorageError)
    async def _storage_error(request: Request, exc: StorageError) -> JSONResponse:
        logger.opt(exception=exc).error("{} {} failed", request.method, request.url.path)
        return _error(500, "Internal server error")

    @app.exception_handler(Exception)
    async def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.opt(exception=exc).error("Unhandled error on {} {}", request.method, request.url.path)
        return _error(500, "Internal server error")

    # --- Routes ---------------------------------------------------------------

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/products")
    async def list_products() -> list[dict]:
        return [dto.to_dict() for dto in services.list_products.handle()]

    @app.get("/api/products/{product_id}")
    async def get_product(product_id: str) -> dict:
        return services.show_product.handle(product_id).to_dict()

    @app.post("/api/products", status_code=201)
    async def create_product(request: Request) -> dict:
        form = await request.form()
        uploads = await _read_uploads(form)
        dto = await run_in_threadpool(
            services.create_product.handle, _read_fields(form), uploads
        )
        return dto.to_dict()

    @app.post("/api/products/{product_id}")
    async def update_product(product_id: str, request: Request) -> dict:
        form = await request.form()
        uploads = await _read_uploads(form)
        dto = await run_in_threadpool(
            services.update_product.handle,
            product_id,
            _read_fields(form),
            uploads,
            _read_kept_images(form),
        )
        return dto.to_dict()

    @app.delete("/api/products/{product_id}")
    async def delete_product(product_id: str) -> dict[str, str]:
        await run_in_threadpool(services.delete_product.handle, product_id)
        return {"message": "Product deleted successfully"}

    app.mount(
        "/uploads",
        StaticFiles(directory=services.settings.upload_dir),
        name="uploads",
    )

    return app
