"""CLI commands for the Product aggregate."""

from __future__ import annotations

import mimetypes
from pathlib import Path

import click

from catalog.application.dto import ProductDTO, ProductFields
from catalog.domain.exceptions import DomainException
from catalog.domain.model.value_objects import UploadedImage
from catalog.infrastructure.bootstrap import catalog_services


def _load_images(paths: tuple[Path, ...]) -> list[UploadedImage]:
    """Read image files from disk the way an HTTP upload would carry them."""
    uploads: list[UploadedImage] = []
    for path in paths:
        content_type, _ = mimetypes.guess_type(path.name)
        uploads.append(
            UploadedImage(
                filename=path.name,
                content_type=content_type or "application/octet-stream",
                data=path.read_bytes(),
            )
        )
    return uploads


def _display_product(dto: ProductDTO) -> None:
    """Shared formatting for displaying a product."""
    pin = "  [pinned]" if dto.pinned else ""
    click.echo(f"Product {dto.id}{pin}")
    click.echo(f"Name:        {dto.name}")
    click.echo(f"Price:       {dto.price:,.2f}")
    click.echo(f"Stock:       {dto.stock}")
    if dto.description:
        click.echo(f"Description: {dto.description}")
    click.echo("Images:")
    if not dto.images:
        click.echo("  (none)")
    for position, name in enumerate(dto.images):
        cover = "  (cover)" if position == 0 else ""
        click.echo(f"  /uploads/{name}{cover}")


@click.command("list")
@click.option("--pinned-first", is_flag=True, help="Show pinned products first.")
def product_list(pinned_first: bool) -> None:
    """List all products in the catalog."""
    products = catalog_services().list_products.handle(pinned_first=pinned_first)

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<34} {'Name':<20} {'Price':>12} {'Stock':>6} {'Images':>6}")
    click.echo("-" * 82)
    for p in products:
        name = f"*{p.name}" if p.pinned else p.name
        click.echo(
            f"{p.id:<34} {name:<20} {p.price:>12,.2f} {p.stock:>6} {len(p.images):>6}"
        )


@click.command("show")
@click.option("--id", "product_id", required=True, help="Product ID.")
def product_show(product_id: str) -> None:
    """Show a single product."""
    try:
        dto = catalog_services().show_product.handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_product(dto)


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price (e.g. 100000).")
@click.option("--stock", default=None, help="Units in stock (default 0).")
@click.option("--description", default="", help="Free-text description.")
@click.option("--pinned", is_flag=True, help="Pin the product to the top of listings.")
@click.option(
    "--image",
    "images",
    multiple=True,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Image file to attach (repeatable, first one is the cover).",
)
def product_add(
    name: str,
    price: str,
    stock: str | None,
    description: str,
    pinned: bool,
    images: tuple[Path, ...],
) -> None:
    """Add a new product to the catalog."""
    handler = catalog_services().create_product
    fields = ProductFields(
        name=name, price=price, stock=stock, description=description, pinned=pinned
    )

    try:
        dto = handler.handle(fields, _load_images(images))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {dto.id} '{dto.name}' added with {len(dto.images)} image(s)")


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--name", default=None, help="New name (default: unchanged).")
@click.option("--price", default=None, help="New price (default: unchanged).")
@click.option("--stock", default=None, help="Units in stock (default 0).")
@click.option("--description", default="", help="Free-text description.")
@click.option("--pinned", is_flag=True, help="Pin the product to the top of listings.")
@click.option("--keep", "kept", multiple=True, help="Existing image to keep (repeatable, in order).")
@click.option(
    "--image",
    "images",
    multiple=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="New image file to append (repeatable).",
)
def product_update(
    product_id: str,
    name: str | None,
    price: str | None,
    stock: str | None,
    description: str,
    pinned: bool,
    kept: tuple[str, ...],
    images: tuple[Path, ...],
) -> None:
    """Replace a product's details and image list."""
    handler = catalog_services().update_product
    fields = ProductFields(
        name=name, price=price, stock=stock, description=description, pinned=pinned
    )

    try:
        dto = handler.handle(product_id, fields, _load_images(images), list(kept))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {dto.id} updated")
    _display_product(dto)


@click.command("delete")
@click.option("--id", "product_id", required=True, help="Product ID.")
def product_delete(product_id: str) -> None:
    """Delete a product together with its image files."""
    try:
        catalog_services().delete_product.handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo("Product deleted successfully")
