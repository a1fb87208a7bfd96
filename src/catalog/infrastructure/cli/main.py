import click
import uvicorn

from catalog.infrastructure.cli.product_commands import (
    product_add,
    product_delete,
    product_list,
    product_show,
    product_update,
)
from catalog.infrastructure.config import Settings
from catalog.infrastructure.http.app import create_app
from catalog.infrastructure.logging_setup import configure_logging


@click.group()
def cli() -> None:
    """Catalog — product catalog backend"""
    configure_logging(Settings().log_level)


@cli.group()
def product() -> None:
    """Manage products."""


@cli.command("serve")
@click.option("--host", default=None, help="Bind address (default: CATALOG_HOST or 0.0.0.0).")
@click.option("--port", default=None, type=int, help="Listen port (default: PORT or 3000).")
def serve(host: str | None, port: int | None) -> None:
    """Run the HTTP API."""
    settings = Settings()
    app = create_app(settings)
    uvicorn.run(
        app,
        host=host or settings.host,
        port=port or settings.port,
        log_config=None,
    )


# Register subcommands
product.add_command(product_add)
product.add_command(product_delete)
product.add_command(product_list)
product.add_command(product_show)
product.add_command(product_update)
