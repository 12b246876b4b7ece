"""CLI commands for the Product catalog."""

from __future__ import annotations

import click

from storefront.application.add_product import AddProductHandler, DeactivateProductHandler
from storefront.application.show_inventory import ShowInventoryHandler
from storefront.infrastructure.bootstrap import Container
from storefront.infrastructure.cli.errors import domain_errors


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Unit price, e.g. 15000.00.")
@click.option("--stock", default=0, type=click.IntRange(min=0), help="Units in stock.")
@click.pass_obj
def product_add(container: Container, name: str, price: str, stock: int) -> None:
    """Add a product to the catalog."""
    handler = AddProductHandler(container.products)
    with domain_errors():
        product = handler.handle(name, price, stock)
    click.echo(f"Product #{product.id} added: {product.name} at {product.price} ({product.stock} in stock)")


@click.command("list")
@click.option("--all", "include_inactive", is_flag=True, default=False, help="Include deactivated products.")
@click.pass_obj
def product_list(container: Container, include_inactive: bool) -> None:
    """List products with their stock."""
    lines = ShowInventoryHandler(container.products).handle(include_inactive)
    if not lines:
        click.echo("No products found.")
        return

    click.echo(f"  {'ID':<6} {'Name':<20} {'Price':>10} {'Stock':>6}")
    click.echo(f"  {'-'*45}")
    for line in lines:
        marker = "" if line.is_active else "  (inactive)"
        click.echo(f"  {line.id:<6} {line.name:<20} {line.price:>10} {line.stock:>6}{marker}")


@click.command("deactivate")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
@click.pass_obj
def product_deactivate(container: Container, product_id: int) -> None:
    """Soft-delete a product; existing orders keep it."""
    with domain_errors():
        DeactivateProductHandler(container.products, container.product_locks).handle(product_id)
    click.echo(f"Product #{product_id} deactivated.")
