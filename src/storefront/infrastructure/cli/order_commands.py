"""CLI commands for the Order aggregate.

Every command sends ``--token`` through the authorization gate as a
``Bearer`` header value, exactly as an HTTP client would.
"""

from __future__ import annotations

import click

from storefront.application.dto import (
    CreateOrderRequest,
    OrderDTO,
    OrderItemSpec,
    validate_status_update,
)
from storefront.infrastructure.bootstrap import Container
from storefront.infrastructure.cli.errors import domain_errors

token_option = click.option(
    "--token",
    envvar="STOREFRONT_TOKEN",
    default=None,
    help="Bearer token (env STOREFRONT_TOKEN).",
)


def _authorization(token: str | None) -> str | None:
    return f"Bearer {token}" if token is not None else None


def _parse_items(raw: str) -> list[OrderItemSpec]:
    """Parse '1:3,2:5' (product ID:quantity) into OrderItemSpec list."""
    specs: list[OrderItemSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ProductID:Quantity'."
            )
        id_str, qty_str = pair.split(":", 1)
        try:
            product_id = int(id_str)
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid item '{pair}'. Product ID and quantity must be integers."
            )
        specs.append(OrderItemSpec(product_id=product_id, quantity=qty))
    return specs


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.order_number} (#{dto.id})  status={dto.status}")
    click.echo(f"Customer: {dto.user_name or '-'} (user #{dto.user_id})")
    click.echo(f"Ship to:  {dto.shipping_address}")
    if dto.phone:
        click.echo(f"Phone:    {dto.phone}")
    if dto.notes:
        click.echo(f"Notes:    {dto.notes}")
    click.echo(f"Ordered:  {dto.order_date:%Y-%m-%d %H:%M} UTC")
    if dto.shipped_date:
        click.echo(f"Shipped:  {dto.shipped_date:%Y-%m-%d %H:%M} UTC")
    if dto.delivered_date:
        click.echo(f"Delivered: {dto.delivered_date:%Y-%m-%d %H:%M} UTC")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<20} {item.quantity:>5} {item.unit_price:>10} {item.total_price:>10}"
        )
    click.echo(f"  {'-'*47}")
    click.echo(f"  {'Order Total':<27} {dto.total_amount:>20}")


def _display_summary(orders: list[OrderDTO]) -> None:
    if not orders:
        click.echo("No orders.")
        return
    click.echo(f"  {'Order':<24} {'User':<16} {'Status':<11} {'Total':>10}")
    click.echo(f"  {'-'*64}")
    for dto in orders:
        user = dto.user_name or f"#{dto.user_id}"
        click.echo(
            f"  {dto.order_number:<24} {user:<16} {dto.status:<11} {dto.total_amount:>10}"
        )


@click.command("create")
@token_option
@click.option("--address", required=True, help="Shipping address.")
@click.option("--phone", default="", help="Contact phone number.")
@click.option("--notes", default="", help="Notes for the order.")
@click.option("--items", required=True, help="Items as 'ProductID:Qty,ProductID:Qty'.")
@click.pass_obj
def order_create(
    container: Container,
    token: str | None,
    address: str,
    phone: str,
    notes: str,
    items: str,
) -> None:
    """Create a new order (reserves stock)."""
    request = CreateOrderRequest(
        shipping_address=address,
        items=_parse_items(items),
        phone=phone,
        notes=notes,
    )
    with domain_errors():
        dto = container.engine.create_order(_authorization(token), request)

    click.echo("Order created.")
    _display_order(dto)


@click.command("show")
@token_option
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
@click.pass_obj
def order_show(container: Container, token: str | None, order_id: int) -> None:
    """Show details of an existing order."""
    with domain_errors():
        dto = container.engine.get_order(_authorization(token), order_id)
    _display_order(dto)


@click.command("list")
@token_option
@click.pass_obj
def order_list(container: Container, token: str | None) -> None:
    """List every order, newest first."""
    with domain_errors():
        orders = container.engine.list_orders(_authorization(token))
    _display_summary(orders)


@click.command("mine")
@token_option
@click.pass_obj
def order_mine(container: Container, token: str | None) -> None:
    """List the orders of the token's owner."""
    with domain_errors():
        orders = container.engine.my_orders(_authorization(token))
    _display_summary(orders)


@click.command("user")
@token_option
@click.option("--user-id", required=True, type=int, help="Owner whose orders to list.")
@click.pass_obj
def order_user(container: Container, token: str | None, user_id: int) -> None:
    """List the orders of one user."""
    with domain_errors():
        orders = container.engine.orders_by_user(_authorization(token), user_id)
    _display_summary(orders)


@click.command("status")
@token_option
@click.option("--id", "order_id", required=True, type=int, help="Order ID to update.")
@click.option("--status", "new_status", required=True, help="New status, e.g. Shipped.")
@click.option("--notes", default=None, help="Replace the order notes.")
@click.pass_obj
def order_status(
    container: Container,
    token: str | None,
    order_id: int,
    new_status: str,
    notes: str | None,
) -> None:
    """Set an order's status (stamps shipped/delivered dates)."""
    with domain_errors():
        request = validate_status_update(new_status, notes)
        container.engine.update_order_status(_authorization(token), order_id, request)
    click.echo(f"Order #{order_id} is now {request.status.value}.")


@click.command("cancel")
@token_option
@click.option("--id", "order_id", required=True, type=int, help="Order ID to cancel.")
@click.pass_obj
def order_cancel(container: Container, token: str | None, order_id: int) -> None:
    """Cancel your own pending or confirmed order (restores stock)."""
    with domain_errors():
        container.engine.cancel_order(_authorization(token), order_id)
    click.echo(f"Order #{order_id} cancelled.")
