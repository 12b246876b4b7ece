from dataclasses import replace
from pathlib import Path

import click

from storefront.infrastructure.bootstrap import build_container
from storefront.infrastructure.cli.order_commands import (
    order_cancel,
    order_create,
    order_list,
    order_mine,
    order_show,
    order_status,
    order_user,
)
from storefront.infrastructure.cli.product_commands import (
    product_add,
    product_deactivate,
    product_list,
)
from storefront.infrastructure.cli.user_commands import auth_login, user_add, user_list
from storefront.infrastructure.config import Settings
from storefront.infrastructure.log import configure_logging


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory holding the JSON data files (env STOREFRONT_DATA_DIR).",
)
@click.option(
    "--log-level",
    default=None,
    help="Logging level, e.g. INFO or DEBUG (env STOREFRONT_LOG_LEVEL).",
)
@click.pass_context
def cli(ctx: click.Context, data_dir: str | None, log_level: str | None) -> None:
    """Storefront order management"""
    try:
        settings = Settings.from_env()
    except ValueError as exc:
        raise click.UsageError(str(exc))
    if data_dir is not None:
        settings = replace(settings, data_dir=Path(data_dir))
    if log_level is not None:
        settings = replace(settings, log_level=log_level.upper())

    try:
        configure_logging(settings.log_level)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--log-level")
    ctx.obj = build_container(settings)


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def user() -> None:
    """Manage users."""


@cli.group()
def auth() -> None:
    """Issue bearer tokens."""


# Register subcommands
order.add_command(order_cancel)
order.add_command(order_create)
order.add_command(order_list)
order.add_command(order_mine)
order.add_command(order_show)
order.add_command(order_status)
order.add_command(order_user)
product.add_command(product_add)
product.add_command(product_deactivate)
product.add_command(product_list)
user.add_command(user_add)
user.add_command(user_list)
auth.add_command(auth_login)
