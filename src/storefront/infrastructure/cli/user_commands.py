"""CLI commands for users and tokens."""

from __future__ import annotations

import click

from storefront.application.add_user import AddUserHandler, IssueTokenHandler
from storefront.infrastructure.bootstrap import Container
from storefront.infrastructure.cli.errors import domain_errors


@click.command("add")
@click.option("--name", required=True, help="Display name.")
@click.option("--email", required=True, help="Email address.")
@click.pass_obj
def user_add(container: Container, name: str, email: str) -> None:
    """Register a user."""
    with domain_errors():
        user = AddUserHandler(container.users).handle(name, email)
    click.echo(f"User #{user.id} added: {user.name} <{user.email}>")


@click.command("list")
@click.pass_obj
def user_list(container: Container) -> None:
    """List users."""
    users = container.users.list_all()
    if not users:
        click.echo("No users found.")
        return
    for u in users:
        click.echo(f"  {u.id:<6} {u.name:<20} {u.email}")


@click.command("login")
@click.option("--user-id", required=True, type=int, help="User to issue a token for.")
@click.pass_obj
def auth_login(container: Container, user_id: int) -> None:
    """Print a bearer token for a user."""
    handler = IssueTokenHandler(container.users, container.tokens)
    with domain_errors():
        token = handler.handle(user_id)
    click.echo(token)
