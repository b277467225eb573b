"""Flask CLI commands for managing user accounts."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from lumir_auth.core.container import get_container
from lumir_auth.models.user import UserRole
from lumir_auth.services._shared.errors import ServiceError
from lumir_auth.services.auth import SignUpIn

LOGGER = logging.getLogger(__name__)


@click.group("users")
def users_cli() -> None:
    """User account administration."""


@users_cli.command("create-admin")
@click.option("--email", required=True, help="Login email of the administrator.")
@click.option("--name", required=True, help="Display name.")
@click.option(
    "--password",
    required=True,
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help="Password (prompted when omitted).",
)
@click.option("--company", default=None, help="Optional organization label.")
@with_appcontext
def create_admin(email: str, name: str, password: str, company: str | None) -> None:
    """Create an ADMIN account; the HTTP surface cannot promote users."""
    service = get_container().auth_service()
    try:
        user = service.sign_up(
            SignUpIn(
                name=name,
                email=email,
                password=password,
                password_confirmation=password,
                company=company,
                role=UserRole.ADMIN,
            )
        )
    except ServiceError as exc:
        raise click.ClickException(str(exc)) from exc
    LOGGER.info("Administrator created", extra={"at": "cli.users.create_admin"})
    click.echo(f"Created admin {user.email} (id={user.id})")
