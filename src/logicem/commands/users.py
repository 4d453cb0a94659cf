"""Command group: user administration (admin only)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from logicem.commands._base import LogicemGroup, list_options
from logicem.services.users import ROLE_CHOICES, UserService

if TYPE_CHECKING:
    from logicem.commands._context import AppContext

_USERS_EXAMPLES = """\
  logicem users list --search carlos
  logicem users create --name 'Ana Ruiz' --email ana@logicem.com --role agent
  logicem users update demo-agent-2 --role manager
  logicem users delete user-1a2b3c4d5e6f
  logicem users passwd demo-agent"""


@click.group(cls=LogicemGroup, examples=_USERS_EXAMPLES)
@click.pass_obj
def users(app: AppContext) -> None:
    """Manage application users and their credentials."""


@users.command("list", examples="  logicem users list --sort name --asc")
@list_options("created_at", "name", "email", "role")
@click.pass_obj
def list_cmd(app: AppContext, **opts: Any) -> None:
    """List users."""
    app.emit(app.service(UserService).list_users(app.list_query(**opts)))


@users.command(
    examples="""\
  logicem users create --name 'Ana Ruiz' --email ana@logicem.com --role agent
  logicem users create --name Jefe --email jefe@logicem.com --role manager --password 'Clave2024!'"""
)
@click.option("--name", required=True, help="Display name.")
@click.option("--email", required=True, help="Sign-in email.")
@click.option("--role", type=click.Choice(ROLE_CHOICES), required=True, help="Role.")
@click.option("--password", prompt="Contraseña", hide_input=True, help="Initial password.")
@click.pass_obj
def create(app: AppContext, name: str, email: str, role: str, password: str) -> None:
    """Create a user and its credential."""
    app.emit(app.service(UserService).create_user(name, email, password, role))


@users.command(examples="  logicem users update demo-agent-2 --name 'Carlos R.' --role manager")
@click.argument("user_id")
@click.option("--name", default=None, help="New display name.")
@click.option("--role", type=click.Choice(ROLE_CHOICES), default=None, help="New role.")
@click.pass_obj
def update(app: AppContext, user_id: str, name: str | None, role: str | None) -> None:
    """Change a user's name or role."""
    app.emit(app.service(UserService).update_user(user_id, name=name, role=role))


@users.command(examples="  logicem users delete demo-agent-3")
@click.argument("user_id")
@click.pass_obj
def delete(app: AppContext, user_id: str) -> None:
    """Delete a user and its credential."""
    app.emit(app.service(UserService).delete_user(user_id))


@users.command(examples="  logicem users passwd demo-agent --new-password 'Clave2024!' --confirm 'Clave2024!'")
@click.argument("user_id")
@click.option("--new-password", prompt="Nueva contraseña", hide_input=True)
@click.option("--confirm", prompt="Confirmar contraseña", hide_input=True)
@click.pass_obj
def passwd(app: AppContext, user_id: str, new_password: str, confirm: str) -> None:
    """Set another user's password."""
    app.emit(app.service(UserService).set_password(user_id, new_password, confirm))
