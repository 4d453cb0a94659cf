"""Command group: sign-in, identity, menu, and password change."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from logicem.commands._base import LogicemGroup
from logicem.domain.authorization import menu_for
from logicem.services.result import ServiceResult
from logicem.services.users import UserService

if TYPE_CHECKING:
    from logicem.commands._context import AppContext

_AUTH_EXAMPLES = """\
  logicem --email admin@logicem.com --password '...' auth login
  logicem auth whoami
  logicem --json auth menu
  logicem auth passwd"""


@click.group(cls=LogicemGroup, examples=_AUTH_EXAMPLES)
@click.pass_obj
def auth(app: AppContext) -> None:
    """Sign in, inspect the session, and change passwords."""


@auth.command(
    examples="""\
  logicem auth login
  LOGICEM_EMAIL=agent@logicem.com LOGICEM_PASSWORD=... logicem auth login"""
)
@click.pass_obj
def login(app: AppContext) -> None:
    """Check credentials and show the resulting identity.

    Prompts for whatever --email/--password did not supply.
    """
    email = app.settings.email or click.prompt("Email")
    password = app.settings.password or click.prompt("Contraseña", hide_input=True)
    app.emit(app.session.sign_in(email, password))


@auth.command(examples="  logicem auth whoami")
@click.pass_obj
def whoami(app: AppContext) -> None:
    """Show the signed-in identity and the idle countdown."""
    identity = app.authenticate()
    session_cfg = app.settings.session
    app.emit(
        ServiceResult(
            ok=True,
            op="whoami",
            data={
                "identity": identity.model_dump(mode="json"),
                "time_remaining": app.session.time_remaining(),
                "warning_seconds": session_cfg.warning_seconds,
                "critical_seconds": session_cfg.critical_seconds,
            },
        )
    )


@auth.command(examples="  logicem --json auth menu")
@click.pass_obj
def menu(app: AppContext) -> None:
    """List the views the signed-in role can open."""
    identity = app.authenticate()
    sections = {
        section: [item.model_dump() for item in items]
        for section, items in menu_for(identity.role).items()
    }
    app.emit(
        ServiceResult(
            ok=True,
            op="menu",
            data={"role": str(identity.role), "sections": sections},
        )
    )


@auth.command(
    examples="""\
  logicem auth passwd
  logicem auth passwd --new-password 'NuevaClave2024' --confirm 'NuevaClave2024'"""
)
@click.option("--new-password", prompt="Nueva contraseña", hide_input=True)
@click.option("--confirm", prompt="Confirmar contraseña", hide_input=True)
@click.pass_obj
def passwd(app: AppContext, new_password: str, confirm: str) -> None:
    """Change your own password (at least 8 characters)."""
    svc = app.service(UserService)
    identity = app.authenticate()
    app.emit(svc.set_password(identity.id, new_password, confirm))
