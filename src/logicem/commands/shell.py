"""Command: interactive shell with a live session and idle timeout.

The shell keeps one Identity in memory across commands. Every line the
user enters is a key-press activity signal; a background ticker checks
the idle clock once per ``[session] tick_seconds`` and signs the user
out when it runs out. Any other line is run as a ``logicem`` command
against the same session.
"""

from __future__ import annotations

import shlex
from typing import TYPE_CHECKING

import click

from logicem.commands._base import LogicemCommand
from logicem.domain.session import ActivitySignal
from logicem.infrastructure.activity import ActivityHub
from logicem.infrastructure.ticker import ThreadTicker
from logicem.output.renderers import render_countdown

if TYPE_CHECKING:
    from logicem.commands._context import AppContext
    from logicem.services.result import ServiceResult
    from logicem.services.session import SessionManager

_SHELL_EXAMPLES = """\
  logicem shell
  logicem --email agent@logicem.com shell"""

_SHELL_HELP = """\
  login            Iniciar sesión
  logout           Cerrar sesión
  time             Tiempo restante de la sesión
  help             Esta ayuda
  exit | quit      Salir
  <comando>        Cualquier comando de logicem (p. ej. 'tasks list')"""


def _prompt_login(app: AppContext, session: SessionManager) -> None:
    email = app.settings.email or click.prompt("Email")
    password = click.prompt("Contraseña", hide_input=True)
    result = session.sign_in(email, password)
    if result.ok:
        role = result.data["identity"]["role"]
        click.echo(f"Bienvenido, {email} ({role}).")
    else:
        click.echo(result.error_message(), err=True)


def _show_time(app: AppContext, session: SessionManager) -> None:
    cfg = app.settings.session
    click.echo(
        render_countdown(
            session.time_remaining(),
            warning_seconds=cfg.warning_seconds,
            critical_seconds=cfg.critical_seconds,
        )
    )


def _run_command(root_ctx: click.Context, args: list[str]) -> None:
    """Run one ``logicem`` subcommand inside the shell's context."""
    group = root_ctx.command
    if not isinstance(group, click.Group):
        raise click.UsageError("El shell necesita el grupo raíz de comandos.", ctx=root_ctx)
    try:
        _name, cmd, rest = group.resolve_command(root_ctx, args)
        if cmd is None or cmd.name == "shell":
            click.echo(f"Comando desconocido: {args[0]}", err=True)
            return
        with cmd.make_context(cmd.name, rest, parent=root_ctx) as sub_ctx:
            cmd.invoke(sub_ctx)
    except (click.exceptions.Exit, click.Abort):
        pass
    except click.ClickException as exc:
        exc.show()
    except SystemExit:
        # emit() exits 1 after printing the error; the shell keeps going.
        pass


@click.command("shell", cls=LogicemCommand, examples=_SHELL_EXAMPLES)
@click.pass_context
def shell(ctx: click.Context) -> None:
    """Interactive session with idle timeout."""
    app: AppContext = ctx.obj
    root_ctx = ctx.find_root()
    activity = ActivityHub()
    ticker = ThreadTicker(app.settings.session.tick_seconds)

    def on_expired(result: ServiceResult) -> None:
        message = result.error_message("Sesión expirada")
        click.echo(f"\n{message}", err=True)

    session = app.build_session(ticker=ticker, activity=activity, on_expired=on_expired)
    app.interactive = True

    click.echo("logicem shell. Escribe 'help' para ver los comandos.")
    if app.settings.has_credentials:
        result = session.sign_in(app.settings.email, app.settings.password)
        if not result.ok:
            click.echo(result.error_message(), err=True)
    else:
        _prompt_login(app, session)

    try:
        while True:
            try:
                line = click.prompt("logicem", prompt_suffix="> ", default="", show_default=False)
            except (EOFError, click.Abort):
                break
            activity.emit(ActivitySignal.KEY_PRESS)
            try:
                args = shlex.split(line)
            except ValueError as exc:
                click.echo(f"Error: {exc}", err=True)
                continue
            if not args:
                continue
            command = args[0]
            if command in ("exit", "quit"):
                break
            if command == "help":
                click.echo(_SHELL_HELP)
            elif command == "login":
                _prompt_login(app, session)
            elif command == "logout":
                session.sign_out()
                click.echo("Sesión cerrada.")
            elif command == "time":
                _show_time(app, session)
            else:
                _run_command(root_ctx, args)
    finally:
        session.sign_out()
