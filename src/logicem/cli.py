"""Root CLI group: global flags, settings resolution, and command registration."""

from __future__ import annotations

import click

from logicem import __version__
from logicem.commands import register_commands
from logicem.commands._context import AppContext
from logicem.config.settings import LogicemSettings

_EPILOG = """\
One-shot commands sign in with --email/--password (or LOGICEM_EMAIL /
LOGICEM_PASSWORD) and sign out on exit. Use 'logicem shell' for a
session that stays open until it is idle for [session] timeout_seconds."""


@click.group(invoke_without_command=True, epilog=_EPILOG)
@click.version_option(version=__version__, prog_name="logicem")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Only ids or a one-line status.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging and result metadata.")
@click.option("--log-json", is_flag=True, help="Log to stderr as JSON lines.")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Use this logicem.toml instead of searching for one.",
)
@click.option("--email", envvar="LOGICEM_EMAIL", show_envvar=True, help="Sign-in email.")
@click.option("--password", envvar="LOGICEM_PASSWORD", show_envvar=True, help="Sign-in password.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    email: str | None,
    password: str | None,
) -> None:
    """logicem — call-center back-office CLI."""
    settings = LogicemSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        email=email,
        password=password,
    )
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
