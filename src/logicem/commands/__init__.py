"""Click commands for logicem.

Command modules are imported inside register_commands() so that the
root ``--help`` does not pull in every service.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Attach the view groups, then ``init`` and ``shell``, to *cli*."""
    from logicem.commands.auth import auth
    from logicem.commands.calls import calls
    from logicem.commands.campaigns import campaigns
    from logicem.commands.lists import lists
    from logicem.commands.operations import operations
    from logicem.commands.tasks import tasks
    from logicem.commands.users import users

    cli.add_command(auth)
    cli.add_command(users)
    cli.add_command(lists)
    cli.add_command(operations)
    cli.add_command(campaigns)
    cli.add_command(calls)
    cli.add_command(tasks)

    from logicem.commands.init_cmd import init_cmd
    from logicem.commands.shell import shell

    cli.add_command(init_cmd)
    cli.add_command(shell)
