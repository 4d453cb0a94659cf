"""Custom Click base classes with --examples support, plus shared options.

LogicemCommand and LogicemGroup accept an ``examples`` parameter. When
``--examples`` is passed, the command prints usage examples and exits.
This keeps ``--help`` concise while making examples available on demand.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import click

F = TypeVar("F", bound=Callable[..., Any])


def _add_examples_option(cmd: click.Command | click.Group, examples: str) -> None:
    """Attach an eager ``--examples`` flag to a Click command or group."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class LogicemCommand(click.Command):
    """Click Command subclass that supports an ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


class LogicemGroup(click.Group):
    """Click Group subclass that supports an ``--examples`` flag.

    Sets ``command_class = LogicemCommand`` so all subcommands automatically
    accept the ``examples`` parameter without explicit ``cls=`` each time.
    """

    command_class = LogicemCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


def list_options(*sort_fields: str) -> Callable[[F], F]:
    """Add ``--search/--sort/--asc/--page/--page-size`` to a list command.

    The wrapped command receives them as keywords; pass them on to
    :meth:`AppContext.list_query`.
    """

    def decorator(func: F) -> F:
        options = [
            click.option("--search", "-s", default="", help="Case-insensitive search."),
            click.option(
                "--sort",
                "sort_field",
                type=click.Choice(sort_fields),
                default="created_at" if "created_at" in sort_fields else sort_fields[0],
                show_default=True,
                help="Sort field.",
            ),
            click.option("--asc", is_flag=True, help="Ascending order (default descending)."),
            click.option("--page", default=1, type=int, show_default=True, help="Page number."),
            click.option("--page-size", default=None, type=click.IntRange(min=1), help="Rows per page."),
        ]
        for option in reversed(options):
            func = option(func)
        return func

    return decorator

