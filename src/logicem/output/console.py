"""Rich Console factory and theme for logicem output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments (tests,
pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

from logicem.domain.session import CountdownLevel

LOGICEM_THEME = Theme(
    {
        "lgm.ok": "bold green",
        "lgm.error": "bold red",
        "lgm.warning": "bold yellow",
        "lgm.op": "bold cyan",
        "lgm.key": "dim",
        "lgm.id": "bold blue",
        "lgm.title": "bold",
        "lgm.section": "bold magenta",
        "lgm.role.admin": "bold red",
        "lgm.role.manager": "bold blue",
        "lgm.role.agent": "green",
        "lgm.countdown.normal": "green",
        "lgm.countdown.elevated": "bold dark_orange",
        "lgm.countdown.critical": "bold red",
        "lgm.priority.baja": "dim",
        "lgm.priority.media": "",
        "lgm.priority.alta": "yellow",
        "lgm.priority.urgente": "bold red",
        "lgm.status.active": "green",
        "lgm.status.inactive": "dim",
        "lgm.status.pending": "yellow",
        "lgm.status.completed": "green",
        "lgm.status.closed": "dim",
        "lgm.status.pendiente": "yellow",
        "lgm.status.cerrada": "green",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=LOGICEM_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_role(role: str) -> str:
    return f"lgm.role.{role}" if role in ("admin", "manager", "agent") else ""


def style_for_status(status: str) -> str:
    """Theme style for a lifecycle status, or no style when unthemed."""
    name = f"lgm.status.{status}"
    return name if name in LOGICEM_THEME.styles else ""


def style_for_priority(priority: str) -> str:
    name = f"lgm.priority.{priority}"
    return name if name in LOGICEM_THEME.styles else ""


def style_for_countdown(level: CountdownLevel) -> str:
    return f"lgm.countdown.{level.value}"
