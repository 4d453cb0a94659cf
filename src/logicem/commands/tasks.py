"""Command group: data-update tasks."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from logicem.commands._base import LogicemGroup, list_options
from logicem.domain.lifecycle import TaskStatus
from logicem.domain.tasks import FORM_CATEGORIES
from logicem.services.tasks import TaskService

if TYPE_CHECKING:
    from logicem.commands._context import AppContext

_TASKS_EXAMPLES = """\
  logicem tasks create vehicle-registration -f plate=GHI789 -f driver_name='Pedro Gómez'
  logicem tasks list --status pendiente --sort priority
  logicem tasks close task-0a1b2c3d4e5f --observations 'Vehículo registrado'"""


@click.group(cls=LogicemGroup, examples=_TASKS_EXAMPLES)
@click.pass_obj
def tasks(app: AppContext) -> None:
    """Raise and close data-update tasks."""


def _parse_fields(
    _ctx: click.Context, _param: click.Parameter, values: tuple[str, ...]
) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw in values:
        key, sep, value = raw.partition("=")
        if not sep or not key.strip():
            msg = f"Expected KEY=VALUE, got {raw!r}"
            raise click.BadParameter(msg)
        data[key.strip()] = value
    return data


@tasks.command(
    examples="""\
  logicem tasks create no-answer -f phone=3001234567
  logicem tasks create referrals -f name='Luis Díaz' -f phone=3112223344"""
)
@click.argument("form", type=click.Choice(sorted(FORM_CATEGORIES)))
@click.option(
    "-f",
    "--field",
    "data",
    multiple=True,
    callback=_parse_fields,
    help="Form field as KEY=VALUE (repeatable).",
)
@click.pass_obj
def create(app: AppContext, form: str, data: dict[str, str]) -> None:
    """Submit a data-update form as a new task."""
    app.emit(app.service(TaskService).create_task(form, data))


@tasks.command("list", examples="  logicem tasks list --category referidos --sort priority")
@list_options("created_at", "category", "priority", "status")
@click.option(
    "--status",
    type=click.Choice([s.value for s in TaskStatus]),
    default=None,
    help="Filter by status.",
)
@click.option("--category", default=None, help="Filter by category.")
@click.pass_obj
def list_cmd(app: AppContext, status: str | None, category: str | None, **opts: Any) -> None:
    """List tasks."""
    svc = app.service(TaskService)
    app.emit(svc.list_tasks(app.list_query(**opts), status=status, category=category))


@tasks.command(examples="  logicem tasks close task-0a1b2c3d4e5f -o 'Contactado y actualizado'")
@click.argument("task_id")
@click.option("-o", "--observations", prompt="Observaciones", help="Closing notes (required).")
@click.pass_obj
def close(app: AppContext, task_id: str, observations: str) -> None:
    """Close a pending task."""
    app.emit(app.service(TaskService).close_task(task_id, observations))
