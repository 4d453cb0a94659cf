"""Command group: transport operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from logicem.commands._base import LogicemGroup, list_options
from logicem.domain.lifecycle import OperationStatus
from logicem.services.campaigns import OperationService

if TYPE_CHECKING:
    from logicem.commands._context import AppContext

_OPERATIONS_EXAMPLES = """\
  logicem operations list --status active
  logicem operations create --name 'Ruta Norte' --origin Bogotá --destination Cúcuta --client 1
  logicem operations update op-1 --destination Envigado
  logicem operations deactivate op-2"""


@click.group(cls=LogicemGroup, examples=_OPERATIONS_EXAMPLES)
@click.pass_obj
def operations(app: AppContext) -> None:
    """List and manage operations (agents have read-only access)."""


@operations.command("list", examples="  logicem operations list --search medellín --client 1")
@list_options("created_at", "name", "status")
@click.option(
    "--status",
    type=click.Choice([s.value for s in OperationStatus]),
    default=None,
    help="Filter by status.",
)
@click.option("--client", "client_id", default=None, help="Filter by client id.")
@click.pass_obj
def list_cmd(
    app: AppContext,
    status: str | None,
    client_id: str | None,
    **opts: Any,
) -> None:
    """List operations."""
    svc = app.service(OperationService)
    app.emit(svc.list_operations(app.list_query(**opts), status=status, client_id=client_id))


def _detail_options(func: Any) -> Any:
    for option in reversed(
        [
            click.option("--client", "client_id", default=None, help="Client id (lists clients)."),
            click.option("--vehicle-type", "vehicle_type_id", default=None, help="Vehicle type id."),
            click.option("--trailer-type", "trailer_type_id", default=None, help="Trailer type id."),
            click.option("--product-type", default=None, help="Preferred product type."),
        ]
    ):
        func = option(func)
    return func


@operations.command(
    examples="  logicem operations create --name 'Ruta Norte' --origin Bogotá --destination Cúcuta"
)
@click.option("--name", required=True, help="Operation name.")
@click.option("--origin", required=True, help="Origin city.")
@click.option("--destination", required=True, help="Destination city.")
@_detail_options
@click.pass_obj
def create(app: AppContext, name: str, origin: str, destination: str, **details: Any) -> None:
    """Create an active operation."""
    app.emit(app.service(OperationService).create_operation(name, origin, destination, **details))


@operations.command(examples="  logicem operations update op-1 --name 'Bogotá - Envigado'")
@click.argument("operation_id")
@click.option("--name", default=None, help="Operation name.")
@click.option("--origin", default=None, help="Origin city.")
@click.option("--destination", default=None, help="Destination city.")
@_detail_options
@click.pass_obj
def update(app: AppContext, operation_id: str, **changes: Any) -> None:
    """Edit an active operation."""
    app.emit(app.service(OperationService).update_operation(operation_id, **changes))


@operations.command(examples="  logicem operations deactivate op-2")
@click.argument("operation_id")
@click.pass_obj
def deactivate(app: AppContext, operation_id: str) -> None:
    """Mark an operation inactive."""
    app.emit(app.service(OperationService).deactivate_operation(operation_id))
