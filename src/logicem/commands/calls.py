"""Command group: call queue and call-result entry."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from logicem.commands._base import LogicemGroup
from logicem.domain.lifecycle import CallResult
from logicem.services.calls import CallService

if TYPE_CHECKING:
    from logicem.commands._context import AppContext

_CALLS_EXAMPLES = """\
  logicem calls campaigns
  logicem calls pending camp-1
  logicem calls record camp-1 camp-1-veh-1 contesta
  logicem calls log --vehicle camp-1-veh-1"""


@click.group(cls=LogicemGroup, examples=_CALLS_EXAMPLES)
@click.pass_obj
def calls(app: AppContext) -> None:
    """Work the call queue."""


@calls.command("campaigns", examples="  logicem calls campaigns")
@click.pass_obj
def campaigns_cmd(app: AppContext) -> None:
    """Pending campaigns of active operations."""
    app.emit(app.service(CallService).callable_campaigns())


@calls.command(examples="  logicem calls pending camp-1")
@click.argument("campaign_id")
@click.pass_obj
def pending(app: AppContext, campaign_id: str) -> None:
    """Vehicles of a campaign that have not been called yet."""
    app.emit(app.service(CallService).pending_vehicles(campaign_id))


@calls.command(examples="  logicem calls record camp-1 camp-1-veh-1 buzon")
@click.argument("campaign_id")
@click.argument("vehicle_id")
@click.argument("result", type=click.Choice([r.value for r in CallResult]))
@click.pass_obj
def record(app: AppContext, campaign_id: str, vehicle_id: str, result: str) -> None:
    """Record the outcome of a call."""
    app.emit(app.service(CallService).record_call(campaign_id, vehicle_id, result))


@calls.command("log", examples="  logicem calls log --vehicle camp-1-veh-1")
@click.option("--vehicle", "vehicle_id", default=None, help="Only calls to this vehicle.")
@click.pass_obj
def log_cmd(app: AppContext, vehicle_id: str | None) -> None:
    """Show logged calls, newest first."""
    app.emit(app.service(CallService).call_log(vehicle_id))
