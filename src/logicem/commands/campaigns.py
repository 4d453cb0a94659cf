"""Command group: calling campaigns and their vehicles."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from logicem.commands._base import LogicemGroup, list_options
from logicem.domain.lifecycle import CampaignStatus, VehicleStatus
from logicem.domain.vehicles import VehicleInput, parse_vehicle_lines
from logicem.services.campaigns import CampaignService

if TYPE_CHECKING:
    from logicem.commands._context import AppContext

_CAMPAIGNS_EXAMPLES = """\
  logicem campaigns list --status pending
  logicem campaigns show camp-1
  logicem campaigns create op-1 --date 2024-02-01 --vehicle 'GHI789,Pedro Gómez,3101234567'
  logicem campaigns create op-1 --date 2024-02-01 --file vehiculos.tsv
  logicem campaigns status camp-1 completed
  logicem campaigns vehicle camp-1 camp-1-veh-1 interesado"""


@click.group(cls=LogicemGroup, examples=_CAMPAIGNS_EXAMPLES)
@click.pass_obj
def campaigns(app: AppContext) -> None:
    """List and manage campaigns (agents have read-only access)."""


@campaigns.command("list", examples="  logicem campaigns list --search bogotá --sort campaign_date")
@list_options("created_at", "campaign_date", "status", "name")
@click.option(
    "--status",
    type=click.Choice([s.value for s in CampaignStatus]),
    default=None,
    help="Filter by status.",
)
@click.pass_obj
def list_cmd(app: AppContext, status: str | None, **opts: Any) -> None:
    """List campaigns with their progress."""
    app.emit(app.service(CampaignService).list_campaigns(app.list_query(**opts), status=status))


@campaigns.command(examples="  logicem campaigns show camp-1")
@click.argument("campaign_id")
@click.pass_obj
def show(app: AppContext, campaign_id: str) -> None:
    """Show a campaign and its vehicles."""
    app.emit(app.service(CampaignService).get_campaign(campaign_id))


def _parse_vehicle_option(value: str) -> VehicleInput:
    parts = [p.strip() for p in value.split(",")]
    parts += [""] * (3 - len(parts))
    return VehicleInput(plate=parts[0], driver_name=parts[1], driver_phone=parts[2])


@campaigns.command(
    examples="""\
  logicem campaigns create op-1 --date 2024-02-01 --vehicle 'GHI789,Pedro Gómez,3101234567'
  cat vehiculos.tsv | logicem campaigns create op-2 --date 2024-02-03 --file -"""
)
@click.argument("operation_id")
@click.option("--date", "campaign_date", required=True, help="Campaign date (YYYY-MM-DD).")
@click.option(
    "--vehicle",
    "vehicle_specs",
    multiple=True,
    help="PLATE,NAME,PHONE (repeatable).",
)
@click.option(
    "--file",
    "vehicle_file",
    type=click.File("r", encoding="utf-8"),
    default=None,
    help="Tab-separated PLATE<TAB>NAME<TAB>PHONE lines ('-' for stdin).",
)
@click.pass_obj
def create(
    app: AppContext,
    operation_id: str,
    campaign_date: str,
    vehicle_specs: tuple[str, ...],
    vehicle_file: Any,
) -> None:
    """Create a pending campaign for an operation."""
    vehicles = [_parse_vehicle_option(spec) for spec in vehicle_specs]
    if vehicle_file is not None:
        vehicles.extend(parse_vehicle_lines(vehicle_file.read()))
    svc = app.service(CampaignService)
    app.emit(svc.create_campaign(operation_id, campaign_date, vehicles))


@campaigns.command(examples="  logicem campaigns status camp-1 closed")
@click.argument("campaign_id")
@click.argument(
    "status",
    type=click.Choice([CampaignStatus.COMPLETED.value, CampaignStatus.CLOSED.value]),
)
@click.pass_obj
def status(app: AppContext, campaign_id: str, status: str) -> None:
    """Complete or close a pending campaign."""
    app.emit(app.service(CampaignService).set_campaign_status(campaign_id, status))


@campaigns.command(examples="  logicem campaigns vehicle camp-1 camp-1-veh-2 cancelada")
@click.argument("campaign_id")
@click.argument("vehicle_id")
@click.argument("status", type=click.Choice([s.value for s in VehicleStatus]))
@click.pass_obj
def vehicle(app: AppContext, campaign_id: str, vehicle_id: str, status: str) -> None:
    """Set the status of one vehicle."""
    svc = app.service(CampaignService)
    app.emit(svc.set_vehicle_status(campaign_id, vehicle_id, status))
