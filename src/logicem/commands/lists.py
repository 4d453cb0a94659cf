"""Command group: configurable lookup lists (admin only)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from logicem.commands._base import LogicemGroup
from logicem.services.config_lists import SECTION_IDS, ConfigListService
from logicem.services.result import ServiceResult

if TYPE_CHECKING:
    from logicem.commands._context import AppContext

_LISTS_EXAMPLES = """\
  logicem lists sections
  logicem lists show clients --active-only
  logicem lists add vehicle-types 'Cuatro manos'
  logicem lists edit clients 2 'Cliente B S.A.S.'
  logicem lists toggle clients 3
  logicem lists resolve clients 1"""

_SECTION = click.Choice(SECTION_IDS)


@click.group(cls=LogicemGroup, examples=_LISTS_EXAMPLES)
@click.pass_obj
def lists(app: AppContext) -> None:
    """Manage the lookup lists used by operations and forms."""


@lists.command(examples="  logicem lists sections")
@click.pass_obj
def sections(app: AppContext) -> None:
    """List every section with its item counts."""
    app.emit(app.service(ConfigListService).list_sections())


@lists.command(examples="  logicem lists show trailer-types --active-only")
@click.argument("section", type=_SECTION)
@click.option("--active-only", is_flag=True, help="Hide inactive items.")
@click.pass_obj
def show(app: AppContext, section: str, active_only: bool) -> None:
    """List the items of one section."""
    app.emit(app.service(ConfigListService).list_items(section, active_only=active_only))


@lists.command(examples="  logicem lists add product-types 'Granel'")
@click.argument("section", type=_SECTION)
@click.argument("description")
@click.pass_obj
def add(app: AppContext, section: str, description: str) -> None:
    """Add an active item."""
    app.emit(app.service(ConfigListService).add_item(section, description))


@lists.command(examples="  logicem lists edit clients 1 'Cliente A Ltda.'")
@click.argument("section", type=_SECTION)
@click.argument("item_id")
@click.argument("description")
@click.pass_obj
def edit(app: AppContext, section: str, item_id: str, description: str) -> None:
    """Change an item's description."""
    app.emit(app.service(ConfigListService).edit_item(section, item_id, description))


@lists.command(examples="  logicem lists toggle vehicle-types 3")
@click.argument("section", type=_SECTION)
@click.argument("item_id")
@click.pass_obj
def toggle(app: AppContext, section: str, item_id: str) -> None:
    """Activate or deactivate an item."""
    app.emit(app.service(ConfigListService).toggle_item(section, item_id))


@lists.command(examples="  logicem lists delete clients 3")
@click.argument("section", type=_SECTION)
@click.argument("item_id")
@click.pass_obj
def delete(app: AppContext, section: str, item_id: str) -> None:
    """Remove an item."""
    app.emit(app.service(ConfigListService).delete_item(section, item_id))


@lists.command(examples="  logicem lists resolve clients 2")
@click.argument("section", type=_SECTION)
@click.argument("item_id")
@click.pass_obj
def resolve(app: AppContext, section: str, item_id: str) -> None:
    """Print the description of an item id (``N/A`` when unknown)."""
    description = app.service(ConfigListService).resolve(section, item_id)
    app.emit(
        ServiceResult(
            ok=True,
            op="resolve",
            data={"section": section, "id": item_id, "description": description},
        )
    )
