"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from logicem.domain.authorization import MenuItem
from logicem.domain.roles import ROLE_LABELS, parse_role
from logicem.domain.session import countdown_level, format_countdown
from logicem.domain.tasks import CATEGORY_LABELS
from logicem.output.console import (
    create_console,
    get_output,
    style_for_countdown,
    style_for_priority,
    style_for_role,
    style_for_status,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from rich.console import Console

    from logicem.services.result import ServiceResult

# (data key, header, style)
Column = tuple[str, str, str]

# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error_message("Unknown error")
        return f"ERROR: {result.op} [{result.error_code}] — {msg}"

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(str(i["id"]) for i in items if isinstance(i, dict) and "id" in i)

    return f"OK: {result.op}"


def countdown_text(
    seconds: int,
    *,
    warning_seconds: int,
    critical_seconds: int,
) -> Text:
    """The session countdown as ``m:ss`` styled by escalation level."""
    level = countdown_level(
        seconds,
        warning_seconds=warning_seconds,
        critical_seconds=critical_seconds,
    )
    return Text(format_countdown(seconds), style=style_for_countdown(level))


def render_countdown(
    seconds: int,
    *,
    warning_seconds: int,
    critical_seconds: int,
) -> str:
    """Render :func:`countdown_text` to a string (for the shell prompt)."""
    console = create_console()
    console.print(
        Text("Sesión: ", style="lgm.key"),
        countdown_text(
            seconds,
            warning_seconds=warning_seconds,
            critical_seconds=critical_seconds,
        ),
        sep="",
    )
    return get_output(console).rstrip("\n")


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="lgm.ok")
    op = Text(f"  {result.op}", style="lgm.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="lgm.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="lgm.id")
    elif key == "role":
        v = Text(str(value), style=style_for_role(str(value)))
    elif key == "status":
        v = Text(str(value), style=style_for_status(str(value)))
    elif isinstance(value, (dict, list)):
        v = Text(json.dumps(value, ensure_ascii=False, separators=(",", ":")))
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(f"    {k}: {v}")


def _cell(key: str, value: Any) -> Text:
    if value is None:
        return Text("")
    text = str(value)
    if key in ("status",):
        return Text(text, style=style_for_status(text))
    if key == "priority":
        return Text(text, style=style_for_priority(text))
    if key == "role":
        return Text(ROLE_LABELS.get(parse_role(text), text), style=style_for_role(text))
    if key == "category":
        return Text(CATEGORY_LABELS.get(text, text))
    if key.endswith("_at") and len(text) >= 16:
        return Text(text[:16].replace("T", " "), style="dim")
    return Text(text)


def _table(items: list[dict[str, Any]], columns: list[Column]) -> Table:
    """Build a Rich Table from dict rows and a column spec."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    for _key, header, style in columns:
        table.add_column(header, style=style or None, no_wrap=style == "lgm.id")
    for item in items:
        table.add_row(*(_cell(key, item.get(key)) for key, _header, _style in columns))
    return table


def _page_footer(console: Console, result: ServiceResult, count: int) -> None:
    meta = result.meta or {}
    if "total" in meta:
        console.print(
            f"\n{meta['total']} registros · página {meta['page']} de {max(1, meta['total_pages'])}"
        )
    else:
        console.print(f"\n{count} registros")


def _list_renderer(columns: list[Column]) -> Callable[..., None]:
    def render(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
        items = result.data.get("items", [])
        console.print(_table(items, columns))
        _page_footer(console, result, len(items))
        if verbose:
            _render_meta(console, result)

    return render


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="lgm.error")
    op = Text(f"  {result.op}", style="lgm.op")
    sep = Text(" — ")
    console.print(label, op, sep, msg)

    if err and "errors" in err.detail:
        for line in err.detail["errors"]:
            console.print(f"  [lgm.error]•[/lgm.error] {line}")
    elif verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Session renderers ─────────────────────────────────────────────────


def _render_identity(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render sign_in / whoami results."""
    _status_line(console, result)
    identity = result.data.get("identity", {})
    for key in ("id", "email", "role"):
        if key in identity:
            _field(console, key, identity[key])
    remaining = result.data.get("time_remaining")
    if remaining is not None:
        console.print(
            Text("  sesión: ", style="lgm.key"),
            countdown_text(
                int(remaining),
                warning_seconds=int(result.data.get("warning_seconds", 120)),
                critical_seconds=int(result.data.get("critical_seconds", 60)),
            ),
            sep="",
        )
    elif "timeout_seconds" in result.data:
        _field(console, "timeout", format_countdown(int(result.data["timeout_seconds"])))


def _render_menu(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the role menu as titled sections."""
    role = str(result.data.get("role", ""))
    console.print(
        Text(ROLE_LABELS.get(parse_role(role), role), style=style_for_role(role) or "lgm.title")
    )
    for section, items in result.data.get("sections", {}).items():
        console.print(Text(f"\n{section.upper()}", style="lgm.section"))
        for raw in items:
            item = MenuItem.model_validate(raw)
            line = Text("  ")
            line.append(item.label)
            if verbose:
                line.append(f"  ({item.view_id})", style="dim")
            console.print(line)


# ── Mutation renderer ─────────────────────────────────────────────────


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render create/update/close results."""
    _status_line(console, result)
    mutation_keys = (
        "id",
        "section",
        "name",
        "email",
        "role",
        "description",
        "active",
        "category",
        "priority",
        "status",
        "plate",
        "updated",
    )
    for key in mutation_keys:
        if key in result.data:
            _field(console, key, result.data[key])
    if "stats" in result.data:
        stats = result.data["stats"]
        _field(console, "vehicles", f"{stats['total']} ({stats['progress']}% gestionado)")
    if result.data.get("fields_changed"):
        _field(console, "fields_changed", result.data["fields_changed"])
    if verbose:
        _render_meta(console, result)


def _render_campaign(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a single campaign with its vehicle table."""
    _render_mutation(result, console, verbose=verbose)
    for key in ("operation_id", "campaign_date"):
        if key in result.data:
            _field(console, key, result.data[key])
    vehicles = result.data.get("vehicles", [])
    if vehicles:
        console.print()
        console.print(_table(vehicles, _VEHICLE_COLUMNS))


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Column specs & dispatch ───────────────────────────────────────────

_VEHICLE_COLUMNS: list[Column] = [
    ("id", "ID", "lgm.id"),
    ("plate", "Placa", "lgm.title"),
    ("driver_name", "Conductor", ""),
    ("driver_phone", "Celular", ""),
    ("status", "Estado", ""),
]

_OP_RENDERERS: dict[str, Any] = {
    # Session
    "sign_in": _render_identity,
    "whoami": _render_identity,
    "menu": _render_menu,
    # Lists
    "list_users": _list_renderer(
        [
            ("id", "ID", "lgm.id"),
            ("name", "Nombre", "lgm.title"),
            ("email", "Email", ""),
            ("role", "Rol", ""),
            ("created_at", "Creado", ""),
        ]
    ),
    "list_sections": _list_renderer(
        [
            ("id", "Sección", "lgm.id"),
            ("title", "Título", "lgm.title"),
            ("total", "Items", ""),
            ("active", "Activos", ""),
        ]
    ),
    "list_items": _list_renderer(
        [
            ("id", "ID", "lgm.id"),
            ("description", "Descripción", "lgm.title"),
            ("active", "Activo", ""),
            ("created_at", "Creado", ""),
        ]
    ),
    "list_operations": _list_renderer(
        [
            ("id", "ID", "lgm.id"),
            ("name", "Nombre", "lgm.title"),
            ("origin", "Origen", ""),
            ("destination", "Destino", ""),
            ("status", "Estado", ""),
            ("created_at", "Creada", ""),
        ]
    ),
    "list_campaigns": _list_renderer(
        [
            ("id", "ID", "lgm.id"),
            ("operation_name", "Operación", "lgm.title"),
            ("campaign_date", "Fecha", ""),
            ("status", "Estado", ""),
            ("progress", "Progreso %", ""),
        ]
    ),
    "callable_campaigns": _list_renderer(
        [
            ("id", "ID", "lgm.id"),
            ("operation_name", "Operación", "lgm.title"),
            ("campaign_date", "Fecha", ""),
            ("pending", "Pendientes", ""),
        ]
    ),
    "pending_vehicles": _list_renderer(_VEHICLE_COLUMNS),
    "call_log": _list_renderer(
        [
            ("vehicle_id", "Vehículo", "lgm.id"),
            ("result_type", "Resultado", ""),
            ("phone_number", "Celular", ""),
            ("created_by", "Agente", ""),
            ("created_at", "Fecha", ""),
        ]
    ),
    "list_tasks": _list_renderer(
        [
            ("id", "ID", "lgm.id"),
            ("category", "Categoría", ""),
            ("priority", "Prioridad", ""),
            ("status", "Estado", ""),
            ("created_by", "Creada por", ""),
            ("created_at", "Creada", ""),
        ]
    ),
    # Single records
    "get_campaign": _render_campaign,
    "create_campaign": _render_campaign,
    # Mutations
    "create_user": _render_mutation,
    "update_user": _render_mutation,
    "delete_user": _render_mutation,
    "set_password": _render_mutation,
    "change_password": _render_mutation,
    "add_item": _render_mutation,
    "edit_item": _render_mutation,
    "toggle_item": _render_mutation,
    "delete_item": _render_mutation,
    "create_operation": _render_mutation,
    "update_operation": _render_mutation,
    "deactivate_operation": _render_mutation,
    "set_campaign_status": _render_mutation,
    "set_vehicle_status": _render_mutation,
    "record_call": _render_mutation,
    "create_task": _render_mutation,
    "close_task": _render_mutation,
}
