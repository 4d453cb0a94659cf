"""View authorization gate — role to menu and mutation permissions.

Pure functions of the role. No store access, no side effects.
Any value that is not a known :class:`Role` is treated as the
least-privileged role before lookup.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel

from logicem.domain.roles import Role, parse_role


class Resource(StrEnum):
    """Record families whose mutation is role-gated."""

    OPERATIONS = "operations"
    CAMPAIGNS = "campaigns"
    TASK_CLOSING = "task-closing"
    USERS = "users"
    CONFIG_LISTS = "config-lists"
    TASKS = "tasks"
    CALL_RESULTS = "call-results"


class MenuItem(BaseModel):
    """A single top-level view entry."""

    model_config = {"frozen": True}

    view_id: str
    label: str


# --- Menu building blocks ---

ADMIN_ITEMS: tuple[MenuItem, ...] = (
    MenuItem(view_id="users", label="Usuarios"),
    MenuItem(view_id="config", label="Configuraciones"),
)

TRANSACTIONAL_ITEMS: tuple[MenuItem, ...] = (
    MenuItem(view_id="campaigns", label="Campañas"),
    MenuItem(view_id="data-update", label="Actualización de Datos"),
    MenuItem(view_id="call-management", label="Gestión de Llamadas"),
    MenuItem(view_id="tasks", label="Tareas"),
)

REPORT_ITEMS: tuple[MenuItem, ...] = (
    MenuItem(view_id="no-answer-report", label="Números que no contestan"),
    MenuItem(view_id="interests-report", label="Detalle de intereses"),
)

AGENT_ITEMS: tuple[MenuItem, ...] = (
    MenuItem(view_id="data-update", label="Actualización de Datos"),
    MenuItem(view_id="call-management", label="Gestión de Llamadas"),
    MenuItem(view_id="tasks", label="Tareas"),
)

# Section order is display order.
ROLE_MENUS: dict[Role, tuple[tuple[str, tuple[MenuItem, ...]], ...]] = {
    Role.ADMIN: (
        ("admin", ADMIN_ITEMS),
        ("transaccional", TRANSACTIONAL_ITEMS),
        ("reportes", REPORT_ITEMS),
    ),
    Role.MANAGER: (
        ("transaccional", TRANSACTIONAL_ITEMS),
        ("reportes", REPORT_ITEMS),
    ),
    Role.AGENT: (("transaccional", AGENT_ITEMS),),
}

# Resources each role may NOT mutate.
READ_ONLY_RESOURCES: dict[Role, frozenset[Resource]] = {
    Role.ADMIN: frozenset(),
    Role.MANAGER: frozenset(),
    Role.AGENT: frozenset({Resource.OPERATIONS, Resource.CAMPAIGNS, Resource.TASK_CLOSING}),
}

VIEW_TITLES: dict[str, str] = {
    "users": "Gestión de Usuarios",
    "config": "Configuraciones",
    "campaigns": "Gestión de Campañas",
    "data-update": "Actualización de Datos",
    "call-management": "Gestión de Llamadas",
    "tasks": "Gestión de Tareas",
    "no-answer-report": "Números que no Contestan",
    "interests-report": "Detalle de Intereses",
}


def menu_for(role: Role | str | None) -> dict[str, list[MenuItem]]:
    """Return the ordered ``{section: [MenuItem, ...]}`` menu for *role*."""
    resolved = parse_role(role)
    return {section: list(items) for section, items in ROLE_MENUS[resolved]}


def visible_views(role: Role | str | None) -> list[str]:
    """Flat list of view ids visible to *role*, in menu order."""
    return [item.view_id for items in menu_for(role).values() for item in items]


def can_view(role: Role | str | None, view_id: str) -> bool:
    """Whether *view_id* appears anywhere in the menu for *role*."""
    return view_id in visible_views(role)


def can_mutate(role: Role | str | None, resource: Resource | str) -> bool:
    """Whether *role* may create, edit, or close records of *resource*.

    An unknown *resource* is never mutable, whatever the role.
    """
    try:
        target = Resource(resource)
    except ValueError:
        return False
    return target not in READ_ONLY_RESOURCES[parse_role(role)]


def view_title(view_id: str) -> str:
    """Header title for a view id (``"Dashboard"`` when unknown)."""
    return VIEW_TITLES.get(view_id, "Dashboard")
