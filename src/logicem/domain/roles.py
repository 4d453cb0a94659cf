"""Roles and role parsing.

Role values arrive from the document store, which holds whatever was last
written to it. Parsing never trusts that data: anything outside the three
known roles collapses to the least-privileged role.
"""

from __future__ import annotations

from enum import StrEnum


class Role(StrEnum):
    """The three back-office roles, most to least privileged."""

    ADMIN = "admin"
    MANAGER = "manager"
    AGENT = "agent"


LEAST_PRIVILEGE = Role.AGENT

ROLE_LABELS: dict[Role, str] = {
    Role.ADMIN: "Administrador",
    Role.MANAGER: "Gestor de Campañas",
    Role.AGENT: "Agente",
}


def is_known_role(value: object) -> bool:
    """Whether *value* is exactly one of the known role strings."""
    return isinstance(value, str) and value in Role._value2member_map_


def parse_role(value: object) -> Role:
    """Map a stored role value to a :class:`Role`.

    Unknown, malformed, or non-string values map to :data:`LEAST_PRIVILEGE`.

    Examples:
        >>> parse_role("admin")
        <Role.ADMIN: 'admin'>
        >>> parse_role("superuser")
        <Role.AGENT: 'agent'>
        >>> parse_role(None)
        <Role.AGENT: 'agent'>
    """
    if is_known_role(value):
        return Role(value)
    return LEAST_PRIVILEGE
