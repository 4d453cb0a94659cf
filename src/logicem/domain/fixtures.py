"""Demo fixtures written to an empty store on first run.

The six demo accounts share ids between ``credentials`` and ``users`` so
user administration and sign-in stay linked.
"""

from __future__ import annotations

import copy
from typing import Any

_EPOCH = "2024-01-01T00:00:00Z"

DEMO_CREDENTIALS: list[dict[str, Any]] = [
    {"id": "demo-admin", "email": "admin@logicem.com", "password": "LogicemAdmin2024!", "role": "admin"},
    {"id": "demo-manager", "email": "manager@logicem.com", "password": "LogicemManager2024!", "role": "manager"},
    {"id": "demo-agent", "email": "agent@logicem.com", "password": "LogicemAgent2024!", "role": "agent"},
    {"id": "demo-agent-2", "email": "carlos@logicem.com", "password": "LogicemAgent2024!", "role": "agent"},
    {"id": "demo-agent-3", "email": "maria@logicem.com", "password": "LogicemAgent2024!", "role": "agent"},
    {"id": "demo-manager-2", "email": "sofia@logicem.com", "password": "LogicemManager2024!", "role": "manager"},
]

DEMO_USERS: list[dict[str, Any]] = [
    {"id": "demo-admin", "name": "Administrador Principal", "email": "admin@logicem.com", "role": "admin", "created_at": _EPOCH},
    {"id": "demo-manager", "name": "Gestor de Campañas", "email": "manager@logicem.com", "role": "manager", "created_at": _EPOCH},
    {"id": "demo-agent", "name": "Agente de Llamadas", "email": "agent@logicem.com", "role": "agent", "created_at": _EPOCH},
    {"id": "demo-agent-2", "name": "Carlos Rodríguez", "email": "carlos@logicem.com", "role": "agent", "created_at": "2024-01-02T00:00:00Z"},
    {"id": "demo-agent-3", "name": "María González", "email": "maria@logicem.com", "role": "agent", "created_at": "2024-01-03T00:00:00Z"},
    {"id": "demo-manager-2", "name": "Sofía Martínez", "email": "sofia@logicem.com", "role": "manager", "created_at": "2024-01-04T00:00:00Z"},
]


def _items(*entries: tuple[str, bool]) -> list[dict[str, Any]]:
    return [
        {"id": str(i), "description": desc, "active": active, "created_at": _EPOCH}
        for i, (desc, active) in enumerate(entries, start=1)
    ]


DEMO_CONFIG_LISTS: dict[str, dict[str, Any]] = {
    "vehicle-types": {
        "title": "Tipos de Vehículo",
        "items": _items(("Tractocamión", True), ("Dobletroque", True), ("Sencillo", False)),
    },
    "trailer-types": {
        "title": "Tipos de Tráiler",
        "items": _items(("Estacas", True), ("Plancha", True), ("Furgón", True)),
    },
    "product-types": {
        "title": "Tipos de Productos Preferidos",
        "items": _items(("Acerero", True), ("Carrocería general", True), ("Construcción", False)),
    },
    "no-interest-reasons": {
        "title": "No Interesado en Logicem",
        "items": _items(
            ("Mala atención", True),
            ("No paga a tiempo", True),
            ("Experiencia negativa anterior", True),
        ),
    },
    "restriction-reasons": {
        "title": "Motivos de Restricción de Cargue",
        "items": _items(
            ("Tiempo de cargue lento", True),
            ("Vía en mal estado", True),
            ("Horarios restringidos", True),
        ),
    },
    "offer-rejection-reasons": {
        "title": "Motivos de No Interés en Ofertas",
        "items": _items(
            ("Flete bajo", True),
            ("No se encuentra cerca", True),
            ("Ya está cargado", True),
            ("Destino no conveniente", False),
        ),
    },
    "clients": {
        "title": "Clientes",
        "items": _items(("Cliente A", True), ("Cliente B", True), ("Cliente C", False)),
    },
}

DEMO_OPERATIONS: list[dict[str, Any]] = [
    {
        "id": "op-1",
        "name": "Transporte Bogotá - Medellín",
        "client_id": "1",
        "vehicle_type_id": "1",
        "trailer_type_id": "1",
        "product_type": "Acerero",
        "origin": "Bogotá",
        "destination": "Medellín",
        "status": "active",
        "created_at": _EPOCH,
        "deactivated_at": None,
        "created_by": "demo-admin",
    },
    {
        "id": "op-2",
        "name": "Carga Cali - Barranquilla",
        "client_id": "2",
        "vehicle_type_id": "2",
        "trailer_type_id": "2",
        "product_type": "Construcción",
        "origin": "Cali",
        "destination": "Barranquilla",
        "status": "active",
        "created_at": "2024-01-02T00:00:00Z",
        "deactivated_at": None,
        "created_by": "demo-admin",
    },
]

DEMO_CAMPAIGNS: list[dict[str, Any]] = [
    {
        "id": "camp-1",
        "operation_id": "op-1",
        "campaign_date": "2024-01-15",
        "status": "pending",
        "created_at": "2024-01-10T00:00:00Z",
        "completed_at": None,
        "closed_at": None,
        "created_by": "demo-admin",
        "vehicles": [
            {
                "id": "camp-1-veh-1",
                "campaign_id": "camp-1",
                "plate": "ABC123",
                "driver_name": "Juan Pérez",
                "driver_phone": "3001234567",
                "status": "sin-gestion",
                "created_at": "2024-01-10T00:00:00Z",
                "updated_at": "2024-01-10T00:00:00Z",
                "created_by": "demo-admin",
            },
            {
                "id": "camp-1-veh-2",
                "campaign_id": "camp-1",
                "plate": "DEF456",
                "driver_name": "María González",
                "driver_phone": "3009876543",
                "status": "interesado",
                "created_at": "2024-01-10T00:00:00Z",
                "updated_at": "2024-01-12T00:00:00Z",
                "created_by": "demo-admin",
            },
        ],
    },
]


def demo_documents() -> dict[str, Any]:
    """Fresh deep copy of every demo document, keyed by store key."""
    return copy.deepcopy(
        {
            "credentials": DEMO_CREDENTIALS,
            "users": DEMO_USERS,
            "config_lists": DEMO_CONFIG_LISTS,
            "operations": DEMO_OPERATIONS,
            "campaigns": DEMO_CAMPAIGNS,
            "tasks": [],
            "call_logs": [],
        }
    )
