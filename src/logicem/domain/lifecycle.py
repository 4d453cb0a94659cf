"""Status enums and transition maps for back-office records.

Operations, campaigns, campaign vehicles, and tasks each carry a status.
Status values are the Spanish/English literals stored in the documents,
so the enums round-trip through JSON unchanged.
"""

from __future__ import annotations

from enum import StrEnum

# --- Operations ---


class OperationStatus(StrEnum):
    """Lifecycle of a transport operation."""

    ACTIVE = "active"
    INACTIVE = "inactive"


# --- Campaigns ---


class CampaignStatus(StrEnum):
    """Lifecycle of a dated calling campaign."""

    PENDING = "pending"
    COMPLETED = "completed"
    CLOSED = "closed"


class VehicleStatus(StrEnum):
    """Contact state of a vehicle inside a campaign."""

    SIN_GESTION = "sin-gestion"
    GESTIONADO = "gestionado"
    BUZON = "buzon"
    NO_CONDUCTOR = "no-conductor"
    CAMBIO_VEHICULO = "cambio-vehiculo"
    NO_INTERESADO_LOGICEM = "no-interesado-logicem"
    RESTRICCION_CARGUE = "restriccion-cargue"
    NO_INTERESADO = "no-interesado"
    INTERESADO_DESPUES = "interesado-despues"
    INTERESADO = "interesado"
    CANCELADA = "cancelada"


# --- Call results ---


class CallResult(StrEnum):
    """Outcome an agent records after dialling a driver."""

    BUZON = "buzon"
    NO_CONTESTA = "no-contesta"
    CONTESTA = "contesta"


CALL_RESULT_VEHICLE_STATUS: dict[CallResult, VehicleStatus] = {
    CallResult.BUZON: VehicleStatus.BUZON,
    CallResult.NO_CONTESTA: VehicleStatus.NO_CONDUCTOR,
    CallResult.CONTESTA: VehicleStatus.GESTIONADO,
}

# --- Tasks ---


class TaskStatus(StrEnum):
    """Ticket state in the task queue."""

    PENDIENTE = "pendiente"
    CERRADA = "cerrada"


class TaskPriority(StrEnum):
    """Ticket priority, lowest first."""

    BAJA = "baja"
    MEDIA = "media"
    ALTA = "alta"
    URGENTE = "urgente"


PRIORITY_RANK: dict[str, int] = {
    "baja": 1,
    "media": 2,
    "alta": 3,
    "urgente": 4,
}

# --- Transition maps ---

OPERATION_TRANSITIONS: dict[str, list[str]] = {
    "active": ["inactive"],
    "inactive": [],
}

CAMPAIGN_TRANSITIONS: dict[str, list[str]] = {
    "pending": ["completed", "closed"],
    "completed": [],
    "closed": [],
}

TASK_TRANSITIONS: dict[str, list[str]] = {
    "pendiente": ["cerrada"],
    "cerrada": [],
}


def is_valid_transition(
    current: str,
    target: str,
    transitions: dict[str, list[str]],
) -> bool:
    """Check if transitioning from *current* to *target* is allowed."""
    allowed = transitions.get(current, [])
    return target in allowed
