"""Pydantic models for the documents kept in the store.

Each model maps 1:1 to a JSON object inside one of the store keys
(``credentials``, ``users``, ``operations``, ...). Unknown keys are
ignored on read so older documents still load.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from logicem.domain.lifecycle import (
    CampaignStatus,
    OperationStatus,
    TaskPriority,
    TaskStatus,
    VehicleStatus,
)
from logicem.domain.roles import Role


class Identity(BaseModel):
    """The signed-in user, held in process memory only."""

    model_config = {"frozen": True}

    id: str
    email: str
    role: Role


class CredentialRecord(BaseModel):
    """Persisted email/password/role tuple used for sign-in.

    ``role`` is kept as the raw stored value, whatever its JSON type; it
    is parsed into a :class:`Role` only when an :class:`Identity` is built
    from it, so one bad entry never blocks sign-in for the others.
    """

    model_config = {"extra": "ignore"}

    id: str
    email: str
    password: str
    role: Any


class AppUser(BaseModel):
    """User-administration record (display name and role).

    ``role`` is the raw stored value; see :class:`CredentialRecord`.
    """

    model_config = {"extra": "ignore"}

    id: str
    name: str
    email: str
    role: Any
    created_at: str


class ConfigItem(BaseModel):
    """One entry of a configurable lookup list."""

    model_config = {"extra": "ignore"}

    id: str
    description: str
    active: bool = True
    created_at: str
    created_by: str | None = None


class ConfigSection(BaseModel):
    """A titled lookup list (vehicle types, clients, ...)."""

    model_config = {"extra": "ignore"}

    title: str
    items: list[ConfigItem] = Field(default_factory=list)


class Operation(BaseModel):
    """A transport route that campaigns are run for."""

    model_config = {"extra": "ignore"}

    id: str
    name: str
    client_id: str | None = None
    vehicle_type_id: str | None = None
    trailer_type_id: str | None = None
    product_type: str | None = None
    origin: str
    destination: str
    status: OperationStatus = OperationStatus.ACTIVE
    created_at: str
    deactivated_at: str | None = None
    created_by: str | None = None


class CampaignVehicle(BaseModel):
    """A driver/vehicle to be called within a campaign."""

    model_config = {"extra": "ignore"}

    id: str
    campaign_id: str
    plate: str
    driver_name: str
    driver_phone: str
    status: VehicleStatus = VehicleStatus.SIN_GESTION
    created_at: str
    updated_at: str
    created_by: str | None = None


class Campaign(BaseModel):
    """A dated calling campaign for one operation."""

    model_config = {"extra": "ignore"}

    id: str
    operation_id: str | None = None
    campaign_date: str
    status: CampaignStatus = CampaignStatus.PENDING
    created_at: str
    completed_at: str | None = None
    closed_at: str | None = None
    created_by: str | None = None
    vehicles: list[CampaignVehicle] = Field(default_factory=list)


class Task(BaseModel):
    """A back-office ticket raised from a data-update form."""

    model_config = {"extra": "ignore"}

    id: str
    category: str
    priority: TaskPriority = TaskPriority.MEDIA
    status: TaskStatus = TaskStatus.PENDIENTE
    reference_id: str | None = None
    data: dict[str, Any] | None = None
    observations: str | None = None
    created_at: str
    closed_at: str | None = None
    created_by: str
    closed_by: str | None = None


class CallLog(BaseModel):
    """Append-only record of one dialled call."""

    model_config = {"extra": "ignore"}

    vehicle_id: str
    result_type: str
    phone_number: str
    created_at: str
    created_by: str
