"""OperationService and CampaignService — routes, campaigns, and vehicles.

Operations are transport routes; campaigns are dated calling lists of
vehicles for one operation. Every mutation is gated by the
authorization gate: agents may read but never change these records.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from logicem.domain.authorization import Resource
from logicem.domain.lifecycle import (
    CAMPAIGN_TRANSITIONS,
    CampaignStatus,
    OperationStatus,
    VehicleStatus,
    is_valid_transition,
)
from logicem.domain.listing import ListQuery, matches_search, paginate, sort_records
from logicem.domain.records import Campaign, CampaignVehicle, Operation
from logicem.domain.vehicles import VehicleInput, check_vehicles
from logicem.infrastructure.store import CAMPAIGNS, OPERATIONS, StoreError
from logicem.services._helpers import as_rows, load_records, new_id, now_iso, save_records
from logicem.services.base import BaseService, store_failure
from logicem.services.result import ServiceResult, fail

logger = logging.getLogger(__name__)

OPERATION_SEARCH_FIELDS = ("name", "origin", "destination")
SORT_FIELDS = frozenset({"name", "status", "created_at", "campaign_date"})
_EDITABLE_FIELDS = (
    "name",
    "origin",
    "destination",
    "client_id",
    "vehicle_type_id",
    "trailer_type_id",
    "product_type",
)


def campaign_stats(vehicles: Sequence[CampaignVehicle | dict[str, Any]]) -> dict[str, int]:
    """Per-status vehicle counts plus the percentage already handled.

    Examples:
        >>> campaign_stats([])["progress"]
        0
    """
    statuses = [
        str(v.status if isinstance(v, CampaignVehicle) else v.get("status")) for v in vehicles
    ]
    total = len(statuses)
    counts = {
        "sin_gestion": statuses.count(VehicleStatus.SIN_GESTION),
        "gestionado": statuses.count(VehicleStatus.GESTIONADO),
        "interesado": statuses.count(VehicleStatus.INTERESADO),
        "no_interesado": statuses.count(VehicleStatus.NO_INTERESADO),
        "cancelada": statuses.count(VehicleStatus.CANCELADA),
    }
    progress = round((total - counts["sin_gestion"]) / total * 100) if total else 0
    return {
        "total": total,
        **counts,
        "otros": total - sum(counts.values()),
        "progress": progress,
    }


def _not_found(op: str, kind: str, record_id: str) -> ServiceResult:
    return fail(op, "NOT_FOUND", f"{kind} no encontrada: {record_id}", id=record_id)


def _invalid_sort(op: str, field: str) -> ServiceResult:
    return fail(op, "INVALID_SORT", f"Campo de orden no válido: {field}")


class OperationService(BaseService):
    """Create, edit, deactivate, and list operations."""

    def list_operations(
        self,
        query: ListQuery | None = None,
        *,
        status: str | None = None,
        client_id: str | None = None,
    ) -> ServiceResult:
        op = "list_operations"
        denied = self._require_identity(op)
        if denied is not None:
            return denied
        query = self._default_query(query)
        if query.sort_field not in SORT_FIELDS:
            return _invalid_sort(op, query.sort_field)
        try:
            operations = load_records(self._store, OPERATIONS, Operation)
        except StoreError as exc:
            return store_failure(op, exc)

        rows = [
            r
            for r in as_rows(operations)
            if matches_search(r, query.search, OPERATION_SEARCH_FIELDS)
            and (status is None or r["status"] == status)
            and (client_id is None or r["client_id"] == client_id)
        ]
        page = paginate(
            sort_records(rows, query.sort_field, query.direction),
            query.page,
            query.page_size,
        )
        active = sum(1 for o in operations if o.status is OperationStatus.ACTIVE)
        return ServiceResult(
            ok=True,
            op=op,
            data={"items": page.items, "active_count": active},
            meta=page.model_dump(exclude={"items"}),
        )

    def create_operation(
        self,
        name: str,
        origin: str,
        destination: str,
        *,
        client_id: str | None = None,
        vehicle_type_id: str | None = None,
        trailer_type_id: str | None = None,
        product_type: str | None = None,
    ) -> ServiceResult:
        op = "create_operation"
        denied = self._require_mutation(op, Resource.OPERATIONS)
        if denied is not None:
            return denied
        if not name.strip() or not origin.strip() or not destination.strip():
            return fail(op, "MISSING_FIELDS", "Nombre, origen y destino son obligatorios.")

        operation = Operation(
            id=new_id("op"),
            name=name.strip(),
            origin=origin.strip(),
            destination=destination.strip(),
            client_id=client_id or None,
            vehicle_type_id=vehicle_type_id or None,
            trailer_type_id=trailer_type_id or None,
            product_type=product_type or None,
            status=OperationStatus.ACTIVE,
            created_at=now_iso(),
            created_by=self._actor.id,
        )
        try:
            operations = load_records(self._store, OPERATIONS, Operation)
            save_records(self._store, OPERATIONS, [operation, *operations])
        except StoreError as exc:
            return store_failure(op, exc)
        logger.info("Created operation %s", operation.id)
        return ServiceResult(ok=True, op=op, data=operation.model_dump(mode="json"))

    def update_operation(self, operation_id: str, **changes: str | None) -> ServiceResult:
        """Edit descriptive fields. Only active operations can be edited."""
        op = "update_operation"
        denied = self._require_mutation(op, Resource.OPERATIONS)
        if denied is not None:
            return denied

        warnings: list[str] = []
        try:
            operations = load_records(self._store, OPERATIONS, Operation)
            operation = next((o for o in operations if o.id == operation_id), None)
            if operation is None:
                return _not_found(op, "Operación", operation_id)
            if operation.status is not OperationStatus.ACTIVE:
                return fail(
                    op,
                    "OPERATION_INACTIVE",
                    "Solo se pueden editar operaciones activas.",
                    id=operation_id,
                )
            fields_changed: list[str] = []
            for key, value in changes.items():
                if key not in _EDITABLE_FIELDS:
                    warnings.append(f"Cannot change field: {key}")
                    continue
                if value is None:
                    continue
                if key in ("name", "origin", "destination") and not value.strip():
                    return fail(op, "MISSING_FIELDS", f"El campo {key} no puede estar vacío.")
                setattr(operation, key, value.strip() or None)
                fields_changed.append(key)
            if fields_changed:
                save_records(self._store, OPERATIONS, operations)
        except StoreError as exc:
            return store_failure(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data={**operation.model_dump(mode="json"), "fields_changed": fields_changed},
            warnings=warnings,
        )

    def deactivate_operation(self, operation_id: str) -> ServiceResult:
        op = "deactivate_operation"
        denied = self._require_mutation(op, Resource.OPERATIONS)
        if denied is not None:
            return denied
        try:
            operations = load_records(self._store, OPERATIONS, Operation)
            operation = next((o for o in operations if o.id == operation_id), None)
            if operation is None:
                return _not_found(op, "Operación", operation_id)
            if operation.status is not OperationStatus.ACTIVE:
                return fail(
                    op,
                    "OPERATION_INACTIVE",
                    "La operación ya está inactiva.",
                    id=operation_id,
                )
            operation.status = OperationStatus.INACTIVE
            operation.deactivated_at = now_iso()
            save_records(self._store, OPERATIONS, operations)
        except StoreError as exc:
            return store_failure(op, exc)
        logger.info("Deactivated operation %s", operation_id)
        return ServiceResult(ok=True, op=op, data=operation.model_dump(mode="json"))


class CampaignService(BaseService):
    """Create campaigns, move them through their lifecycle, track vehicles."""

    def list_campaigns(
        self,
        query: ListQuery | None = None,
        *,
        status: str | None = None,
    ) -> ServiceResult:
        """List campaigns with their operation name and vehicle stats.

        Search matches the operation name.
        """
        op = "list_campaigns"
        denied = self._require_identity(op)
        if denied is not None:
            return denied
        query = self._default_query(query)
        if query.sort_field not in SORT_FIELDS:
            return _invalid_sort(op, query.sort_field)
        try:
            campaigns = load_records(self._store, CAMPAIGNS, Campaign)
            operations = {o.id: o for o in load_records(self._store, OPERATIONS, Operation)}
        except StoreError as exc:
            return store_failure(op, exc)

        rows: list[dict[str, Any]] = []
        for campaign in campaigns:
            if status is not None and campaign.status != status:
                continue
            operation = operations.get(campaign.operation_id or "")
            row = campaign.model_dump(mode="json", exclude={"vehicles"})
            row["operation_name"] = operation.name if operation else None
            row["name"] = row["operation_name"] or ""
            if not matches_search(row, query.search, ("operation_name",)):
                continue
            row["stats"] = campaign_stats(campaign.vehicles)
            row["progress"] = row["stats"]["progress"]
            rows.append(row)

        page = paginate(
            sort_records(rows, query.sort_field, query.direction),
            query.page,
            query.page_size,
        )
        pending = sum(1 for c in campaigns if c.status is CampaignStatus.PENDING)
        return ServiceResult(
            ok=True,
            op=op,
            data={"items": page.items, "pending_count": pending},
            meta=page.model_dump(exclude={"items"}),
        )

    def get_campaign(self, campaign_id: str) -> ServiceResult:
        op = "get_campaign"
        denied = self._require_identity(op)
        if denied is not None:
            return denied
        try:
            campaigns = load_records(self._store, CAMPAIGNS, Campaign)
        except StoreError as exc:
            return store_failure(op, exc)
        campaign = next((c for c in campaigns if c.id == campaign_id), None)
        if campaign is None:
            return _not_found(op, "Campaña", campaign_id)
        return ServiceResult(
            ok=True,
            op=op,
            data={**campaign.model_dump(mode="json"), "stats": campaign_stats(campaign.vehicles)},
        )

    def create_campaign(
        self,
        operation_id: str,
        campaign_date: str,
        vehicles: Sequence[VehicleInput],
    ) -> ServiceResult:
        """Create a pending campaign; every vehicle starts ``sin-gestion``.

        All vehicle rule violations are reported together.
        """
        op = "create_campaign"
        denied = self._require_mutation(op, Resource.CAMPAIGNS)
        if denied is not None:
            return denied
        if not vehicles:
            return fail(op, "NO_VEHICLES", "Debe agregar al menos un vehículo a la campaña")
        check = check_vehicles(list(vehicles))
        if not check.ok:
            return fail(
                op,
                "INVALID_VEHICLES",
                "\n".join(check.errors),
                errors=check.errors,
            )

        try:
            operations = load_records(self._store, OPERATIONS, Operation)
            operation = next((o for o in operations if o.id == operation_id), None)
            if operation is None:
                return _not_found(op, "Operación", operation_id)
            if operation.status is not OperationStatus.ACTIVE:
                return fail(
                    op,
                    "OPERATION_INACTIVE",
                    "Solo se pueden crear campañas para operaciones activas.",
                    id=operation_id,
                )

            now = now_iso()
            campaign_id = new_id("camp")
            campaign = Campaign(
                id=campaign_id,
                operation_id=operation_id,
                campaign_date=campaign_date,
                status=CampaignStatus.PENDING,
                created_at=now,
                created_by=self._actor.id,
                vehicles=[
                    CampaignVehicle(
                        id=f"{campaign_id}-veh-{index}",
                        campaign_id=campaign_id,
                        plate=v.plate,
                        driver_name=v.driver_name,
                        driver_phone=v.driver_phone,
                        status=VehicleStatus.SIN_GESTION,
                        created_at=now,
                        updated_at=now,
                        created_by=self._actor.id,
                    )
                    for index, v in enumerate(check.vehicles, start=1)
                ],
            )
            campaigns = load_records(self._store, CAMPAIGNS, Campaign)
            save_records(self._store, CAMPAIGNS, [campaign, *campaigns])
        except StoreError as exc:
            return store_failure(op, exc)

        logger.info("Created campaign %s with %d vehicles", campaign_id, len(campaign.vehicles))
        return ServiceResult(
            ok=True,
            op=op,
            data={**campaign.model_dump(mode="json"), "stats": campaign_stats(campaign.vehicles)},
        )

    def set_campaign_status(self, campaign_id: str, status: str) -> ServiceResult:
        """Move a pending campaign to ``completed`` or ``closed``."""
        op = "set_campaign_status"
        denied = self._require_mutation(op, Resource.CAMPAIGNS)
        if denied is not None:
            return denied
        try:
            campaigns = load_records(self._store, CAMPAIGNS, Campaign)
            campaign = next((c for c in campaigns if c.id == campaign_id), None)
            if campaign is None:
                return _not_found(op, "Campaña", campaign_id)
            current = str(campaign.status)
            if not is_valid_transition(current, status, CAMPAIGN_TRANSITIONS):
                allowed = CAMPAIGN_TRANSITIONS.get(current, [])
                return fail(
                    op,
                    "INVALID_TRANSITION",
                    f"Transición no válida: {current} -> {status}. Permitidas: {allowed}",
                    current=current,
                    target=status,
                )
            campaign.status = CampaignStatus(status)
            stamp = now_iso()
            if campaign.status is CampaignStatus.COMPLETED:
                campaign.completed_at = stamp
            else:
                campaign.closed_at = stamp
            save_records(self._store, CAMPAIGNS, campaigns)
        except StoreError as exc:
            return store_failure(op, exc)
        logger.info("Campaign %s -> %s", campaign_id, status)
        return ServiceResult(
            ok=True,
            op=op,
            data=campaign.model_dump(mode="json", exclude={"vehicles"}),
        )

    def set_vehicle_status(self, campaign_id: str, vehicle_id: str, status: str) -> ServiceResult:
        op = "set_vehicle_status"
        denied = self._require_mutation(op, Resource.CAMPAIGNS)
        if denied is not None:
            return denied
        try:
            new_status = VehicleStatus(status)
        except ValueError:
            return fail(
                op,
                "INVALID_STATUS",
                f"Estado de vehículo no válido: {status}",
                allowed=[s.value for s in VehicleStatus],
            )
        try:
            campaigns = load_records(self._store, CAMPAIGNS, Campaign)
            campaign = next((c for c in campaigns if c.id == campaign_id), None)
            if campaign is None:
                return _not_found(op, "Campaña", campaign_id)
            vehicle = next((v for v in campaign.vehicles if v.id == vehicle_id), None)
            if vehicle is None:
                return fail(op, "NOT_FOUND", f"Vehículo no encontrado: {vehicle_id}", id=vehicle_id)
            vehicle.status = new_status
            vehicle.updated_at = now_iso()
            save_records(self._store, CAMPAIGNS, campaigns)
        except StoreError as exc:
            return store_failure(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data={**vehicle.model_dump(mode="json"), "stats": campaign_stats(campaign.vehicles)},
        )
