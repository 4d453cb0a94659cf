"""CallService — the agent's dial queue and call-result entry.

Open to every signed-in role. A call can only be recorded against a
vehicle of a pending campaign whose operation is still active.
"""

from __future__ import annotations

import logging

from logicem.domain.lifecycle import (
    CALL_RESULT_VEHICLE_STATUS,
    CallResult,
    CampaignStatus,
    OperationStatus,
    VehicleStatus,
)
from logicem.domain.records import CallLog, Campaign, Operation
from logicem.infrastructure.store import CALL_LOGS, CAMPAIGNS, OPERATIONS, StoreError
from logicem.services._helpers import load_records, now_iso, save_records
from logicem.services.base import BaseService, store_failure
from logicem.services.result import ServiceResult, fail

logger = logging.getLogger(__name__)


class CallService(BaseService):
    """Pending-vehicle queue and call logging."""

    def callable_campaigns(self) -> ServiceResult:
        """Pending campaigns of active operations, with their queue sizes."""
        op = "callable_campaigns"
        denied = self._require_identity(op)
        if denied is not None:
            return denied
        try:
            campaigns, operations = self._load()
        except StoreError as exc:
            return store_failure(op, exc)
        items = [
            {
                "id": c.id,
                "operation_id": c.operation_id,
                "operation_name": operations[c.operation_id or ""].name,
                "campaign_date": c.campaign_date,
                "pending": sum(1 for v in c.vehicles if v.status is VehicleStatus.SIN_GESTION),
            }
            for c in campaigns
            if self._is_callable(c, operations)
        ]
        return ServiceResult(ok=True, op=op, data={"items": items})

    def pending_vehicles(self, campaign_id: str) -> ServiceResult:
        """Vehicles still ``sin-gestion`` in a callable campaign."""
        op = "pending_vehicles"
        denied = self._require_identity(op)
        if denied is not None:
            return denied
        try:
            campaigns, operations = self._load()
        except StoreError as exc:
            return store_failure(op, exc)
        campaign = next((c for c in campaigns if c.id == campaign_id), None)
        if campaign is None:
            return fail(op, "NOT_FOUND", f"Campaña no encontrada: {campaign_id}", id=campaign_id)
        if not self._is_callable(campaign, operations):
            return fail(
                op,
                "CAMPAIGN_NOT_CALLABLE",
                "La campaña no está pendiente o su operación está inactiva.",
                id=campaign_id,
            )
        vehicles = [
            v.model_dump(mode="json")
            for v in campaign.vehicles
            if v.status is VehicleStatus.SIN_GESTION
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data={"campaign_id": campaign_id, "items": vehicles},
        )

    def record_call(self, campaign_id: str, vehicle_id: str, result: str) -> ServiceResult:
        """Set the vehicle status from the call *result* and log the call."""
        op = "record_call"
        denied = self._require_identity(op)
        if denied is not None:
            return denied
        try:
            call_result = CallResult(result)
        except ValueError:
            return fail(
                op,
                "INVALID_RESULT",
                f"Resultado de llamada no válido: {result}",
                allowed=[r.value for r in CallResult],
            )

        try:
            campaigns, operations = self._load()
            campaign = next((c for c in campaigns if c.id == campaign_id), None)
            if campaign is None:
                return fail(op, "NOT_FOUND", f"Campaña no encontrada: {campaign_id}", id=campaign_id)
            if not self._is_callable(campaign, operations):
                return fail(
                    op,
                    "CAMPAIGN_NOT_CALLABLE",
                    "La campaña no está pendiente o su operación está inactiva.",
                    id=campaign_id,
                )
            vehicle = next((v for v in campaign.vehicles if v.id == vehicle_id), None)
            if vehicle is None:
                return fail(op, "NOT_FOUND", f"Vehículo no encontrado: {vehicle_id}", id=vehicle_id)

            now = now_iso()
            vehicle.status = CALL_RESULT_VEHICLE_STATUS[call_result]
            vehicle.updated_at = now
            save_records(self._store, CAMPAIGNS, campaigns)

            log = CallLog(
                vehicle_id=vehicle.id,
                result_type=call_result.value,
                phone_number=vehicle.driver_phone,
                created_at=now,
                created_by=self._actor.id,
            )
            logs = load_records(self._store, CALL_LOGS, CallLog)
            logs.append(log)
            save_records(self._store, CALL_LOGS, logs)
        except StoreError as exc:
            return store_failure(op, exc)

        logger.debug("Call %s on %s -> %s", call_result, vehicle_id, vehicle.status)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "vehicle_id": vehicle.id,
                "plate": vehicle.plate,
                "status": str(vehicle.status),
                "call_log": log.model_dump(mode="json"),
            },
        )

    def call_log(self, vehicle_id: str | None = None) -> ServiceResult:
        """Logged calls, newest first, optionally for one vehicle."""
        op = "call_log"
        denied = self._require_identity(op)
        if denied is not None:
            return denied
        try:
            logs = load_records(self._store, CALL_LOGS, CallLog)
        except StoreError as exc:
            return store_failure(op, exc)
        items = [
            entry.model_dump(mode="json")
            for entry in reversed(logs)
            if vehicle_id is None or entry.vehicle_id == vehicle_id
        ]
        return ServiceResult(ok=True, op=op, data={"items": items})

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _load(self) -> tuple[list[Campaign], dict[str, Operation]]:
        campaigns = load_records(self._store, CAMPAIGNS, Campaign)
        operations = {o.id: o for o in load_records(self._store, OPERATIONS, Operation)}
        return campaigns, operations

    @staticmethod
    def _is_callable(campaign: Campaign, operations: dict[str, Operation]) -> bool:
        operation = operations.get(campaign.operation_id or "")
        return (
            campaign.status is CampaignStatus.PENDING
            and operation is not None
            and operation.status is OperationStatus.ACTIVE
        )
