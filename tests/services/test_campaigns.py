"""Tests for OperationService, CampaignService, and campaign stats."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from logicem.domain.listing import ListQuery
from logicem.domain.vehicles import VehicleInput
from logicem.infrastructure.store import CAMPAIGNS, OPERATIONS, MemoryDocumentStore
from logicem.infrastructure.workspace import Workspace
from logicem.services.campaigns import CampaignService, OperationService, campaign_stats
from logicem.services.session import SessionManager

ServiceFactory = Callable[[str], CampaignService]


@pytest.fixture
def operations_as(
    workspace: Workspace, sign_in_as: Callable[[str], SessionManager]
) -> Callable[[str], OperationService]:
    return lambda role: OperationService(workspace, sign_in_as(role))


@pytest.fixture
def campaigns_as(
    workspace: Workspace, sign_in_as: Callable[[str], SessionManager]
) -> ServiceFactory:
    return lambda role: CampaignService(workspace, sign_in_as(role))


def _vehicles(*plates: str) -> list[VehicleInput]:
    return [VehicleInput(p, f"Conductor {p}", "3001112233") for p in plates]


class TestCampaignStats:
    def test_counts_and_progress(self) -> None:
        stats = campaign_stats(
            [
                {"status": "sin-gestion"},
                {"status": "interesado"},
                {"status": "buzon"},
                {"status": "cancelada"},
            ]
        )
        assert stats == {
            "total": 4,
            "sin_gestion": 1,
            "gestionado": 0,
            "interesado": 1,
            "no_interesado": 0,
            "cancelada": 1,
            "otros": 1,
            "progress": 75,
        }

    def test_empty(self) -> None:
        assert campaign_stats([])["progress"] == 0


class TestOperations:
    def test_agent_can_list(self, operations_as: Callable[[str], OperationService]) -> None:
        result = operations_as("agent").list_operations()
        assert result.ok
        assert result.data["active_count"] == 2
        assert [o["id"] for o in result.data["items"]] == ["op-2", "op-1"]

    def test_agent_cannot_create(self, operations_as: Callable[[str], OperationService]) -> None:
        result = operations_as("agent").create_operation("X", "Cali", "Pasto")
        assert result.error.code == "FORBIDDEN"

    def test_create(
        self,
        operations_as: Callable[[str], OperationService],
        memory_store: MemoryDocumentStore,
    ) -> None:
        result = operations_as("manager").create_operation(
            "Pasto - Quito", "Pasto", "Quito", client_id="2"
        )
        assert result.ok
        assert result.data["status"] == "active"
        assert result.data["created_by"] == "demo-manager"
        assert memory_store.get(OPERATIONS)[0]["id"] == result.data["id"]

    def test_create_missing_fields(self, operations_as: Callable[[str], OperationService]) -> None:
        result = operations_as("admin").create_operation("X", "", "Pasto")
        assert result.error.code == "MISSING_FIELDS"

    def test_search_and_filters(self, operations_as: Callable[[str], OperationService]) -> None:
        svc = operations_as("admin")
        assert [o["id"] for o in svc.list_operations(ListQuery(search="medellín")).data["items"]] == [
            "op-1"
        ]
        assert [o["id"] for o in svc.list_operations(client_id="2").data["items"]] == ["op-2"]
        assert svc.list_operations(status="inactive").data["items"] == []

    def test_update(self, operations_as: Callable[[str], OperationService]) -> None:
        result = operations_as("admin").update_operation("op-1", name="Bogotá - Envigado", bogus="x")
        assert result.data["name"] == "Bogotá - Envigado"
        assert result.data["fields_changed"] == ["name"]
        assert result.warnings == ["Cannot change field: bogus"]

    def test_update_blank_required_field(
        self, operations_as: Callable[[str], OperationService]
    ) -> None:
        result = operations_as("admin").update_operation("op-1", origin="  ")
        assert result.error.code == "MISSING_FIELDS"

    def test_deactivate_then_edit_rejected(
        self, operations_as: Callable[[str], OperationService]
    ) -> None:
        svc = operations_as("admin")
        result = svc.deactivate_operation("op-2")
        assert result.data["status"] == "inactive"
        assert result.data["deactivated_at"] is not None
        assert svc.update_operation("op-2", name="x").error.code == "OPERATION_INACTIVE"
        assert svc.deactivate_operation("op-2").error.code == "OPERATION_INACTIVE"
        assert svc.list_operations().data["active_count"] == 1

    def test_not_found(self, operations_as: Callable[[str], OperationService]) -> None:
        assert operations_as("admin").deactivate_operation("op-9").error.code == "NOT_FOUND"


class TestCampaignListing:
    def test_rows_carry_operation_name_and_stats(self, campaigns_as: ServiceFactory) -> None:
        result = campaigns_as("agent").list_campaigns()
        assert result.ok
        row = result.data["items"][0]
        assert row["operation_name"] == "Transporte Bogotá - Medellín"
        assert row["stats"]["total"] == 2
        assert row["progress"] == 50
        assert "vehicles" not in row
        assert result.data["pending_count"] == 1

    def test_search_on_operation_name(self, campaigns_as: ServiceFactory) -> None:
        svc = campaigns_as("manager")
        assert svc.list_campaigns(ListQuery(search="medellín")).meta["total"] == 1
        assert svc.list_campaigns(ListQuery(search="cali")).meta["total"] == 0

    def test_status_filter(self, campaigns_as: ServiceFactory) -> None:
        assert campaigns_as("manager").list_campaigns(status="closed").data["items"] == []

    def test_get(self, campaigns_as: ServiceFactory) -> None:
        result = campaigns_as("agent").get_campaign("camp-1")
        assert [v["plate"] for v in result.data["vehicles"]] == ["ABC123", "DEF456"]
        assert campaigns_as("agent").get_campaign("nope").error.code == "NOT_FOUND"


class TestCreateCampaign:
    def test_create(self, campaigns_as: ServiceFactory, memory_store: MemoryDocumentStore) -> None:
        result = campaigns_as("manager").create_campaign(
            "op-2", "2024-02-01", _vehicles("GHI789", "JKL012")
        )
        assert result.ok
        campaign_id = result.data["id"]
        assert result.data["status"] == "pending"
        assert [v["id"] for v in result.data["vehicles"]] == [
            f"{campaign_id}-veh-1",
            f"{campaign_id}-veh-2",
        ]
        assert all(v["status"] == "sin-gestion" for v in result.data["vehicles"])
        assert memory_store.get(CAMPAIGNS)[0]["id"] == campaign_id

    def test_agent_forbidden(self, campaigns_as: ServiceFactory) -> None:
        result = campaigns_as("agent").create_campaign("op-1", "2024-02-01", _vehicles("GHI789"))
        assert result.error.code == "FORBIDDEN"

    def test_no_vehicles(self, campaigns_as: ServiceFactory) -> None:
        result = campaigns_as("admin").create_campaign("op-1", "2024-02-01", [])
        assert result.error.code == "NO_VEHICLES"

    def test_invalid_vehicles_report_every_line(
        self, campaigns_as: ServiceFactory, memory_store: MemoryDocumentStore
    ) -> None:
        before = memory_store.get(CAMPAIGNS)
        vehicles = [
            VehicleInput("bad", "Juan", "3001112233"),
            VehicleInput("GHI789", "Ana", "123"),
        ]
        result = campaigns_as("admin").create_campaign("op-1", "2024-02-01", vehicles)
        assert result.error.code == "INVALID_VEHICLES"
        assert len(result.error.detail["errors"]) == 2
        assert memory_store.get(CAMPAIGNS) == before

    def test_inactive_operation(self, campaigns_as: ServiceFactory, workspace: Workspace) -> None:
        svc = campaigns_as("admin")
        OperationService(workspace, svc._session).deactivate_operation("op-1")
        result = svc.create_campaign("op-1", "2024-02-01", _vehicles("GHI789"))
        assert result.error.code == "OPERATION_INACTIVE"

    def test_unknown_operation(self, campaigns_as: ServiceFactory) -> None:
        result = campaigns_as("admin").create_campaign("op-9", "2024-02-01", _vehicles("GHI789"))
        assert result.error.code == "NOT_FOUND"


class TestCampaignStatus:
    def test_complete(self, campaigns_as: ServiceFactory) -> None:
        result = campaigns_as("manager").set_campaign_status("camp-1", "completed")
        assert result.data["status"] == "completed"
        assert result.data["completed_at"] is not None

    def test_closed_is_terminal(self, campaigns_as: ServiceFactory) -> None:
        svc = campaigns_as("manager")
        assert svc.set_campaign_status("camp-1", "closed").data["closed_at"] is not None
        result = svc.set_campaign_status("camp-1", "completed")
        assert result.error.code == "INVALID_TRANSITION"

    def test_agent_forbidden(self, campaigns_as: ServiceFactory) -> None:
        result = campaigns_as("agent").set_campaign_status("camp-1", "closed")
        assert result.error.code == "FORBIDDEN"


class TestVehicleStatus:
    def test_set(self, campaigns_as: ServiceFactory) -> None:
        result = campaigns_as("admin").set_vehicle_status("camp-1", "camp-1-veh-1", "interesado")
        assert result.data["status"] == "interesado"
        assert result.data["stats"]["interesado"] == 2
        assert result.data["stats"]["progress"] == 100

    def test_invalid_status(self, campaigns_as: ServiceFactory) -> None:
        result = campaigns_as("admin").set_vehicle_status("camp-1", "camp-1-veh-1", "happy")
        assert result.error.code == "INVALID_STATUS"

    def test_unknown_vehicle(self, campaigns_as: ServiceFactory) -> None:
        result = campaigns_as("admin").set_vehicle_status("camp-1", "nope", "interesado")
        assert result.error.code == "NOT_FOUND"
