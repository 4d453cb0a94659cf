"""Tests for UserService — user administration and password rules."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from logicem.domain.listing import ListQuery, SortDirection
from logicem.infrastructure.store import CREDENTIALS, USERS, MemoryDocumentStore
from logicem.infrastructure.workspace import Workspace
from logicem.services.session import SessionManager
from logicem.services.users import UserService


@pytest.fixture
def admin_users(workspace: Workspace, sign_in_as: Callable[[str], SessionManager]) -> UserService:
    return UserService(workspace, sign_in_as("admin"))


class TestAccess:
    def test_anonymous_rejected(self, workspace: Workspace, session: SessionManager) -> None:
        result = UserService(workspace, session).list_users()
        assert result.error.code == "NOT_AUTHENTICATED"

    @pytest.mark.parametrize("role", ["manager", "agent"])
    def test_non_admin_forbidden(
        self,
        workspace: Workspace,
        sign_in_as: Callable[[str], SessionManager],
        role: str,
    ) -> None:
        svc = UserService(workspace, sign_in_as(role))
        result = svc.create_user("X", "x@logicem.com", "password1", "agent")
        assert result.error.code == "FORBIDDEN"
        assert result.error.message == "No tienes acceso a Gestión de Usuarios."

    def test_forbidden_writes_nothing(
        self,
        workspace: Workspace,
        memory_store: MemoryDocumentStore,
        sign_in_as: Callable[[str], SessionManager],
    ) -> None:
        before = memory_store.get(USERS)
        UserService(workspace, sign_in_as("manager")).delete_user("demo-agent")
        assert memory_store.get(USERS) == before


class TestListUsers:
    def test_default_sort_newest_first(self, admin_users: UserService) -> None:
        result = admin_users.list_users()
        assert result.ok
        ids = [u["id"] for u in result.data["items"]]
        assert ids[0] == "demo-manager-2"
        assert result.meta["total"] == 6

    def test_search_name_or_email(self, admin_users: UserService) -> None:
        result = admin_users.list_users(ListQuery(search="GONZÁLEZ"))
        assert [u["id"] for u in result.data["items"]] == ["demo-agent-3"]
        result = admin_users.list_users(ListQuery(search="carlos@"))
        assert [u["id"] for u in result.data["items"]] == ["demo-agent-2"]

    def test_sort_by_name_ascending(self, admin_users: UserService) -> None:
        result = admin_users.list_users(ListQuery(sort_field="name", direction=SortDirection.ASC))
        names = [u["name"] for u in result.data["items"]]
        assert names == sorted(names, key=str.lower)

    def test_pagination(self, admin_users: UserService) -> None:
        result = admin_users.list_users(ListQuery(page=2, page_size=4))
        assert len(result.data["items"]) == 2
        assert result.meta["total_pages"] == 2

    def test_invalid_sort(self, admin_users: UserService) -> None:
        result = admin_users.list_users(ListQuery(sort_field="password"))
        assert result.error.code == "INVALID_SORT"

    def test_rows_never_carry_passwords(self, admin_users: UserService) -> None:
        for row in admin_users.list_users().data["items"]:
            assert "password" not in row


class TestCreateUser:
    def test_creates_user_and_credential(
        self, admin_users: UserService, memory_store: MemoryDocumentStore
    ) -> None:
        result = admin_users.create_user("Laura Ruiz", "laura@logicem.com", "Clave2024!", "manager")
        assert result.ok
        user_id = result.data["id"]
        assert user_id.startswith("user-")
        assert memory_store.get(USERS)[0]["id"] == user_id
        cred = memory_store.get(CREDENTIALS)[-1]
        assert cred == {
            "id": user_id,
            "email": "laura@logicem.com",
            "password": "Clave2024!",
            "role": "manager",
        }
        assert "password" not in result.data

    def test_new_user_can_sign_in(
        self, admin_users: UserService, memory_store: MemoryDocumentStore
    ) -> None:
        admin_users.create_user("Laura", "laura@logicem.com", "Clave2024!", "agent")
        other = SessionManager(memory_store)
        assert other.sign_in("laura@logicem.com", "Clave2024!").ok

    def test_duplicate_email(self, admin_users: UserService) -> None:
        result = admin_users.create_user("Dup", "agent@logicem.com", "Clave2024!", "agent")
        assert result.error.code == "EMAIL_EXISTS"

    def test_missing_fields(self, admin_users: UserService) -> None:
        result = admin_users.create_user("  ", "x@logicem.com", "Clave2024!", "agent")
        assert result.error.code == "MISSING_FIELDS"

    def test_invalid_role(self, admin_users: UserService) -> None:
        result = admin_users.create_user("X", "x@logicem.com", "Clave2024!", "root")
        assert result.error.code == "INVALID_ROLE"

    def test_hook_fires(self, admin_users: UserService, recorder: object) -> None:
        result = admin_users.create_user("X", "x@logicem.com", "Clave2024!", "agent")
        assert recorder.calls == [
            (
                "post_user_create",
                {"user_id": result.data["id"], "email": "x@logicem.com", "role": "agent"},
            )
        ]


class TestUpdateUser:
    def test_role_change_mirrors_credential(
        self, admin_users: UserService, memory_store: MemoryDocumentStore
    ) -> None:
        result = admin_users.update_user("demo-agent-2", role="manager")
        assert result.data["fields_changed"] == ["role"]
        cred = next(c for c in memory_store.get(CREDENTIALS) if c["id"] == "demo-agent-2")
        assert cred["role"] == "manager"

    def test_name_change(self, admin_users: UserService) -> None:
        result = admin_users.update_user("demo-agent-2", name="Carlos R.")
        assert result.data["name"] == "Carlos R."
        assert result.data["fields_changed"] == ["name"]

    def test_no_changes(self, admin_users: UserService) -> None:
        result = admin_users.update_user("demo-agent-2", name="Carlos Rodríguez")
        assert result.ok
        assert result.data["fields_changed"] == []

    def test_not_found(self, admin_users: UserService) -> None:
        assert admin_users.update_user("ghost", name="x").error.code == "NOT_FOUND"

    def test_invalid_role(self, admin_users: UserService) -> None:
        assert admin_users.update_user("demo-agent", role="boss").error.code == "INVALID_ROLE"


class TestDeleteUser:
    def test_removes_user_and_credential(
        self, admin_users: UserService, memory_store: MemoryDocumentStore
    ) -> None:
        result = admin_users.delete_user("demo-agent-3")
        assert result.ok
        assert all(u["id"] != "demo-agent-3" for u in memory_store.get(USERS))
        assert all(c["id"] != "demo-agent-3" for c in memory_store.get(CREDENTIALS))

    def test_cannot_delete_self(self, admin_users: UserService) -> None:
        assert admin_users.delete_user("demo-admin").error.code == "SELF_DELETE"

    def test_not_found(self, admin_users: UserService) -> None:
        assert admin_users.delete_user("ghost").error.code == "NOT_FOUND"


class TestSetPassword:
    def test_own_password_any_role(
        self,
        workspace: Workspace,
        memory_store: MemoryDocumentStore,
        sign_in_as: Callable[[str], SessionManager],
    ) -> None:
        svc = UserService(workspace, sign_in_as("agent"))
        result = svc.set_password("demo-agent", "NuevaClave1", "NuevaClave1")
        assert result.ok
        assert result.op == "set_password"
        assert SessionManager(memory_store).sign_in("agent@logicem.com", "NuevaClave1").ok

    def test_agent_cannot_change_others(
        self, workspace: Workspace, sign_in_as: Callable[[str], SessionManager]
    ) -> None:
        svc = UserService(workspace, sign_in_as("agent"))
        result = svc.set_password("demo-admin", "NuevaClave1", "NuevaClave1")
        assert result.error.code == "FORBIDDEN"

    def test_admin_changes_others(self, admin_users: UserService) -> None:
        assert admin_users.set_password("demo-agent", "NuevaClave1", "NuevaClave1").ok

    def test_mismatch(self, admin_users: UserService) -> None:
        result = admin_users.set_password("demo-admin", "NuevaClave1", "NuevaClave2")
        assert result.error.code == "PASSWORD_MISMATCH"

    def test_too_short(self, admin_users: UserService) -> None:
        result = admin_users.set_password("demo-admin", "corta", "corta")
        assert result.error.code == "PASSWORD_TOO_SHORT"

    def test_unknown_user(self, admin_users: UserService) -> None:
        result = admin_users.set_password("ghost", "NuevaClave1", "NuevaClave1")
        assert result.error.code == "NOT_FOUND"

    def test_anonymous(self, workspace: Workspace, session: SessionManager) -> None:
        result = UserService(workspace, session).set_password("demo-agent", "x" * 8, "x" * 8)
        assert result.error.code == "NOT_AUTHENTICATED"


class TestStoreFailure:
    def test_corrupt_users_document(
        self, admin_users: UserService, memory_store: MemoryDocumentStore
    ) -> None:
        memory_store.put_raw(USERS, "[{")
        result = admin_users.list_users()
        assert result.error.code == "STORE_UNAVAILABLE"
