"""UserService — application users and their credentials.

Each user lives in two documents: the ``users`` list (name, role,
created_at) and the ``credentials`` list (email, password, role). Create
and delete touch both; the role is mirrored on update.
"""

from __future__ import annotations

import logging

from logicem.domain.listing import ListQuery, matches_search, paginate, sort_records
from logicem.domain.records import AppUser, CredentialRecord
from logicem.domain.roles import Role, is_known_role
from logicem.infrastructure.store import CREDENTIALS, USERS, StoreError
from logicem.services._helpers import as_rows, load_records, new_id, now_iso, save_records
from logicem.services.base import BaseService, store_failure
from logicem.services.result import ServiceResult, fail

logger = logging.getLogger(__name__)

USERS_VIEW = "users"
MIN_PASSWORD_LENGTH = 8
SEARCH_FIELDS = ("name", "email")
SORT_FIELDS = frozenset({"name", "email", "role", "created_at"})
ROLE_CHOICES: tuple[str, ...] = tuple(r.value for r in Role)


class UserService(BaseService):
    """User administration. Every operation requires the ``users`` view."""

    def list_users(self, query: ListQuery | None = None) -> ServiceResult:
        op = "list_users"
        denied = self._require_view(op, USERS_VIEW)
        if denied is not None:
            return denied
        query = self._default_query(query)
        if query.sort_field not in SORT_FIELDS:
            return fail(op, "INVALID_SORT", f"Campo de orden no válido: {query.sort_field}")
        try:
            users = load_records(self._store, USERS, AppUser)
        except StoreError as exc:
            return store_failure(op, exc)

        rows = [r for r in as_rows(users) if matches_search(r, query.search, SEARCH_FIELDS)]
        page = paginate(
            sort_records(rows, query.sort_field, query.direction),
            query.page,
            query.page_size,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={"items": page.items},
            meta=page.model_dump(exclude={"items"}),
        )

    def create_user(self, name: str, email: str, password: str, role: str) -> ServiceResult:
        """Create the app user (listed first) and its credential (appended)."""
        op = "create_user"
        denied = self._require_view(op, USERS_VIEW)
        if denied is not None:
            return denied
        if not name.strip() or not email.strip() or not password:
            return fail(op, "MISSING_FIELDS", "Nombre, email y contraseña son obligatorios.")
        if not is_known_role(role):
            return fail(op, "INVALID_ROLE", f"Rol no válido: {role}", role=role)

        try:
            users = load_records(self._store, USERS, AppUser)
            credentials = load_records(self._store, CREDENTIALS, CredentialRecord)
            if any(c.email == email for c in credentials) or any(u.email == email for u in users):
                return fail(op, "EMAIL_EXISTS", "Ya existe un usuario con este email.", email=email)

            user_id = new_id("user")
            user = AppUser(
                id=user_id,
                name=name.strip(),
                email=email,
                role=role,
                created_at=now_iso(),
            )
            save_records(self._store, USERS, [user, *users])
            credentials.append(
                CredentialRecord(id=user_id, email=email, password=password, role=role)
            )
            save_records(self._store, CREDENTIALS, credentials)
        except StoreError as exc:
            return store_failure(op, exc)

        logger.info("Created user %s (%s)", user_id, role)
        warnings: list[str] = []
        self._dispatch_event(
            "post_user_create",
            {"user_id": user_id, "email": email, "role": role},
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data=user.model_dump(mode="json"),
            warnings=warnings,
        )

    def update_user(
        self,
        user_id: str,
        *,
        name: str | None = None,
        role: str | None = None,
    ) -> ServiceResult:
        """Change name and/or role. The credential's role follows."""
        op = "update_user"
        denied = self._require_view(op, USERS_VIEW)
        if denied is not None:
            return denied
        if role is not None and not is_known_role(role):
            return fail(op, "INVALID_ROLE", f"Rol no válido: {role}", role=role)

        try:
            users = load_records(self._store, USERS, AppUser)
            user = next((u for u in users if u.id == user_id), None)
            if user is None:
                return fail(op, "NOT_FOUND", f"Usuario no encontrado: {user_id}")

            fields_changed: list[str] = []
            if name is not None and name.strip() and name.strip() != user.name:
                user.name = name.strip()
                fields_changed.append("name")
            if role is not None and role != user.role:
                user.role = role
                fields_changed.append("role")
            if not fields_changed:
                return ServiceResult(
                    ok=True,
                    op=op,
                    data={**user.model_dump(mode="json"), "fields_changed": []},
                )
            save_records(self._store, USERS, users)

            if "role" in fields_changed:
                credentials = load_records(self._store, CREDENTIALS, CredentialRecord)
                for cred in credentials:
                    if cred.id == user_id:
                        cred.role = role or cred.role
                save_records(self._store, CREDENTIALS, credentials)
        except StoreError as exc:
            return store_failure(op, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data={**user.model_dump(mode="json"), "fields_changed": fields_changed},
        )

    def delete_user(self, user_id: str) -> ServiceResult:
        op = "delete_user"
        denied = self._require_view(op, USERS_VIEW)
        if denied is not None:
            return denied
        if user_id == self._actor.id:
            return fail(op, "SELF_DELETE", "No puedes eliminar tu propio usuario.")

        try:
            users = load_records(self._store, USERS, AppUser)
            remaining = [u for u in users if u.id != user_id]
            if len(remaining) == len(users):
                return fail(op, "NOT_FOUND", f"Usuario no encontrado: {user_id}")
            save_records(self._store, USERS, remaining)

            credentials = load_records(self._store, CREDENTIALS, CredentialRecord)
            save_records(
                self._store,
                CREDENTIALS,
                [c for c in credentials if c.id != user_id],
            )
        except StoreError as exc:
            return store_failure(op, exc)

        logger.info("Deleted user %s", user_id)
        return ServiceResult(ok=True, op=op, data={"id": user_id})

    def set_password(self, user_id: str, new_password: str, confirm: str) -> ServiceResult:
        """Apply the form rules, then delegate to the session manager.

        Any role may change its own password; changing someone else's
        requires the ``users`` view.
        """
        op = "set_password"
        if user_id == getattr(self._session.identity, "id", None):
            denied = self._require_identity(op)
        else:
            denied = self._require_view(op, USERS_VIEW)
        if denied is not None:
            return denied
        if new_password != confirm:
            return fail(op, "PASSWORD_MISMATCH", "Las contraseñas no coinciden.")
        if len(new_password) < MIN_PASSWORD_LENGTH:
            return fail(
                op,
                "PASSWORD_TOO_SHORT",
                f"La contraseña debe tener al menos {MIN_PASSWORD_LENGTH} caracteres.",
            )
        result = self._session.change_password(user_id, new_password)
        if result.ok and not result.data.get("updated"):
            return fail(op, "NOT_FOUND", f"Usuario no encontrado: {user_id}")
        return result.as_op(op)