"""BaseService — foundation for the back-office services.

Every service receives the :class:`Workspace` (store + plugins) and the
:class:`SessionManager` holding the signed-in Identity. Permission checks
go through the view authorization gate before any store access.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from logicem.domain.authorization import Resource, can_mutate, can_view, view_title
from logicem.domain.listing import ListQuery
from logicem.domain.session import AuthError
from logicem.services.result import ServiceResult, fail

if TYPE_CHECKING:
    from logicem.domain.records import Identity
    from logicem.infrastructure.store import DocumentStore, StoreError
    from logicem.infrastructure.workspace import Workspace
    from logicem.plugins.manager import PluginManager
    from logicem.services.session import SessionManager

logger = logging.getLogger(__name__)

NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
FORBIDDEN = "FORBIDDEN"


def dispatch_event(
    plugins: PluginManager | None,
    hook_name: str,
    payload: dict[str, Any],
    warnings: list[str],
) -> None:
    """Dispatch a lifecycle event. No-op if no plugin manager is set.

    INVARIANT: Plugin failures are warnings, never errors.
    """
    if plugins is None:
        return
    try:
        plugins.dispatch(hook_name, payload)
    except Exception:
        logger.debug("Event dispatch failed for %s", hook_name, exc_info=True)
        warnings.append(f"Event dispatch failed for {hook_name}")


def store_failure(op: str, exc: StoreError) -> ServiceResult:
    """Convert a store fault into a ``STORE_UNAVAILABLE`` result."""
    logger.warning("Store unavailable during %s: %s", op, exc)
    return fail(op, AuthError.STORE_UNAVAILABLE, "No fue posible acceder al almacenamiento.")


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class TaskService(BaseService):
            def close_task(self, task_id: str, observations: str) -> ServiceResult:
                denied = self._require_mutation("close_task", Resource.TASK_CLOSING)
                if denied is not None:
                    return denied
                ...
    """

    def __init__(self, workspace: Workspace, session: SessionManager) -> None:
        self._workspace = workspace
        self._session = session

    @property
    def _store(self) -> DocumentStore:
        return self._workspace.store

    @property
    def _actor(self) -> Identity:
        """The signed-in Identity. Only valid after a passing guard."""
        identity = self._session.identity
        if identity is None:
            msg = "No signed-in identity"
            raise RuntimeError(msg)
        return identity

    def _default_query(self, query: ListQuery | None) -> ListQuery:
        if query is not None:
            return query
        return ListQuery(page_size=self._workspace.settings.listing.page_size)

    # ------------------------------------------------------------------
    # Guards
    # ------------------------------------------------------------------

    def _require_identity(self, op: str) -> ServiceResult | None:
        if self._session.identity is None:
            return fail(op, NOT_AUTHENTICATED, "Debes iniciar sesión.")
        return None

    def _require_view(self, op: str, view_id: str) -> ServiceResult | None:
        """Fail unless the signed-in role has *view_id* in its menu."""
        denied = self._require_identity(op)
        if denied is not None:
            return denied
        role = self._actor.role
        if not can_view(role, view_id):
            return fail(
                op,
                FORBIDDEN,
                f"No tienes acceso a {view_title(view_id)}.",
                role=str(role),
                view=view_id,
            )
        return None

    def _require_mutation(self, op: str, resource: Resource) -> ServiceResult | None:
        """Fail unless the signed-in role may mutate *resource*."""
        denied = self._require_identity(op)
        if denied is not None:
            return denied
        role = self._actor.role
        if not can_mutate(role, resource):
            return fail(
                op,
                FORBIDDEN,
                "Tu rol no permite modificar este registro.",
                role=str(role),
                resource=str(resource),
            )
        return None

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        dispatch_event(self._workspace.plugin_manager, hook_name, payload, warnings)
