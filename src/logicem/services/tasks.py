"""TaskService — tickets raised from the data-update forms.

Any role may raise a task; closing one is gated by the authorization
gate and requires written observations.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from logicem.domain.authorization import Resource
from logicem.domain.lifecycle import TaskStatus
from logicem.domain.listing import ListQuery, matches_search, paginate, sort_records
from logicem.domain.records import Task
from logicem.domain.tasks import FORM_CATEGORIES, category_for_form, priority_for_category
from logicem.infrastructure.store import TASKS, StoreError
from logicem.services._helpers import as_rows, load_records, new_id, now_iso, save_records
from logicem.services.base import BaseService, store_failure
from logicem.services.result import ServiceResult, fail

logger = logging.getLogger(__name__)

SORT_FIELDS = frozenset({"category", "priority", "status", "created_at"})


def _search_row(row: dict[str, Any]) -> dict[str, Any]:
    """Add a ``data_text`` field so search also reaches the form payload."""
    data = row.get("data")
    text = json.dumps(data, ensure_ascii=False) if data else ""
    return {**row, "data_text": text}


class TaskService(BaseService):
    """Create, list, and close tasks."""

    def create_task(self, form: str, data: dict[str, Any]) -> ServiceResult:
        """Raise a ``pendiente`` task from a submitted form.

        Unmapped form ids become the category verbatim with a warning.
        """
        op = "create_task"
        denied = self._require_identity(op)
        if denied is not None:
            return denied

        warnings: list[str] = []
        if form not in FORM_CATEGORIES:
            warnings.append(f"Unknown form {form!r}; used as category")
        category = category_for_form(form)
        task = Task(
            id=new_id("task"),
            category=category,
            priority=priority_for_category(category),
            status=TaskStatus.PENDIENTE,
            data=data or None,
            created_at=now_iso(),
            created_by=self._actor.id,
        )
        try:
            tasks = load_records(self._store, TASKS, Task)
            save_records(self._store, TASKS, [task, *tasks])
        except StoreError as exc:
            return store_failure(op, exc)
        logger.info("Created task %s (%s)", task.id, category)
        return ServiceResult(ok=True, op=op, data=task.model_dump(mode="json"), warnings=warnings)

    def list_tasks(
        self,
        query: ListQuery | None = None,
        *,
        status: str | None = None,
        category: str | None = None,
    ) -> ServiceResult:
        op = "list_tasks"
        denied = self._require_identity(op)
        if denied is not None:
            return denied
        query = self._default_query(query)
        if query.sort_field not in SORT_FIELDS:
            return fail(op, "INVALID_SORT", f"Campo de orden no válido: {query.sort_field}")
        try:
            tasks = load_records(self._store, TASKS, Task)
        except StoreError as exc:
            return store_failure(op, exc)

        rows = [
            r
            for r in as_rows(tasks)
            if (status is None or r["status"] == status)
            and (category is None or r["category"] == category)
            and matches_search(_search_row(r), query.search, ("id", "category", "data_text"))
        ]
        page = paginate(
            sort_records(rows, query.sort_field, query.direction),
            query.page,
            query.page_size,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "items": page.items,
                "pending_count": sum(1 for t in tasks if t.status is TaskStatus.PENDIENTE),
                "categories": sorted({t.category for t in tasks}),
            },
            meta=page.model_dump(exclude={"items"}),
        )

    def close_task(self, task_id: str, observations: str) -> ServiceResult:
        op = "close_task"
        denied = self._require_mutation(op, Resource.TASK_CLOSING)
        if denied is not None:
            return denied
        if not observations.strip():
            return fail(
                op,
                "OBSERVATIONS_REQUIRED",
                "Las observaciones son obligatorias para cerrar la tarea",
            )
        try:
            tasks = load_records(self._store, TASKS, Task)
            task = next((t for t in tasks if t.id == task_id), None)
            if task is None:
                return fail(op, "NOT_FOUND", f"Tarea no encontrada: {task_id}", id=task_id)
            if task.status is TaskStatus.CERRADA:
                return fail(op, "ALREADY_CLOSED", "La tarea ya está cerrada.", id=task_id)
            task.status = TaskStatus.CERRADA
            task.observations = observations.strip()
            task.closed_at = now_iso()
            task.closed_by = self._actor.id
            save_records(self._store, TASKS, tasks)
        except StoreError as exc:
            return store_failure(op, exc)

        logger.info("Closed task %s", task_id)
        warnings: list[str] = []
        self._dispatch_event(
            "post_task_close",
            {"task_id": task_id, "closed_by": task.closed_by},
            warnings,
        )
        return ServiceResult(ok=True, op=op, data=task.model_dump(mode="json"), warnings=warnings)
