"""ConfigListService — the configurable lookup lists.

The ``config_lists`` document is a mapping of section id to a titled
list of items. Item ids are small integers kept as strings; a new item
takes the next one in its section.
"""

from __future__ import annotations

import logging

from pydantic import TypeAdapter, ValidationError

from logicem.domain.records import ConfigItem, ConfigSection
from logicem.infrastructure.store import CONFIG_LISTS, DocumentStore, StoreError
from logicem.services._helpers import now_iso
from logicem.services.base import BaseService, store_failure
from logicem.services.result import ServiceResult, fail

logger = logging.getLogger(__name__)

CONFIG_VIEW = "config"
UNRESOLVED = "N/A"

SECTION_IDS: tuple[str, ...] = (
    "vehicle-types",
    "trailer-types",
    "product-types",
    "no-interest-reasons",
    "restriction-reasons",
    "offer-rejection-reasons",
    "clients",
)

_SECTIONS = TypeAdapter(dict[str, ConfigSection])


def load_sections(store: DocumentStore) -> dict[str, ConfigSection]:
    """Read and validate the ``config_lists`` document."""
    try:
        return _SECTIONS.validate_python(store.get(CONFIG_LISTS, {}))
    except ValidationError as exc:
        msg = f"Malformed config lists: {exc.error_count()} error(s)"
        raise StoreError(msg) from exc


def resolve(store: DocumentStore, section: str, item_id: str | None) -> str:
    """Description for *item_id* in *section*, ``"N/A"`` when unknown.

    Used by other views to label foreign ids. Never fails: store faults
    also resolve to ``"N/A"``.
    """
    if not item_id:
        return UNRESOLVED
    try:
        sections = load_sections(store)
    except StoreError:
        logger.debug("Cannot resolve %s/%s", section, item_id, exc_info=True)
        return UNRESOLVED
    for item in sections.get(section, ConfigSection(title=section)).items:
        if item.id == item_id:
            return item.description
    return UNRESOLVED


def _next_item_id(items: list[ConfigItem]) -> str:
    numeric = [int(i.id) for i in items if i.id.isdigit()]
    return str(max(numeric, default=0) + 1)


class ConfigListService(BaseService):
    """Lookup-list administration. Every operation requires the ``config`` view."""

    def list_sections(self) -> ServiceResult:
        op = "list_sections"
        denied = self._require_view(op, CONFIG_VIEW)
        if denied is not None:
            return denied
        try:
            sections = load_sections(self._store)
        except StoreError as exc:
            return store_failure(op, exc)
        items = [
            {
                "id": section_id,
                "title": section.title,
                "total": len(section.items),
                "active": sum(1 for i in section.items if i.active),
            }
            for section_id, section in sections.items()
        ]
        return ServiceResult(ok=True, op=op, data={"items": items})

    def list_items(self, section: str, *, active_only: bool = False) -> ServiceResult:
        op = "list_items"
        denied = self._require_view(op, CONFIG_VIEW)
        if denied is not None:
            return denied
        try:
            sections = load_sections(self._store)
        except StoreError as exc:
            return store_failure(op, exc)
        if section not in sections:
            return self._unknown_section(op, section)
        items = [i for i in sections[section].items if i.active or not active_only]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "section": section,
                "title": sections[section].title,
                "items": [i.model_dump(mode="json") for i in items],
            },
        )

    def add_item(self, section: str, description: str) -> ServiceResult:
        op = "add_item"
        denied = self._require_view(op, CONFIG_VIEW)
        if denied is not None:
            return denied
        if not description.strip():
            return fail(op, "EMPTY_DESCRIPTION", "La descripción es requerida")
        try:
            sections = load_sections(self._store)
            if section not in sections:
                return self._unknown_section(op, section)
            items = sections[section].items
            item = ConfigItem(
                id=_next_item_id(items),
                description=description.strip(),
                active=True,
                created_at=now_iso(),
                created_by=self._actor.id,
            )
            items.append(item)
            self._save(sections)
        except StoreError as exc:
            return store_failure(op, exc)
        logger.debug("Added %s item %s", section, item.id)
        return ServiceResult(ok=True, op=op, data={"section": section, **item.model_dump(mode="json")})

    def edit_item(self, section: str, item_id: str, description: str) -> ServiceResult:
        op = "edit_item"
        denied = self._require_view(op, CONFIG_VIEW)
        if denied is not None:
            return denied
        if not description.strip():
            return fail(op, "EMPTY_DESCRIPTION", "La descripción es requerida")
        return self._modify(op, section, item_id, description=description.strip())

    def toggle_item(self, section: str, item_id: str) -> ServiceResult:
        """Flip the ``active`` flag of one item."""
        op = "toggle_item"
        denied = self._require_view(op, CONFIG_VIEW)
        if denied is not None:
            return denied
        return self._modify(op, section, item_id, toggle=True)

    def delete_item(self, section: str, item_id: str) -> ServiceResult:
        op = "delete_item"
        denied = self._require_view(op, CONFIG_VIEW)
        if denied is not None:
            return denied
        try:
            sections = load_sections(self._store)
            if section not in sections:
                return self._unknown_section(op, section)
            items = sections[section].items
            kept = [i for i in items if i.id != item_id]
            if len(kept) == len(items):
                return self._unknown_item(op, section, item_id)
            sections[section].items = kept
            self._save(sections)
        except StoreError as exc:
            return store_failure(op, exc)
        return ServiceResult(ok=True, op=op, data={"section": section, "id": item_id})

    def resolve(self, section: str, item_id: str | None) -> str:
        """See :func:`resolve`; available to every role."""
        return resolve(self._store, section, item_id)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _modify(
        self,
        op: str,
        section: str,
        item_id: str,
        *,
        description: str | None = None,
        toggle: bool = False,
    ) -> ServiceResult:
        try:
            sections = load_sections(self._store)
            if section not in sections:
                return self._unknown_section(op, section)
            item = next((i for i in sections[section].items if i.id == item_id), None)
            if item is None:
                return self._unknown_item(op, section, item_id)
            if description is not None:
                item.description = description
            if toggle:
                item.active = not item.active
            self._save(sections)
        except StoreError as exc:
            return store_failure(op, exc)
        return ServiceResult(ok=True, op=op, data={"section": section, **item.model_dump(mode="json")})

    def _save(self, sections: dict[str, ConfigSection]) -> None:
        self._store.set(
            CONFIG_LISTS,
            {key: section.model_dump(mode="json") for key, section in sections.items()},
        )

    @staticmethod
    def _unknown_section(op: str, section: str) -> ServiceResult:
        return fail(
            op,
            "UNKNOWN_SECTION",
            f"Sección desconocida: {section}",
            section=section,
            known=list(SECTION_IDS),
        )

    @staticmethod
    def _unknown_item(op: str, section: str, item_id: str) -> ServiceResult:
        return fail(op, "NOT_FOUND", f"Item no encontrado: {item_id}", section=section, id=item_id)
