"""Shared service-layer helper functions."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from logicem.infrastructure.store import DocumentStore, StoreError

M = TypeVar("M", bound=BaseModel)


def now_iso() -> str:
    """Current UTC time as standard ISO 8601 (for audit stamps)."""
    return datetime.now(UTC).isoformat()


def today_iso() -> str:
    """Today's date as YYYY-MM-DD."""
    return datetime.now(UTC).strftime("%Y-%m-%d")


def new_id(prefix: str) -> str:
    """Random record id such as ``user-3f9a1c2b``."""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def load_records(store: DocumentStore, key: str, model: type[M]) -> list[M]:
    """Read the list under *key* and validate every entry as *model*.

    A missing key is an empty list. Anything that is not a list of
    valid records raises :class:`StoreError`.
    """
    raw = store.get(key, [])
    try:
        return TypeAdapter(list[model]).validate_python(raw)  # type: ignore[valid-type]
    except ValidationError as exc:
        msg = f"Malformed records under {key!r}: {exc.error_count()} error(s)"
        raise StoreError(msg) from exc


def save_records(store: DocumentStore, key: str, records: list[M]) -> None:
    """Write *records* back under *key* as JSON objects."""
    store.set(key, [r.model_dump(mode="json") for r in records])


def as_rows(records: list[M]) -> list[dict[str, Any]]:
    """JSON-ready dicts for listing and output."""
    return [r.model_dump(mode="json") for r in records]
