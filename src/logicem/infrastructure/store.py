"""Key-document store contract, in-memory implementation, and seeding.

INVARIANT: Every store failure surfaces as :class:`StoreError`.
Services catch it at their boundary and convert it to a
``STORE_UNAVAILABLE`` result; nothing above the service layer sees
SQLAlchemy, OS, or JSON exceptions.

Values are JSON-serialisable documents. Implementations hand out copies,
never live references, so callers cannot mutate stored state by accident.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

# Store keys used by the back-office.
CREDENTIALS = "credentials"
USERS = "users"
CONFIG_LISTS = "config_lists"
OPERATIONS = "operations"
CAMPAIGNS = "campaigns"
TASKS = "tasks"
CALL_LOGS = "call_logs"

ALL_KEYS: tuple[str, ...] = (
    CREDENTIALS,
    USERS,
    CONFIG_LISTS,
    OPERATIONS,
    CAMPAIGNS,
    TASKS,
    CALL_LOGS,
)


class StoreError(Exception):
    """The underlying store could not be read, written, or parsed."""


@runtime_checkable
class DocumentStore(Protocol):
    """Generic key-document store over string keys."""

    def get(self, key: str, default: Any = None) -> Any:
        """Return the document under *key*, or *default* when absent."""
        ...

    def set(self, key: str, value: Any) -> None:
        """Replace the document under *key*."""
        ...

    def remove(self, key: str) -> None:
        """Delete *key*. Removing a missing key is a no-op."""
        ...

    def keys(self) -> list[str]:
        """All keys currently present, sorted."""
        ...


def encode_document(key: str, value: Any) -> str:
    """Serialise *value* to JSON text, raising :class:`StoreError` on failure."""
    try:
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as exc:
        msg = f"Document for {key!r} is not JSON-serialisable: {exc}"
        raise StoreError(msg) from exc


def decode_document(key: str, raw: str) -> Any:
    """Parse stored JSON text, raising :class:`StoreError` when malformed."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        msg = f"Malformed document under {key!r}: {exc}"
        raise StoreError(msg) from exc


class MemoryDocumentStore:
    """Dict-backed store; documents are kept as JSON text like on disk."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str, default: Any = None) -> Any:
        raw = self._data.get(key)
        if raw is None:
            return default
        return decode_document(key, raw)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = encode_document(key, value)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)

    def put_raw(self, key: str, raw: str) -> None:
        """Store *raw* text verbatim (lets tests plant corrupt documents)."""
        self._data[key] = raw


def seed_store(store: DocumentStore, documents: dict[str, Any]) -> list[str]:
    """Write each of *documents* whose key is absent from *store*.

    Existing keys are never overwritten. Returns the keys that were seeded.
    """
    present = set(store.keys())
    seeded: list[str] = []
    for key, value in documents.items():
        if key in present:
            continue
        store.set(key, value)
        seeded.append(key)
    if seeded:
        logger.debug("Seeded store keys: %s", ", ".join(seeded))
    return seeded
