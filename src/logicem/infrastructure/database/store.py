"""SQLite-backed implementation of the key-document store."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.exc import SQLAlchemyError

from logicem.infrastructure.database.engine import init_database
from logicem.infrastructure.database.schema import documents
from logicem.infrastructure.store import StoreError, decode_document, encode_document

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


class SqliteDocumentStore:
    """Key-document store persisted in the ``documents`` table.

    Each call runs in its own short transaction; there is no cross-key
    atomicity.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @classmethod
    def open(cls, data_dir: Path) -> SqliteDocumentStore:
        """Create (if needed) and open the store under *data_dir*."""
        try:
            engine = init_database(data_dir)
        except (OSError, SQLAlchemyError) as exc:
            msg = f"Cannot open store in {data_dir}: {exc}"
            raise StoreError(msg) from exc
        return cls(engine)

    @property
    def engine(self) -> Engine:
        return self._engine

    def get(self, key: str, default: Any = None) -> Any:
        try:
            with self._engine.connect() as conn:
                raw = conn.execute(
                    select(documents.c.value).where(documents.c.key == key)
                ).scalar_one_or_none()
        except SQLAlchemyError as exc:
            msg = f"Cannot read {key!r}: {exc}"
            raise StoreError(msg) from exc
        if raw is None:
            return default
        return decode_document(key, raw)

    def set(self, key: str, value: Any) -> None:
        raw = encode_document(key, value)
        modified = datetime.now(UTC).isoformat()
        stmt = insert(documents).values(key=key, value=raw, modified=modified)
        stmt = stmt.on_conflict_do_update(
            index_elements=[documents.c.key],
            set_={"value": raw, "modified": modified},
        )
        try:
            with self._engine.begin() as conn:
                conn.execute(stmt)
        except SQLAlchemyError as exc:
            msg = f"Cannot write {key!r}: {exc}"
            raise StoreError(msg) from exc
        logger.debug("Stored document %s (%d bytes)", key, len(raw))

    def remove(self, key: str) -> None:
        try:
            with self._engine.begin() as conn:
                conn.execute(delete(documents).where(documents.c.key == key))
        except SQLAlchemyError as exc:
            msg = f"Cannot remove {key!r}: {exc}"
            raise StoreError(msg) from exc

    def keys(self) -> list[str]:
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(select(documents.c.key).order_by(documents.c.key)).fetchall()
        except SQLAlchemyError as exc:
            msg = f"Cannot list keys: {exc}"
            raise StoreError(msg) from exc
        return [str(r.key) for r in rows]

    def close(self) -> None:
        """Dispose of the engine's connection pool."""
        self._engine.dispose()
