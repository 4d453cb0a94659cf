"""SQLite engine for the document store.

One file per data directory: ``{data_dir}/.logicem/logicem.db``. An
interactive shell and one-shot commands may share it, so every
connection runs in WAL mode with a busy timeout instead of failing on a
locked database. Writes are last-writer-wins per key.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, Engine

from logicem.infrastructure.database.schema import metadata

DATA_DIRNAME = ".logicem"
DB_FILENAME = "logicem.db"
BUSY_TIMEOUT_MS = 5000


def database_path(data_dir: Path) -> Path:
    return data_dir / DATA_DIRNAME / DB_FILENAME


def create_db_engine(db_path: Path) -> Engine:
    """Engine whose connections use WAL and wait on locks."""
    engine = create_engine(URL.create("sqlite", database=str(db_path)))

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_conn: Any, _record: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute(f"PRAGMA busy_timeout={BUSY_TIMEOUT_MS}")
        cursor.close()

    return engine


def init_database(data_dir: Path) -> Engine:
    """Create ``.logicem/`` and the ``documents`` table if missing.

    Safe to call on a data directory that already has a store.
    """
    db_path = database_path(data_dir)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_db_engine(db_path)
    metadata.create_all(engine)
    return engine
