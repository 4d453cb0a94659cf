"""Workspace — the single dependency injected into every service.

The Workspace owns the document store and the plugin manager. It opens
the SQLite store under the configured data directory unless a store is
handed in (tests pass a :class:`MemoryDocumentStore`), and seeds the
demo dataset on first use when ``[store] seed_demo`` is enabled.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from logicem.domain.fixtures import demo_documents
from logicem.infrastructure.store import DocumentStore, seed_store

if TYPE_CHECKING:
    from pathlib import Path

    from logicem.config.settings import LogicemSettings
    from logicem.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class Workspace:
    """Store + plugins for one data directory.

    Raises :class:`~logicem.infrastructure.store.StoreError` from the
    constructor when the store cannot be opened or seeded.
    """

    def __init__(
        self,
        settings: LogicemSettings,
        *,
        store: DocumentStore | None = None,
    ) -> None:
        self._settings = settings
        if store is None:
            from logicem.infrastructure.database.store import SqliteDocumentStore

            store = SqliteDocumentStore.open(settings.data_dir)
        self._store: DocumentStore = store
        self._plugin_manager: PluginManager | None = None
        self.seeded: list[str] = []
        if settings.store.seed_demo:
            self.seeded = seed_store(self._store, demo_documents())

    @property
    def root(self) -> Path:
        """The data directory."""
        return self._settings.data_dir

    @property
    def store(self) -> DocumentStore:
        """The key-document store."""
        return self._store

    @property
    def settings(self) -> LogicemSettings:
        """The resolved settings for this workspace."""
        return self._settings

    @property
    def plugin_manager(self) -> PluginManager | None:
        """The plugin manager (None if not initialized)."""
        return self._plugin_manager

    def init_plugins(self, *, discover: bool = True) -> PluginManager:
        """Create the plugin manager and load entry-point plugins.

        Called by the CLI context when the workspace is first accessed and
        ``[plugins] enabled`` is true. Idempotent.
        """
        if self._plugin_manager is None:
            from logicem.plugins.manager import PluginManager

            pm = PluginManager()
            if discover:
                pm.discover_and_load()
            self._plugin_manager = pm
        return self._plugin_manager

    def close(self) -> None:
        """Release the store's resources, if it holds any."""
        close = getattr(self._store, "close", None)
        if close is not None:
            close()
