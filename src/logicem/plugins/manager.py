"""Lifecycle plugin loading and hook dispatch.

Plugins are objects with ``@hookimpl`` methods, advertised by installed
distributions under the ``logicem.plugins`` entry-point group. A plugin
that fails to import or register is skipped and logged; it never stops
the CLI from starting.
"""

from __future__ import annotations

import logging
from importlib.metadata import entry_points
from typing import Any

import pluggy

from logicem.plugins.hookspecs import LIFECYCLE_HOOKS, LogicemHookSpec

PROJECT_NAME = "logicem"
ENTRYPOINT_GROUP = "logicem.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Registry of lifecycle plugins over a ``pluggy.PluginManager``."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(LogicemHookSpec)
        self._loaded = False
        self.failed: dict[str, str] = {}

    @property
    def is_loaded(self) -> bool:
        """Whether entry-point discovery has run."""
        return self._loaded

    def discover_and_load(self) -> list[str]:
        """Register every plugin advertised under ``logicem.plugins``.

        Entry points may name a class (instantiated with no arguments) or a
        module/object carrying hook implementations. Returns the names that
        registered; failures are kept in :attr:`failed`.
        """
        loaded: list[str] = []
        for ep in entry_points(group=ENTRYPOINT_GROUP):
            if self._pm.has_plugin(ep.name):
                continue
            try:
                target = ep.load()
                plugin = target() if isinstance(target, type) else target
                self._pm.register(plugin, name=ep.name)
            except Exception as exc:
                self.failed[ep.name] = f"{type(exc).__name__}: {exc}"
                logger.warning("Plugin %s not loaded: %s", ep.name, exc)
                continue
            loaded.append(ep.name)
        self._loaded = True
        logger.debug("Plugins loaded: %s", loaded)
        return loaded

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register *plugin* directly (tests, embedding code)."""
        resolved = name or type(plugin).__name__
        self._pm.register(plugin, name=resolved)
        logger.debug("Registered plugin: %s", resolved)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or type(p).__name__ for p in self._pm.get_plugins()]

    def dispatch(self, hook_name: str, payload: dict[str, Any]) -> None:
        """Call lifecycle hook *hook_name* on every plugin with *payload*.

        Raises ValueError for a name that is not a lifecycle hook.
        Exceptions from plugins propagate; callers turn them into warnings.
        """
        if hook_name not in LIFECYCLE_HOOKS:
            msg = f"Unknown lifecycle hook: {hook_name}"
            raise ValueError(msg)
        getattr(self._pm.hook, hook_name)(**payload)
