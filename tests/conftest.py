"""Shared pytest fixtures and test doubles for logicem tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from logicem.config.settings import LogicemSettings
from logicem.domain.fixtures import demo_documents
from logicem.infrastructure.activity import ActivityHub
from logicem.infrastructure.store import MemoryDocumentStore
from logicem.infrastructure.workspace import Workspace
from logicem.plugins.hookspecs import hookimpl
from logicem.services.session import SessionManager

DEMO_LOGINS: dict[str, tuple[str, str]] = {
    "admin": ("admin@logicem.com", "LogicemAdmin2024!"),
    "manager": ("manager@logicem.com", "LogicemManager2024!"),
    "agent": ("agent@logicem.com", "LogicemAgent2024!"),
}


# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ManualTicker:
    """Ticker that fires only when the test calls :meth:`fire`."""

    def __init__(self) -> None:
        self.callback: Callable[[], None] | None = None
        self.starts = 0
        self.stops = 0

    @property
    def running(self) -> bool:
        return self.callback is not None

    def start(self, callback: Callable[[], None]) -> None:
        self.callback = callback
        self.starts += 1

    def stop(self) -> None:
        self.callback = None
        self.stops += 1

    def fire(self) -> None:
        if self.callback is not None:
            self.callback()


class RecordingPlugin:
    """Collects every lifecycle hook call as ``(hook, kwargs)``."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    @hookimpl
    def post_sign_in(self, user_id: str, email: str, role: str) -> None:
        self.calls.append(("post_sign_in", {"user_id": user_id, "email": email, "role": role}))

    @hookimpl
    def post_sign_out(self, user_id: str, email: str) -> None:
        self.calls.append(("post_sign_out", {"user_id": user_id, "email": email}))

    @hookimpl
    def post_session_expired(self, user_id: str, email: str, idle_seconds: float) -> None:
        self.calls.append(
            (
                "post_session_expired",
                {"user_id": user_id, "email": email, "idle_seconds": idle_seconds},
            )
        )

    @hookimpl
    def post_password_change(self, user_id: str) -> None:
        self.calls.append(("post_password_change", {"user_id": user_id}))

    @hookimpl
    def post_user_create(self, user_id: str, email: str, role: str) -> None:
        self.calls.append(("post_user_create", {"user_id": user_id, "email": email, "role": role}))

    @hookimpl
    def post_task_close(self, task_id: str, closed_by: str) -> None:
        self.calls.append(("post_task_close", {"task_id": task_id, "closed_by": closed_by}))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def memory_store() -> MemoryDocumentStore:
    """In-memory store preloaded with the demo dataset."""
    return MemoryDocumentStore(demo_documents())


@pytest.fixture
def settings(tmp_path: Path) -> LogicemSettings:
    return LogicemSettings(data_dir=tmp_path)


@pytest.fixture
def workspace(settings: LogicemSettings, memory_store: MemoryDocumentStore) -> Workspace:
    """Workspace over the demo memory store (no plugins)."""
    ws = Workspace(settings, store=memory_store)
    try:
        yield ws
    finally:
        ws.close()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ticker() -> ManualTicker:
    return ManualTicker()


@pytest.fixture
def activity() -> ActivityHub:
    return ActivityHub()


@pytest.fixture
def session(memory_store: MemoryDocumentStore, clock: FakeClock) -> SessionManager:
    """Anonymous, hand-ticked session manager over the demo store."""
    return SessionManager(memory_store, timeout_seconds=300, clock=clock)


@pytest.fixture
def sign_in_as(session: SessionManager) -> Callable[[str], SessionManager]:
    """Sign the shared ``session`` in as the demo account for a role."""

    def _sign_in(role: str) -> SessionManager:
        email, password = DEMO_LOGINS[role]
        result = session.sign_in(email, password)
        assert result.ok, result.error
        return session

    return _sign_in


@pytest.fixture
def recorder(workspace: Workspace) -> RecordingPlugin:
    """A RecordingPlugin registered on the workspace's plugin manager."""
    plugin = RecordingPlugin()
    workspace.init_plugins(discover=False).register_plugin(plugin, name="recorder")
    return plugin


@pytest.fixture
def _isolated_data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run the CLI with CWD (and so the data directory) in a temp dir.

    Use via ``@pytest.mark.usefixtures("_isolated_data_dir")`` on command
    test classes.
    """
    for var in ("LOGICEM_CONFIG", "LOGICEM_EMAIL", "LOGICEM_PASSWORD"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
