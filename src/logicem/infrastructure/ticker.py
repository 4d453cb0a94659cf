"""Periodic tick sources for the idle-timeout countdown.

:class:`ThreadTicker` wakes a daemon thread once per interval and calls
the callback. It is a cooperative poll, not a precise timer: a tick may
land up to one interval late.

:meth:`ThreadTicker.stop` never waits for the thread. Callers may hold a
lock the callback also takes, and a stopped thread exits on its own
after its current callback returns. A later :meth:`ThreadTicker.start`
always gets a fresh thread.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Protocol

logger = logging.getLogger(__name__)


class Ticker(Protocol):
    """Anything that can call *callback* periodically until stopped."""

    def start(self, callback: Callable[[], None]) -> None: ...

    def stop(self) -> None: ...

    @property
    def running(self) -> bool: ...


class ThreadTicker:
    """Daemon-thread ticker; one instance may be started and stopped repeatedly."""

    def __init__(self, interval: float = 1.0, *, name: str = "logicem-session-ticker") -> None:
        self._interval = max(0.05, float(interval))
        self._name = name
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self, callback: Callable[[], None]) -> None:
        if self.running:
            return
        self._stop = threading.Event()
        self._thread = threading.Thread(
            target=self._loop, args=(callback, self._stop), name=self._name, daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        self._thread = None

    def _loop(self, callback: Callable[[], None], stop: threading.Event) -> None:
        while not stop.wait(self._interval):
            try:
                callback()
            except Exception:
                logger.exception("Session tick failed")
