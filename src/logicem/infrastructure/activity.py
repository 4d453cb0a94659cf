"""Activity source — fan-out of user-interaction signals to listeners.

The interaction layer (the interactive shell, or a test) calls
:meth:`ActivityHub.emit`; the session manager subscribes on sign-in and
unsubscribes on sign-out. ``listener_count`` makes leaks observable.
"""

from __future__ import annotations

import threading
from collections.abc import Callable

Listener = Callable[[str], None]


class ActivityHub:
    """Thread-safe listener registry for activity signals."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Attach *listener*; returns a callable that detaches it."""
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            self.unsubscribe(listener)

        return _unsubscribe

    def unsubscribe(self, listener: Listener) -> None:
        """Detach *listener* (no-op if it is not attached)."""
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def emit(self, signal: str) -> None:
        """Deliver *signal* to every attached listener, in subscription order."""
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(signal)

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)
