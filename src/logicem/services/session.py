"""SessionManager — sign-in, sign-out, password change, and idle timeout.

State machine: Anonymous ⇄ Authenticated. ``sign_in`` success moves to
Authenticated; ``sign_out`` or idle expiry moves back to Anonymous.

The Session Clock is a ``last_activity`` reading of an injected monotonic
clock. Activity signals arrive on the activity hub (any thread) and are
queued with their arrival time; every :meth:`tick` drains that queue
before deciding expiry, so a signal that arrived before the deciding tick
always wins.

INVARIANT: Identity is non-null iff the activity listener is attached
and the ticker is running. ``sign_out`` undoes both, so repeated sign-in
cycles never accumulate listeners or timers.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from collections import deque
from collections.abc import Callable
from typing import TYPE_CHECKING

from logicem.config.logging import bind_actor, clear_actor
from logicem.domain.records import CredentialRecord, Identity
from logicem.domain.roles import is_known_role, parse_role
from logicem.domain.session import (
    DEFAULT_TIMEOUT_SECONDS,
    INVALID_CREDENTIALS_MESSAGE,
    SESSION_EXPIRED_MESSAGE,
    ActivitySignal,
    AuthError,
    SessionState,
)
from logicem.infrastructure.store import CREDENTIALS, StoreError
from logicem.services._helpers import load_records, save_records
from logicem.services.base import dispatch_event, store_failure
from logicem.services.result import ServiceError, ServiceResult, fail

if TYPE_CHECKING:
    from logicem.infrastructure.activity import ActivityHub
    from logicem.infrastructure.store import DocumentStore
    from logicem.infrastructure.ticker import Ticker
    from logicem.plugins.manager import PluginManager

logger = logging.getLogger(__name__)

ExpiryCallback = Callable[[ServiceResult], None]


class SessionManager:
    """Owns the in-memory Identity and the idle-timeout countdown.

    Parameters:
        store: Document store holding the ``credentials`` list.
        timeout_seconds: Idle duration after which the session ends.
        clock: Monotonic seconds source (tests inject a fake).
        ticker: Periodic driver for :meth:`tick`; None means the caller
            ticks by hand.
        activity: Hub the manager subscribes to while authenticated.
        plugins: Receives the lifecycle hooks.
        on_expired: Called once per expiry with a ``SESSION_EXPIRED`` result.
    """

    def __init__(
        self,
        store: DocumentStore,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        ticker: Ticker | None = None,
        activity: ActivityHub | None = None,
        plugins: PluginManager | None = None,
        on_expired: ExpiryCallback | None = None,
    ) -> None:
        self._store = store
        self._timeout = float(timeout_seconds)
        self._clock = clock
        self._ticker = ticker
        self._activity = activity
        self._plugins = plugins
        self._on_expired = on_expired

        self._lock = threading.RLock()
        self._identity: Identity | None = None
        self._last_activity: float | None = None
        self._pending: deque[float] = deque()
        self._detach: Callable[[], None] | None = None

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def identity(self) -> Identity | None:
        with self._lock:
            return self._identity

    @property
    def state(self) -> SessionState:
        if self.identity is None:
            return SessionState.ANONYMOUS
        return SessionState.AUTHENTICATED

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def sign_in(self, email: str, password: str) -> ServiceResult:
        """Match *email* and *password* exactly against stored credentials.

        On failure the current session, if any, is left untouched.
        """
        op = "sign_in"
        try:
            records = load_records(self._store, CREDENTIALS, CredentialRecord)
        except StoreError as exc:
            return store_failure(op, exc)

        # Stored passwords are plaintext; compare as-is.
        match = next(
            (r for r in records if r.email == email and r.password == password),
            None,
        )
        if match is None:
            logger.info("Sign-in rejected")
            return fail(op, AuthError.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE)

        if not is_known_role(match.role):
            logger.warning(
                "Credential %s has unknown role %r; using least privilege",
                match.id,
                match.role,
            )
        identity = Identity(id=match.id, email=match.email, role=parse_role(match.role))

        # Ticker start/stop stay under the lock so they order with identity changes.
        with self._lock:
            replaced = self._end_session_locked()
            self._identity = identity
            self._last_activity = self._clock()
            if self._activity is not None:
                self._detach = self._activity.subscribe(self.record_activity)
            if self._ticker is not None:
                self._ticker.start(self.tick)

        if replaced is not None:
            logger.info("Signed out %s (replaced by %s)", replaced.id, identity.id)
            self._signed_out(replaced)
        logger.info("Signed in %s as %s", identity.id, identity.role)
        bind_actor(identity.id, str(identity.role))
        warnings: list[str] = []
        dispatch_event(
            self._plugins,
            "post_sign_in",
            {"user_id": identity.id, "email": identity.email, "role": str(identity.role)},
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "identity": identity.model_dump(mode="json"),
                "timeout_seconds": int(self._timeout),
            },
            warnings=warnings,
        )

    def sign_out(self) -> None:
        """End the session. Calling it while Anonymous does nothing."""
        with self._lock:
            identity = self._end_session_locked()
            self._stop_ticker_locked()
        if identity is None:
            return
        logger.info("Signed out %s", identity.id)
        self._signed_out(identity)

    def change_password(self, identity_id: str, new_password: str) -> ServiceResult:
        """Replace the stored password of *identity_id*.

        No current-password check and no length rule here; callers that
        face users enforce those. An unknown id writes nothing and still
        succeeds with ``updated`` false.
        """
        op = "change_password"
        try:
            records = load_records(self._store, CREDENTIALS, CredentialRecord)
            updated = False
            for record in records:
                if record.id == identity_id:
                    record.password = new_password
                    updated = True
            if updated:
                save_records(self._store, CREDENTIALS, records)
        except StoreError as exc:
            return store_failure(op, exc)

        warnings: list[str] = []
        if updated:
            logger.info("Password changed for %s", identity_id)
            dispatch_event(self._plugins, "post_password_change", {"user_id": identity_id}, warnings)
        else:
            logger.debug("No credential with id %s; nothing rewritten", identity_id)
        return ServiceResult(
            ok=True,
            op=op,
            data={"user_id": identity_id, "updated": updated},
            warnings=warnings,
        )

    def time_remaining(self) -> int:
        """Whole seconds until idle expiry, rounded up and never negative.

        Anonymous sessions report the full configured duration.
        """
        with self._lock:
            if self._identity is None:
                return math.ceil(self._timeout)
            self._drain_locked()
            return math.ceil(self._remaining_locked())

    def record_activity(self, signal: str) -> None:
        """Queue one activity signal; ignored while Anonymous."""
        try:
            ActivitySignal(signal)
        except ValueError:
            logger.debug("Ignoring unknown activity signal %r", signal)
            return
        with self._lock:
            if self._identity is None:
                return
            self._pending.append(self._clock())

    def tick(self) -> int:
        """Apply queued activity, then end the session if the clock ran out.

        Returns the remaining whole seconds (0 once expired). The expiry
        notification is delivered exactly once per expiry.
        """
        with self._lock:
            if self._identity is None:
                return 0
            self._drain_locked()
            remaining = self._remaining_locked()
            if remaining > 0:
                return math.ceil(remaining)
            idle = self._clock() - (self._last_activity or 0.0)
            identity = self._end_session_locked()
            self._stop_ticker_locked()
        if identity is not None:
            self._notify_expired(identity, idle)
        return 0

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _remaining_locked(self) -> float:
        if self._last_activity is None:
            return self._timeout
        return max(0.0, self._timeout - (self._clock() - self._last_activity))

    def _drain_locked(self) -> None:
        while self._pending:
            stamp = self._pending.popleft()
            if self._last_activity is None or stamp > self._last_activity:
                self._last_activity = stamp

    def _end_session_locked(self) -> Identity | None:
        identity = self._identity
        self._identity = None
        self._last_activity = None
        self._pending.clear()
        if self._detach is not None:
            self._detach()
            self._detach = None
        return identity

    def _stop_ticker_locked(self) -> None:
        if self._ticker is not None:
            self._ticker.stop()

    def _signed_out(self, identity: Identity) -> None:
        clear_actor()
        dispatch_event(
            self._plugins,
            "post_sign_out",
            {"user_id": identity.id, "email": identity.email},
            [],
        )

    def _notify_expired(self, identity: Identity, idle: float) -> None:
        logger.info("Session for %s expired after %.0fs idle", identity.id, idle)
        clear_actor()
        warnings: list[str] = []
        dispatch_event(
            self._plugins,
            "post_session_expired",
            {"user_id": identity.id, "email": identity.email, "idle_seconds": idle},
            warnings,
        )
        if self._on_expired is None:
            return
        result = ServiceResult(
            ok=False,
            op="session_expired",
            warnings=warnings,
            error=ServiceError(
                code=AuthError.SESSION_EXPIRED,
                message=SESSION_EXPIRED_MESSAGE,
                detail={"user_id": identity.id},
            ),
        )
        self._on_expired(result)
