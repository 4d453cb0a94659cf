"""Session vocabulary: states, activity signals, auth errors, countdown levels.

The countdown level is presentation policy. The session manager never
holds it as state; the output layer derives it from the remaining seconds.
"""

from __future__ import annotations

from enum import StrEnum

DEFAULT_TIMEOUT_SECONDS = 300
DEFAULT_WARNING_SECONDS = 120
DEFAULT_CRITICAL_SECONDS = 60

SESSION_EXPIRED_MESSAGE = (
    "Tu sesión ha expirado por inactividad. Por favor, inicia sesión nuevamente."
)
INVALID_CREDENTIALS_MESSAGE = (
    "Credenciales inválidas. Por favor, verifica tu email y contraseña."
)


class SessionState(StrEnum):
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


class ActivitySignal(StrEnum):
    """User-interaction signals that reset the idle countdown."""

    POINTER_DOWN = "mousedown"
    POINTER_MOVE = "mousemove"
    KEY_PRESS = "keypress"
    SCROLL = "scroll"
    TOUCH_START = "touchstart"
    CLICK = "click"


class AuthError(StrEnum):
    """Error codes raised at the session-manager boundary."""

    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    SESSION_EXPIRED = "SESSION_EXPIRED"


class CountdownLevel(StrEnum):
    NORMAL = "normal"
    ELEVATED = "elevated"
    CRITICAL = "critical"


def countdown_level(
    remaining: int,
    *,
    warning_seconds: int = DEFAULT_WARNING_SECONDS,
    critical_seconds: int = DEFAULT_CRITICAL_SECONDS,
) -> CountdownLevel:
    """Escalation level for the remaining idle seconds.

    Examples:
        >>> countdown_level(200)
        <CountdownLevel.NORMAL: 'normal'>
        >>> countdown_level(120)
        <CountdownLevel.ELEVATED: 'elevated'>
        >>> countdown_level(60)
        <CountdownLevel.CRITICAL: 'critical'>
    """
    if remaining <= critical_seconds:
        return CountdownLevel.CRITICAL
    if remaining <= warning_seconds:
        return CountdownLevel.ELEVATED
    return CountdownLevel.NORMAL


def format_countdown(seconds: int) -> str:
    """Render seconds as ``m:ss``.

    Examples:
        >>> format_countdown(300)
        '5:00'
        >>> format_countdown(59)
        '0:59'
    """
    seconds = max(0, seconds)
    return f"{seconds // 60}:{seconds % 60:02d}"
