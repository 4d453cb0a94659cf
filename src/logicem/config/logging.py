"""Log setup for logicem: structlog rendering over stdlib logging.

Everything goes to stderr; stdout carries command results only. Module
code logs through ``logging.getLogger(__name__)``. While a session is
open the signed-in user is bound as ``actor`` and ``role`` on every
record, and secret-looking fields are masked before rendering.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog

APP_LOGGER = "logicem"

REDACTED = "***"
_SECRET_KEYS = frozenset({"password", "new_password", "confirm", "contraseña"})

# Third-party loggers that stay at WARNING even with --verbose.
_QUIET_LOGGERS = ("sqlalchemy", "pluggy")


def redact_secrets(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Mask any credential-like field bound on a log event."""
    for key in event_dict.keys() & _SECRET_KEYS:
        event_dict[key] = REDACTED
    return event_dict


def bind_actor(user_id: str, role: str) -> None:
    """Attach the signed-in user to every subsequent log line."""
    structlog.contextvars.bind_contextvars(actor=user_id, role=role)


def clear_actor() -> None:
    structlog.contextvars.unbind_contextvars("actor", "role")


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Install one stderr handler on the root logger.

    Args:
        verbose: ``logicem.*`` at DEBUG instead of WARNING.
        log_json: One JSON object per line instead of the console renderer.
    """
    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=False),
        redact_secrets,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger(APP_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
