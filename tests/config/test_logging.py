"""Tests for structlog configuration."""

from __future__ import annotations

import logging
from collections.abc import Callable

import pytest
import structlog

from logicem.config.logging import (
    APP_LOGGER,
    REDACTED,
    bind_actor,
    clear_actor,
    configure_logging,
    redact_secrets,
)
from logicem.services.session import SessionManager


class TestConfigureLogging:
    def test_default_level_is_warning(self) -> None:
        configure_logging()
        assert logging.getLogger(APP_LOGGER).level == logging.WARNING

    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger(APP_LOGGER).level == logging.DEBUG

    def test_single_root_handler_with_processor_formatter(self) -> None:
        configure_logging()
        configure_logging()
        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, structlog.stdlib.ProcessorFormatter)

    def test_sqlalchemy_kept_quiet(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("sqlalchemy").level == logging.WARNING

    def test_json_mode(self) -> None:
        configure_logging(log_json=True)
        formatter = logging.getLogger().handlers[0].formatter
        record = logging.LogRecord("logicem.test", logging.WARNING, __file__, 1, "hola", (), None)
        rendered = formatter.format(record)
        assert '"event": "hola"' in rendered
        assert '"level": "warning"' in rendered


class TestRedaction:
    def test_password_fields_masked(self) -> None:
        event = {"event": "login", "password": "LogicemAdmin2024!", "email": "a@b.c"}
        out = redact_secrets(None, "info", event)
        assert out["password"] == REDACTED
        assert out["email"] == "a@b.c"

    def test_json_output_never_carries_password(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True)
        structlog.get_logger("logicem.test").warning("login", password="secreto")
        err = capsys.readouterr().err
        assert "secreto" not in err
        assert REDACTED in err


class TestActorBinding:
    def test_bind_and_clear(self) -> None:
        bind_actor("demo-agent", "agent")
        try:
            bound = structlog.contextvars.get_contextvars()
            assert bound["actor"] == "demo-agent"
            assert bound["role"] == "agent"
        finally:
            clear_actor()
        assert "actor" not in structlog.contextvars.get_contextvars()

    def test_session_binds_signed_in_user(
        self, sign_in_as: Callable[[str], SessionManager]
    ) -> None:
        session = sign_in_as("admin")
        assert structlog.contextvars.get_contextvars()["actor"] == session.identity.id
        session.sign_out()
        assert "actor" not in structlog.contextvars.get_contextvars()
