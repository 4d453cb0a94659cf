"""Tests for LogicemSettings source priority and config discovery."""

from __future__ import annotations

from pathlib import Path

import click
import pytest
from pydantic import ValidationError

from logicem.config.discovery import CONFIG_FILENAME, find_config
from logicem.config.models import ListingConfig, SessionConfig
from logicem.config.settings import LogicemSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in (
        "LOGICEM_CONFIG",
        "LOGICEM_EMAIL",
        "LOGICEM_PASSWORD",
        "LOGICEM_SESSION__TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(var, raising=False)


class TestFindConfig:
    def test_walks_up(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config(nested) == (tmp_path / CONFIG_FILENAME).resolve()

    def test_none_when_absent(self, tmp_path: Path) -> None:
        assert find_config(tmp_path) is None

    def test_env_var_pins_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        pinned = tmp_path / "elsewhere.toml"
        pinned.write_text("")
        monkeypatch.setenv("LOGICEM_CONFIG", str(pinned))
        assert find_config(tmp_path) == pinned

    def test_env_var_missing_file_disables_walk(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        monkeypatch.setenv("LOGICEM_CONFIG", str(tmp_path / "missing.toml"))
        assert find_config(tmp_path) is None


class TestSectionModels:
    def test_session_defaults(self) -> None:
        cfg = SessionConfig()
        assert cfg.timeout_seconds == 300
        assert cfg.warning_seconds == 120
        assert cfg.critical_seconds == 60

    def test_critical_above_warning_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SessionConfig(warning_seconds=30, critical_seconds=60)

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            SessionConfig(timeout_seconds=0)

    def test_listing_default_page_size(self) -> None:
        assert ListingConfig().page_size == 20


class TestLogicemSettings:
    def test_defaults_without_config(self, tmp_path: Path) -> None:
        settings = LogicemSettings.from_cli(data_dir=tmp_path)
        assert settings.data_dir == tmp_path
        assert settings.config_path is None
        assert settings.session.timeout_seconds == 300
        assert settings.store.seed_demo is True

    def test_toml_overrides_defaults(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text(
            "[session]\ntimeout_seconds = 600\n\n[listing]\npage_size = 5\n"
        )
        settings = LogicemSettings.from_cli(data_dir=tmp_path)
        assert settings.session.timeout_seconds == 600
        assert settings.listing.page_size == 5
        assert settings.config_path == (tmp_path / CONFIG_FILENAME).resolve()

    def test_data_dir_follows_discovered_config(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        nested = tmp_path / "sub"
        nested.mkdir()
        monkeypatch.chdir(nested)
        settings = LogicemSettings.from_cli()
        assert settings.data_dir == tmp_path.resolve()

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        cfg = tmp_path / "custom.toml"
        cfg.write_text("[store]\nseed_demo = false\n")
        settings = LogicemSettings.from_cli(config_path=str(cfg), data_dir=tmp_path)
        assert settings.store.seed_demo is False

    def test_env_beats_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("[session]\ntimeout_seconds = 600\n")
        monkeypatch.setenv("LOGICEM_SESSION__TIMEOUT_SECONDS", "90")
        settings = LogicemSettings.from_cli(data_dir=tmp_path)
        assert settings.session.timeout_seconds == 90

    def test_cli_flags_win_and_none_is_dropped(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("LOGICEM_EMAIL", "agent@logicem.com")
        settings = LogicemSettings.from_cli(data_dir=tmp_path, email=None, json_output=True)
        assert settings.email == "agent@logicem.com"
        assert settings.json_output is True

    def test_password_not_in_repr(self, tmp_path: Path) -> None:
        settings = LogicemSettings.from_cli(data_dir=tmp_path, password="secret-pass")
        assert "secret-pass" not in repr(settings)

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("[session\n")
        with pytest.raises(click.ClickException):
            LogicemSettings.from_cli(data_dir=tmp_path)

    def test_frozen(self, tmp_path: Path) -> None:
        settings = LogicemSettings.from_cli(data_dir=tmp_path)
        with pytest.raises(ValidationError):
            settings.quiet = True  # type: ignore[misc]

    def test_has_credentials_needs_both(self, tmp_path: Path) -> None:
        assert not LogicemSettings.from_cli(data_dir=tmp_path, email="a@b.c").has_credentials
        both = LogicemSettings.from_cli(data_dir=tmp_path, email="a@b.c", password="S3cret-XYZ")
        assert both.has_credentials
        assert "S3cret-XYZ" not in repr(both)
