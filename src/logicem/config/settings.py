"""LogicemSettings: one frozen object per invocation.

A value is taken from the first place that sets it: a CLI flag, then a
``LOGICEM_*`` env var (``LOGICEM_SESSION__TIMEOUT_SECONDS=600`` for a
nested key), then ``logicem.toml``, then the section defaults.

The TOML path is handed to the source through a thread-local because
pydantic-settings builds sources from the class, not the instance.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from logicem.config.discovery import find_config
from logicem.config.models import ListingConfig, PluginsConfig, SessionConfig, StoreConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``logicem.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            try:
                self._data = tomllib.loads(toml_path.read_text(encoding="utf-8"))
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


_tls = threading.local()


class LogicemSettings(BaseSettings):
    """Frozen settings for one CLI invocation (or one embedding process).

    Attributes:
        data_dir: Directory holding ``.logicem/logicem.db`` (parent of the
            discovered ``logicem.toml``, or CWD when none is found).
        config_path: The TOML file that was read, if any.
        email / password: Credentials for one-shot commands. Never logged.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "LOGICEM_",
        "env_nested_delimiter": "__",
    }

    data_dir: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    email: str | None = None
    password: str | None = Field(default=None, repr=False)

    # --- TOML sections ---
    session: SessionConfig = Field(default_factory=SessionConfig)
    listing: ListingConfig = Field(default_factory=ListingConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @property
    def has_credentials(self) -> bool:
        """Whether both sign-in flags (or env vars) were supplied."""
        return bool(self.email and self.password)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the TOML source between env vars and defaults."""
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, getattr(_tls, "toml_path", None)),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        data_dir: Path | None = None,
        **cli_flags: Any,
    ) -> LogicemSettings:
        """Construct settings from a CLI invocation.

        Discovers ``logicem.toml`` via walk-up (or explicit *config_path*),
        resolves *data_dir* from the config file's parent directory, and
        merges CLI flags as highest-priority overrides. Flags passed as
        None are dropped so env vars and TOML still apply.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(data_dir)

        resolved_dir = data_dir
        if resolved_dir is None:
            resolved_dir = toml_path.parent if toml_path else Path.cwd()

        overrides = {k: v for k, v in cli_flags.items() if v is not None}

        _tls.toml_path = toml_path
        try:
            return cls(data_dir=resolved_dir, config_path=toml_path, **overrides)
        finally:
            _tls.toml_path = None
