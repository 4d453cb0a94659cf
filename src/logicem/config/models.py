"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, logicem.toml only contains
overrides. A fresh install needs no config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from logicem.domain.listing import DEFAULT_PAGE_SIZE
from logicem.domain.session import (
    DEFAULT_CRITICAL_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_WARNING_SECONDS,
)

# --- logicem.toml sections ---


class SessionConfig(BaseModel):
    """[session] section."""

    model_config = {"frozen": True}

    timeout_seconds: int = Field(default=DEFAULT_TIMEOUT_SECONDS, ge=1)
    warning_seconds: int = Field(default=DEFAULT_WARNING_SECONDS, ge=0)
    critical_seconds: int = Field(default=DEFAULT_CRITICAL_SECONDS, ge=0)
    tick_seconds: float = Field(default=1.0, gt=0)

    @model_validator(mode="after")
    def _thresholds_ordered(self) -> SessionConfig:
        if self.critical_seconds > self.warning_seconds:
            msg = "critical_seconds must not exceed warning_seconds"
            raise ValueError(msg)
        return self


class ListingConfig(BaseModel):
    """[listing] section."""

    model_config = {"frozen": True}

    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)


class StoreConfig(BaseModel):
    """[store] section."""

    model_config = {"frozen": True}

    seed_demo: bool = True


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
