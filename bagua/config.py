"""Configuration models and helpers for bagua settings."""

from __future__ import annotations

import logging
import os
from datetime import UTC, datetime
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

LOG = logging.getLogger(__name__)

__all__ = [
    "CONFIG_FILENAME",
    "CURRENT_SETTINGS_SCHEMA_VERSION",
    "PhaseSourceCfg",
    "Settings",
    "config_path",
    "default_settings",
    "get_config_home",
    "load_settings",
]

CURRENT_SETTINGS_SCHEMA_VERSION = 1
CONFIG_FILENAME = "bagua.yaml"

_HOME_ENV = "BAGUA_HOME"
_PHASE_SOURCE_ENV = "BAGUA_PHASE_SOURCE"

MEAN_SYNODIC_MONTH_DAYS = 29.530588853
REFERENCE_NEW_MOON = datetime(2000, 1, 6, 18, 14, tzinfo=UTC)


class PhaseSourceCfg(BaseModel):
    """Selection and tuning of the lunar phase source."""

    name: str = "mean_lunation"
    synodic_month_days: float = Field(default=MEAN_SYNODIC_MONTH_DAYS, gt=0.0)
    reference_new_moon: datetime = REFERENCE_NEW_MOON

    @field_validator("name", mode="before")
    @classmethod
    def _normalize_name(cls, value: object) -> str:
        name = str(value or "").strip().lower()
        if not name:
            raise ValueError("phase source name must not be empty")
        return name

    @field_validator("reference_new_moon")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class Settings(BaseModel):
    """Top-level settings model."""

    schema_version: int = Field(
        default=CURRENT_SETTINGS_SCHEMA_VERSION,
        ge=1,
        description="Version marker for configuration payloads.",
    )
    phase_source: PhaseSourceCfg = Field(default_factory=PhaseSourceCfg)


def get_config_home() -> Path:
    """Return the directory where settings are looked up."""

    return Path(os.environ.get(_HOME_ENV, str(Path.home() / ".bagua")))


def config_path() -> Path:
    return get_config_home() / CONFIG_FILENAME


def default_settings() -> Settings:
    """Instantiate a Settings object populated with defaults."""

    return Settings()


def _apply_environment(data: dict[str, object]) -> dict[str, object]:
    override = os.environ.get(_PHASE_SOURCE_ENV, "").strip()
    if not override:
        return data
    phase_source = data.get("phase_source")
    merged = dict(phase_source) if isinstance(phase_source, dict) else {}
    merged["name"] = override
    return {**data, "phase_source": merged}


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from YAML, falling back to defaults when the file is missing.

    The ``BAGUA_PHASE_SOURCE`` environment variable overrides the configured
    phase source name. Settings are never written back to disk.
    """

    source_path = Path(path) if path else config_path()
    raw: object = {}
    if source_path.exists():
        with source_path.open("r", encoding="utf-8") as handle:
            raw = yaml.safe_load(handle) or {}
        LOG.debug("loaded settings from %s", source_path)
    else:
        LOG.debug("no settings file at %s; using defaults", source_path)
    if not isinstance(raw, dict):
        LOG.warning(
            "ignoring non-mapping settings payload",
            extra={"err_code": "SETTINGS_NOT_MAPPING", "path": str(source_path)},
        )
        raw = {}
    return Settings(**_apply_environment(raw))
