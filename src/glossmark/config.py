"""Centralised configuration using pydantic-settings.

All environment variables are read through the Settings class.
Consumers call ``get_settings()`` to obtain a cached, validated instance.
Tests construct ``Settings(_env_file=None, ...)`` directly for isolation.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# src/glossmark/config.py  ->  parent x3  ->  project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


# ---------------------------------------------------------------------------
# Sub-models (one per configuration domain)
# ---------------------------------------------------------------------------
class MarkerConfig(BaseModel):
    """Tooltip marker appearance and listing labels."""

    css_class: str = "tooltip-anchor"
    default_icon: str = "💬"
    label_prefix: str = "Tooltip"

    @field_validator("css_class")
    @classmethod
    def single_class_name(cls, value: str) -> str:
        value = value.strip()
        if not value or any(ch.isspace() for ch in value):
            msg = "MARKER__CSS_CLASS must be a single non-empty class name"
            raise ValueError(msg)
        return value


class SelectionConfig(BaseModel):
    """Selection snapshot storage."""

    snapshot_key: str = "tooltip-selection"


class LinkConfig(BaseModel):
    """Attributes applied to links created through the link dialog."""

    rel: str = "noopener noreferrer"
    open_in_new_tab: bool = True


class AppConfig(BaseModel):
    """Application runtime configuration."""

    log_dir: Path = Path("logs")
    log_level: str = "INFO"


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Settings with automatic .env loading and type validation.

    Environment variables use double-underscore delimiter for nesting:
    ``MARKER__CSS_CLASS``, ``SELECTION__SNAPSHOT_KEY``, ``APP__LOG_DIR``, etc.
    """

    model_config = SettingsConfigDict(
        env_file=_PROJECT_ROOT / ".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    marker: MarkerConfig = MarkerConfig()
    selection: SelectionConfig = SelectionConfig()
    link: LinkConfig = LinkConfig()
    app: AppConfig = AppConfig()


# ---------------------------------------------------------------------------
# Singleton access
# ---------------------------------------------------------------------------
@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Call ``get_settings.cache_clear()`` in tests to reset.
    """
    settings = Settings()

    env_file = settings.model_config.get("env_file")
    if env_file is not None and Path(str(env_file)).is_file():
        logger.info("Settings loaded .env from: %s", env_file)
    else:
        logger.info("Settings: no .env file found, using env vars and defaults")

    return settings
