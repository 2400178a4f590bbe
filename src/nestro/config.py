"""Centralised application configuration using pydantic-settings.

All environment variables are read through the Settings class.
Consumers call ``get_settings()`` to obtain a cached, validated instance.
Tests construct ``Settings(_env_file=None, ...)`` directly for isolation.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# src/nestro/config.py  ->  parent x3  ->  project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

# Languages with a shipped catalogue under nestro/locales/
SUPPORTED_LANGUAGES = frozenset({"en", "ku"})


# ---------------------------------------------------------------------------
# Sub-models (one per configuration domain)
# ---------------------------------------------------------------------------
class StytchConfig(BaseModel):
    """Stytch session provider credentials."""

    project_id: str = ""
    secret: SecretStr = SecretStr("")
    environment: Literal["test", "live"] = "test"
    session_duration_minutes: int = 60 * 24 * 7


class AppConfig(BaseModel):
    """Application runtime configuration."""

    base_url: str = "http://localhost:8080"
    port: int = 8080
    storage_secret: SecretStr = SecretStr("dev-secret-change-me")
    log_dir: Path = Path("logs")
    default_language: str = "ku"

    @field_validator("default_language")
    @classmethod
    def language_has_catalogue(cls, value: str) -> str:
        if value not in SUPPORTED_LANGUAGES:
            msg = (
                f"APP__DEFAULT_LANGUAGE={value!r} has no catalogue "
                f"(expected one of {sorted(SUPPORTED_LANGUAGES)})"
            )
            raise ValueError(msg)
        return value


class AdminConfig(BaseModel):
    """Admin dashboard gate.

    This is a convenience gate for the dashboard pages, not authentication.
    """

    username: str = ""
    password: SecretStr = SecretStr("")
    session_hours: int = 24

    @field_validator("session_hours")
    @classmethod
    def session_hours_positive(cls, value: int) -> int:
        if value <= 0:
            msg = "ADMIN__SESSION_HOURS must be positive"
            raise ValueError(msg)
        return value


class RoutingConfig(BaseModel):
    """Redirect enforcement layers beyond the edge guard."""

    static_redirects: bool = False


class DevConfig(BaseModel):
    """Development and testing toggles."""

    auth_mock: bool = False


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Application settings with automatic .env loading and type validation.

    Environment variables use double-underscore delimiter for nesting:
    ``STYTCH__PROJECT_ID``, ``ADMIN__PASSWORD``, ``DEV__AUTH_MOCK``, etc.
    """

    model_config = SettingsConfigDict(
        env_file=_PROJECT_ROOT / ".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    stytch: StytchConfig = StytchConfig()
    app: AppConfig = AppConfig()
    admin: AdminConfig = AdminConfig()
    routing: RoutingConfig = RoutingConfig()
    dev: DevConfig = DevConfig()


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
