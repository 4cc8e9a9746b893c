"""
Settings for edgedb-portable.

Values come from keyword arguments, then EDGEDB_* environment variables,
then the defaults below.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PKG_ROOT = "https://packages.edgedb.com"


class PortableSettings(BaseSettings):
    """Settings model (pydantic-settings)."""

    model_config = SettingsConfigDict(
        env_prefix="EDGEDB_",
        extra="ignore",
    )

    # Package index
    pkg_root: str = DEFAULT_PKG_ROOT

    # HTTP
    request_timeout: float = Field(default=30.0, ge=1.0, le=600.0)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    log_json: bool = False

    @field_validator("pkg_root")
    @classmethod
    def _check_pkg_root(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("pkg_root must be an http(s) URL")
        return value


_settings: PortableSettings | None = None


def get_settings() -> PortableSettings:
    """Get settings singleton, created from the environment on first use."""
    global _settings
    if _settings is None:
        _settings = PortableSettings()
    return _settings


def configure_settings(**overrides: object) -> PortableSettings:
    """
    Replace settings singleton with explicit overrides.

    Example:
        >>> configure_settings(pkg_root="http://localhost:8080")
    """
    global _settings
    _settings = PortableSettings(**overrides)
    return _settings


def reset_settings() -> None:
    """Drop settings singleton (next get_settings() re-reads environment)."""
    global _settings
    _settings = None


__all__ = [
    "DEFAULT_PKG_ROOT",
    "PortableSettings",
    "get_settings",
    "configure_settings",
    "reset_settings",
]
