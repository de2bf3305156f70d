"""Runtime settings for waypoint.

Settings only cover the ambient edges of the library: how failures are
logged and which exit status ``exit_on_err`` uses. Propagation and
conversion have no knobs.

Fields can be set via ``WAYPOINT_*`` environment variables (e.g.
``WAYPOINT_LOG_LEVEL=DEBUG``) or a ``.env`` file.

Examples:
    >>> from waypoint.core.settings import get_settings
    >>> get_settings().exit_status
    1

Tags:
    settings, configuration, pydantic, environment, waypoint

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class WaypointSettings(BaseSettings):
    """waypoint configuration.

    Fields
    ──────
    log_level    : structlog level for waypoint's own events
    log_json     : JSON output (True), console (False), auto-detect (None)
    service      : service.name attached to every log event
    exit_status  : process exit status used by exit_on_err()
    """

    model_config = SettingsConfigDict(
        env_prefix="WAYPOINT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_json: bool | None = Field(default=None, description="None auto-detects from the tty")
    service: str = Field(default="waypoint")

    # ── Program edge ─────────────────────────────────────────────
    exit_status: int = Field(default=1, ge=1, le=255)

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LEVELS)}")
        return level


# ── Settings factory with caching ────────────────────────────────────────

_settings_cache: dict[str, WaypointSettings] = {}


def get_settings(*, _force_reload: bool = False) -> WaypointSettings:
    """Load, validate, and cache a :class:`WaypointSettings` instance."""
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]
    settings = WaypointSettings()
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    _settings_cache.clear()


__all__ = [
    "WaypointSettings",
    "get_settings",
    "clear_settings_cache",
]
