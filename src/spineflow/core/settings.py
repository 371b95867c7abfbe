"""Environment-driven settings for spine-flow.

``FlowSettings`` reads ``SPINEFLOW_*`` environment variables (and a local
``.env`` file) so diagnostics can be switched on without code changes.

Fields
──────
log_level     : Level passed to ``configure_logging``
json_logs     : Force JSON (True) or console (False) output; None = auto
service_name  : ``service.name`` attached to every log event
trace_stages  : Attach a logging observer to chains built by the factory

Examples:
    >>> import os
    >>> os.environ["SPINEFLOW_TRACE_STAGES"] = "true"
    >>> get_settings(_force_reload=True).trace_stages
    True

Tags:
    settings, configuration, pydantic, environment, spine-flow
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from spineflow.core.logging import configure_logging


class FlowSettings(BaseSettings):
    """Settings shared by every chain in the process."""

    model_config = SettingsConfigDict(
        env_prefix="SPINEFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    json_logs: bool | None = None
    service_name: str = "spineflow"

    # ── Diagnostics ──────────────────────────────────────────────
    trace_stages: bool = Field(
        default=False,
        description="Log every pre-transform value of chains built by the factory",
    )

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        normalized = value.upper()
        if normalized not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {value!r}")
        return normalized

    def apply_logging(self) -> None:
        """Configure structlog from these settings."""
        configure_logging(
            level=self.log_level,
            json_format=self.json_logs,
            service=self.service_name,
        )


_settings_cache: dict[str, FlowSettings] = {}


def get_settings(*, _force_reload: bool = False) -> FlowSettings:
    """Load, validate, and cache a :class:`FlowSettings` instance."""
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]
    settings = FlowSettings()
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()


__all__ = ["FlowSettings", "get_settings", "clear_settings_cache"]
