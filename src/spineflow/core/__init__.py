"""spine-flow core -- errors, structured logging and settings.

Architecture::

    errors.py      Error hierarchy (FlowError, FlowValidationError, ConfigError)
    logging.py     structlog configuration and logger access
    settings.py    FlowSettings (pydantic-settings, SPINEFLOW_ prefix)
"""

from spineflow.core.errors import (
    ConfigError,
    ErrorCategory,
    ErrorContext,
    FlowError,
    FlowValidationError,
    InvalidConfigError,
)
from spineflow.core.logging import configure_logging, get_logger

__all__ = [
    "ConfigError",
    "ErrorCategory",
    "ErrorContext",
    "FlowError",
    "FlowValidationError",
    "InvalidConfigError",
    "configure_logging",
    "get_logger",
]
