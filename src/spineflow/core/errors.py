"""
Structured error types for spine-flow.

Provides a small hierarchy of typed errors with metadata for categorization,
logging and debugging. Stage failures raised by user transformers are never
wrapped: they are delivered to the container's error handler (immediate mode)
or propagate through the awaitable (deferred mode) exactly as raised. The
types below are reserved for misuse of the pipeline itself (invalid operator
arguments, invalid configuration).

Manifesto:
    - **User errors stay user errors:** Transformer failures are not rewrapped
    - **Misuse fails loudly:** Invalid arguments raise at the call site,
      outside stage isolation, so they are never silently swallowed
    - **Rich context:** Errors carry the stage/operator that rejected them
    - **Error chaining:** Preserve original exceptions while adding context

Architecture:
    ::

        ┌───────────────────────────────────────────────────────┐
        │                      FlowError                         │
        │        (category, context, cause, to_dict)             │
        ├───────────────────────────────────────────────────────┤
        │                                                        │
        │  FlowValidationError         ConfigError               │
        │  (VALIDATION)                (CONFIG)                  │
        │                                   │                    │
        │                              InvalidConfigError        │
        └───────────────────────────────────────────────────────┘

Examples:
    Rejecting an invalid operator argument:

    >>> error = FlowValidationError("attempts must be >= 1", field="attempts", value=0)
    >>> error.category
    <ErrorCategory.VALIDATION: 'VALIDATION'>
    >>> error.to_dict()["field"]
    'attempts'

    Adding context fluently:

    >>> error = FlowError("bad stage").with_context(operator="retry")
    >>> error.context.operator
    'retry'

Guardrails:
    ❌ DON'T: Raise FlowError from inside a transformer to signal data problems
    ✅ DO: Raise whatever your domain raises; the chain handles it

    ❌ DON'T: Swallow the original exception when wrapping
    ✅ DO: Pass it as cause= for error chaining

Tags:
    error-handling, exception-hierarchy, error-context, spine-flow

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Standard error categories for classification.

    Attributes:
        VALIDATION: Invalid operator arguments or stage configuration
        CONFIG: Missing or invalid settings
        STAGE: Failure attributed to a pipeline stage
        INTERNAL: Bugs, unexpected state
        UNKNOWN: Uncategorized errors
    """

    VALIDATION = "VALIDATION"     # Operator arguments, stage specs
    CONFIG = "CONFIG"             # Settings, logging configuration
    STAGE = "STAGE"               # Stage execution
    INTERNAL = "INTERNAL"         # Bugs, unexpected state
    UNKNOWN = "UNKNOWN"           # Uncategorized errors


@dataclass
class ErrorContext:
    """
    Structured metadata context for errors.

    Attributes:
        operator: Name of the fluent operation (pipe, retry, delay, ...)
        stage: Free-form stage label, if the caller supplied one
        mode: Mode of the container the error relates to
        metadata: Additional key-value pairs
    """

    operator: str | None = None
    stage: str | None = None
    mode: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["operator", "stage", "mode"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class FlowError(Exception):
    """
    Base exception for all spine-flow errors.

    Every FlowError carries a category, an ErrorContext and an optional
    cause. Subclasses set ``default_category``.

    Examples:
        >>> error = FlowError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.to_dict()["error_type"]
        'FlowError'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> FlowError:
        """
        Add context to this error (fluent API).

        Usage:
            raise FlowValidationError("bad delay").with_context(operator="delay")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class FlowValidationError(FlowError, ValueError):
    """
    Invalid argument passed to a fluent operation.

    Also a ValueError, so callers that only know the builtin still catch it.
    """

    default_category = ErrorCategory.VALIDATION

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        if self.value is not None:
            result["value"] = repr(self.value)
        return result


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(FlowError):
    """Configuration error."""

    default_category = ErrorCategory.CONFIG


class InvalidConfigError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}")


def categorize_error(error: Exception) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, FlowError):
        return error.category
    if isinstance(error, (TypeError, ValueError)):
        return ErrorCategory.VALIDATION
    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "FlowError",
    "FlowValidationError",
    "ConfigError",
    "InvalidConfigError",
    "categorize_error",
]
