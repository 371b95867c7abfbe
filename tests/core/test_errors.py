"""Tests for spineflow.core.errors module."""

import pytest

from spineflow.core.errors import (
    ConfigError,
    ErrorCategory,
    ErrorContext,
    FlowError,
    FlowValidationError,
    InvalidConfigError,
    categorize_error,
)


class TestErrorContext:
    """Test ErrorContext dataclass."""

    def test_create_empty_context(self):
        """Create context with no fields set."""
        ctx = ErrorContext()
        assert ctx.operator is None
        assert ctx.stage is None
        assert ctx.metadata == {}
        assert ctx.to_dict() == {}

    def test_to_dict_skips_none(self):
        """Only populated fields end up in the dictionary."""
        ctx = ErrorContext(operator="retry", mode="deferred")
        assert ctx.to_dict() == {"operator": "retry", "mode": "deferred"}

    def test_to_dict_merges_metadata(self):
        ctx = ErrorContext(stage="render", metadata={"attempt": 2})
        assert ctx.to_dict() == {"stage": "render", "attempt": 2}


class TestFlowError:
    """Test the base error type."""

    def test_defaults(self):
        error = FlowError("boom")
        assert str(error) == "boom"
        assert error.category is ErrorCategory.INTERNAL
        assert error.cause is None

    def test_cause_is_chained(self):
        cause = KeyError("id")
        error = FlowError("lookup failed", cause=cause)
        assert error.__cause__ is cause
        assert error.to_dict()["cause"] == str(cause)

    def test_with_context_sets_known_fields(self):
        error = FlowError("bad").with_context(operator="pipe", chain="nightly")
        assert error.context.operator == "pipe"
        assert error.context.metadata == {"chain": "nightly"}

    def test_with_context_returns_self(self):
        error = FlowError("bad")
        assert error.with_context(stage="x") is error

    def test_to_dict(self):
        error = FlowError("bad", category=ErrorCategory.STAGE).with_context(operator="map")
        assert error.to_dict() == {
            "error_type": "FlowError",
            "message": "bad",
            "category": "STAGE",
            "context": {"operator": "map"},
        }

    def test_repr(self):
        assert repr(FlowError("bad")) == "FlowError('bad', category=INTERNAL)"


class TestFlowValidationError:
    def test_is_value_error(self):
        with pytest.raises(ValueError):
            raise FlowValidationError("attempts must be >= 1")

    def test_category(self):
        assert FlowValidationError("x").category is ErrorCategory.VALIDATION

    def test_field_and_value_serialized(self):
        error = FlowValidationError("negative", field="seconds", value=-1)
        data = error.to_dict()
        assert data["field"] == "seconds"
        assert data["value"] == "-1"

    def test_context_keyword_passthrough(self):
        error = FlowValidationError("x", context=ErrorContext(operator="delay"))
        assert error.context.operator == "delay"


class TestConfigErrors:
    def test_config_category(self):
        assert ConfigError("missing").category is ErrorCategory.CONFIG

    def test_invalid_config_message(self):
        error = InvalidConfigError("log_level", "LOUD")
        assert error.key == "log_level"
        assert error.value == "LOUD"
        assert str(error) == "Invalid configuration for log_level: 'LOUD'"
        assert isinstance(error, ConfigError)

    def test_invalid_config_custom_message(self):
        assert str(InvalidConfigError("k", 1, "nope")) == "nope"


class TestCategorizeError:
    @pytest.mark.parametrize(
        "error, expected",
        [
            (FlowValidationError("x"), ErrorCategory.VALIDATION),
            (InvalidConfigError("k", "v"), ErrorCategory.CONFIG),
            (TypeError("x"), ErrorCategory.VALIDATION),
            (ValueError("x"), ErrorCategory.VALIDATION),
            (RuntimeError("x"), ErrorCategory.UNKNOWN),
        ],
    )
    def test_categories(self, error, expected):
        assert categorize_error(error) is expected
