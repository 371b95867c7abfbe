"""
Shared pytest fixtures and configuration for spine-flow tests.

This module provides:
- Settings cache / environment isolation
- Log context cleanup
- A call recorder for asserting how often transformers ran
"""

import os
from pathlib import Path
from typing import Any, Generator

import pytest
import structlog

from spineflow.core.logging import clear_context
from spineflow.core.settings import clear_settings_cache


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)

        if "integration" in str(test_path):
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Drop SPINEFLOW_* variables and the cached settings around each test."""
    for key in list(os.environ):
        if key.startswith("SPINEFLOW_"):
            monkeypatch.delenv(key)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def clean_log_context() -> Generator[None, None, None]:
    """Reset bound context and any configure_logging() call made by a test."""
    clear_context()
    yield
    clear_context()
    structlog.reset_defaults()


# =============================================================================
# Helpers
# =============================================================================


class CallRecorder:
    """Callable that records every argument tuple it receives."""

    def __init__(self, result: Any = None):
        self.calls: list[tuple[Any, ...]] = []
        self._result = result

    def __call__(self, *args: Any) -> Any:
        self.calls.append(args)
        return self._result

    @property
    def count(self) -> int:
        return len(self.calls)


@pytest.fixture
def recorder() -> CallRecorder:
    return CallRecorder()


@pytest.fixture
def errors() -> list[Exception]:
    """List used as an error handler: ``flow(x).catch(errors.append)``."""
    return []
