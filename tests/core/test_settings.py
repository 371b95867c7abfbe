"""Tests for spineflow.core.settings module."""

import pytest
from pydantic import ValidationError

from spineflow.core.logging import get_logger
from spineflow.core.settings import FlowSettings, clear_settings_cache, get_settings


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch, tmp_path):
    """Run from an empty directory so a stray .env cannot leak in."""
    monkeypatch.chdir(tmp_path)


class TestDefaults:
    def test_defaults(self):
        settings = FlowSettings()
        assert settings.log_level == "INFO"
        assert settings.json_logs is None
        assert settings.service_name == "spineflow"
        assert settings.trace_stages is False


class TestEnvironment:
    def test_prefix_overrides(self, monkeypatch):
        monkeypatch.setenv("SPINEFLOW_LOG_LEVEL", "debug")
        monkeypatch.setenv("SPINEFLOW_TRACE_STAGES", "1")
        monkeypatch.setenv("SPINEFLOW_SERVICE_NAME", "reports")
        settings = FlowSettings()
        assert settings.log_level == "DEBUG"
        assert settings.trace_stages is True
        assert settings.service_name == "reports"

    def test_unprefixed_ignored(self, monkeypatch):
        monkeypatch.setenv("TRACE_STAGES", "true")
        assert FlowSettings().trace_stages is False

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("SPINEFLOW_JSON_LOGS=true\n")
        assert FlowSettings().json_logs is True

    def test_invalid_log_level(self, monkeypatch):
        monkeypatch.setenv("SPINEFLOW_LOG_LEVEL", "loud")
        with pytest.raises(ValidationError, match="unknown log level"):
            FlowSettings()


class TestCache:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_force_reload(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("SPINEFLOW_TRACE_STAGES", "true")
        assert get_settings().trace_stages is False
        reloaded = get_settings(_force_reload=True)
        assert reloaded is not first
        assert reloaded.trace_stages is True

    def test_clear(self):
        first = get_settings()
        clear_settings_cache()
        assert get_settings() is not first


class TestApplyLogging:
    def test_level_filters_debug(self, capsys):
        FlowSettings(log_level="WARNING", json_logs=True).apply_logging()
        get_logger("test").debug("hidden")
        get_logger("test").warning("shown")
        output = capsys.readouterr().out
        assert "hidden" not in output
        assert '"event": "shown"' in output

    def test_service_name_attached(self, capsys):
        FlowSettings(json_logs=True, service_name="reports").apply_logging()
        get_logger("test").info("hello")
        assert '"service.name": "reports"' in capsys.readouterr().out

