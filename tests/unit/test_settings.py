"""Unit tests for library settings and logging setup."""

import io
import json
from collections.abc import Iterator

import pytest
import structlog
from pydantic import ValidationError as PydanticValidationError

from confnode.observability import configure_logging
from confnode.settings import LibrarySettings, get_settings


class TestLibrarySettings:
    """Tests for LibrarySettings."""

    @pytest.mark.unit
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Defaults apply when no environment is set."""
        monkeypatch.delenv("CONFNODE_JSON_INDENT", raising=False)
        monkeypatch.delenv("CONFNODE_DEFAULT_CODEC", raising=False)

        settings = LibrarySettings()

        assert settings.json_indent == 2
        assert settings.yaml_indent == 2
        assert settings.default_codec == "yaml"
        assert settings.log_level == "INFO"

    @pytest.mark.unit
    def test_environment_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """CONFNODE_ variables override defaults."""
        monkeypatch.setenv("CONFNODE_JSON_INDENT", "4")
        monkeypatch.setenv("confnode_log_json", "false")

        settings = get_settings()

        assert settings.json_indent == 4
        assert settings.log_json is False

    @pytest.mark.unit
    def test_invalid_values(self) -> None:
        """Out-of-range values are rejected."""
        with pytest.raises(PydanticValidationError):
            LibrarySettings(yaml_indent=1)
        with pytest.raises(PydanticValidationError):
            LibrarySettings(default_codec="toml")  # type: ignore[arg-type]


class TestConfigureLogging:
    """Tests for structured logging setup."""

    @pytest.fixture(autouse=True)
    def reset_structlog(self) -> Iterator[None]:
        """Restore structlog defaults after each test."""
        yield
        structlog.reset_defaults()

    @pytest.mark.unit
    def test_json_output(self) -> None:
        """JSON logging writes one object per event."""
        output = io.StringIO()
        configure_logging(level="DEBUG", output=output, json_format=True)

        structlog.get_logger().info("config_file_loaded", path="config.yml")

        event = json.loads(output.getvalue().strip())
        assert event["event"] == "config_file_loaded"
        assert event["path"] == "config.yml"
        assert event["level"] == "info"

    @pytest.mark.unit
    def test_level_filtering(self) -> None:
        """Events below the level are dropped."""
        output = io.StringIO()
        configure_logging(level="WARNING", output=output, json_format=True)

        structlog.get_logger().info("config_saved")

        assert output.getvalue() == ""

    @pytest.mark.unit
    def test_settings_fallback(self) -> None:
        """Missing arguments come from settings."""
        output = io.StringIO()
        settings = LibrarySettings(log_level="ERROR", log_json=True)
        configure_logging(output=output, settings=settings)

        structlog.get_logger().warning("ignored")
        structlog.get_logger().error("kept")

        assert "kept" in output.getvalue()
        assert "ignored" not in output.getvalue()
