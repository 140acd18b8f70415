"""Tests for telemetry configuration."""

import logging
from datetime import timedelta
from pathlib import Path

import pytest

from editor_commons.exceptions import TelemetryConfigError
from editor_commons.telemetry import (
    DEFAULT_TELEMETRY_URL,
    Environment,
    TelemetryConfig,
    is_telemetry_globally_disabled,
    parse_duration,
    set_telemetry_log_level,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("30d", 30 * 24 * 60 * 60 * 1000),
        ("1h", 60 * 60 * 1000),
        ("1", 1),
        ("250ms", 250),
        ("10s", 10_000),
        ("5m", 300_000),
        ("1.5 hours", 90 * 60 * 1000),
        ("2 Days", 2 * 24 * 60 * 60 * 1000),
        ("1w", 7 * 24 * 60 * 60 * 1000),
        (1500, 1500),
        (timedelta(minutes=2), 120_000),
    ],
)
def test_parse_duration(value, expected):
    assert parse_duration(value) == expected


@pytest.mark.parametrize(
    "value", ["", "abc", "10 parsecs", "-5d", -1, None, True, "9" * 400, "9" * 400 + "d", float("inf")]
)
def test_parse_duration_invalid(value):
    with pytest.raises(TelemetryConfigError):
        parse_duration(value)


class TestTelemetryConfig:
    """Tests for telemetry configuration."""

    def test_defaults(self):
        config = TelemetryConfig(guid="1234", product_version="1.0.0")
        assert config.enabled is True
        assert config.environment is Environment.PRODUCTION
        assert config.url == DEFAULT_TELEMETRY_URL
        assert config.persist_directory is None
        assert config.persist_length_ms == 30 * 24 * 60 * 60 * 1000

    def test_environment_from_string(self):
        config = TelemetryConfig(guid="1234", product_version="1.0.0", environment="development")
        assert config.environment is Environment.DEVELOPMENT

    def test_invalid_environment(self):
        with pytest.raises(TelemetryConfigError):
            TelemetryConfig(guid="1234", product_version="1.0.0", environment="staging")

    def test_invalid_persist_length(self):
        with pytest.raises(TelemetryConfigError):
            TelemetryConfig(guid="1234", product_version="1.0.0", persist_length="forever")

    def test_persist_directory_as_string(self, tmp_path):
        config = TelemetryConfig(guid="1234", product_version="1.0.0", persist_directory=str(tmp_path))
        assert config.persist_directory == tmp_path

    def test_from_env_defaults(self):
        config = TelemetryConfig.from_env("1234", "1.0.0")
        assert config.enabled is True
        assert config.url == DEFAULT_TELEMETRY_URL
        assert config.persist_directory is None

    def test_from_env_with_vars(self, monkeypatch, tmp_path):
        monkeypatch.setenv("EDITOR_COMMONS_TELEMETRY_URL", "https://example.com/track")
        monkeypatch.setenv("EDITOR_COMMONS_TELEMETRY_PERSIST_DIR", str(tmp_path))
        monkeypatch.setenv("EDITOR_COMMONS_TELEMETRY_PERSIST_LENGTH", "2h")

        config = TelemetryConfig.from_env("1234", "1.0.0", "development")

        assert config.url == "https://example.com/track"
        assert config.persist_directory == Path(tmp_path)
        assert config.persist_length_ms == 2 * 60 * 60 * 1000
        assert config.environment is Environment.DEVELOPMENT

    def test_from_env_overrides_win(self, monkeypatch):
        monkeypatch.setenv("EDITOR_COMMONS_TELEMETRY_PERSIST_LENGTH", "2h")

        config = TelemetryConfig.from_env("1234", "1.0.0", persist_length="1d", hardware_id="abc")

        assert config.persist_length_ms == 24 * 60 * 60 * 1000
        assert config.hardware_id == "abc"

    @pytest.mark.parametrize("value", ["1", "true", "YES", "on"])
    def test_from_env_disabled(self, monkeypatch, value):
        monkeypatch.setenv("EDITOR_COMMONS_TELEMETRY_DISABLED", value)

        assert is_telemetry_globally_disabled() is True
        assert TelemetryConfig.from_env("1234", "1.0.0", enabled=True).enabled is False

    def test_not_globally_disabled_by_default(self, monkeypatch):
        monkeypatch.setenv("EDITOR_COMMONS_TELEMETRY_DISABLED", "0")
        assert is_telemetry_globally_disabled() is False

    def test_to_dict(self, tmp_path):
        config = TelemetryConfig(
            guid="1234",
            product_version="1.0.0",
            environment="development",
            persist_directory=tmp_path,
            persist_length="1h",
        )
        assert config.to_dict() == {
            "enabled": True,
            "environment": "development",
            "guid": "1234",
            "product_version": "1.0.0",
            "persist_directory": str(tmp_path),
            "persist_length_ms": 60 * 60 * 1000,
            "url": DEFAULT_TELEMETRY_URL,
        }


@pytest.mark.parametrize(
    "env_value, expected",
    [("DEBUG", logging.DEBUG), ("error", logging.ERROR), ("bogus", logging.WARNING)],
)
def test_set_telemetry_log_level_from_env(monkeypatch, env_value, expected):
    telemetry_logger = logging.getLogger("editor_commons.telemetry")
    original = telemetry_logger.level
    monkeypatch.setenv("EDITOR_COMMONS_TELEMETRY_LOG_LEVEL", env_value)
    try:
        set_telemetry_log_level()
        assert telemetry_logger.level == expected

        set_telemetry_log_level(logging.INFO)
        assert telemetry_logger.level == logging.INFO
    finally:
        telemetry_logger.setLevel(original)
