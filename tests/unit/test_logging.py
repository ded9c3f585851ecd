"""
Unit Tests for Logging Configuration
====================================

Tests for the structlog processor chain and stdlib handler configuration.
"""

import structlog

from email_builder.config.logging import build_processors, get_logging_config
from email_builder.config.settings import Settings


def make_settings(environment: str, tmp_path) -> Settings:
    return Settings(_env_file=None, environment=environment, storage_path=tmp_path)


class TestLoggingConfig:
    """Test environment-specific logging configuration."""

    def test_testing_logs_to_console_only(self, tmp_path):
        """Test that tests never write log files."""
        config = get_logging_config(make_settings("testing", tmp_path))

        assert list(config["handlers"]) == ["console"]
        assert config["loggers"][""]["handlers"] == ["console"]
        assert config["handlers"]["console"]["formatter"] == "standard"

    def test_production_adds_rotating_files(self, tmp_path):
        """Test the production handlers and JSON console formatter."""
        config = get_logging_config(make_settings("production", tmp_path))

        assert config["loggers"][""]["handlers"] == ["console", "file", "error_file"]
        assert config["handlers"]["console"]["formatter"] == "json"
        assert config["handlers"]["file"]["filename"] == str(tmp_path / "logs" / "app.log")
        assert config["handlers"]["error_file"]["level"] == "ERROR"
        assert (
            config["formatters"]["json"]["()"] == "pythonjsonlogger.jsonlogger.JsonFormatter"
        )

    def test_request_context_is_merged(self, tmp_path):
        """Test that bound request context reaches every event."""
        processors = build_processors(make_settings("testing", tmp_path))
        assert processors[0] is structlog.contextvars.merge_contextvars

    def test_production_renders_json(self, tmp_path):
        """Test the final renderer per environment."""
        production = build_processors(make_settings("production", tmp_path))
        development = build_processors(make_settings("development", tmp_path))

        assert isinstance(production[-1], structlog.processors.JSONRenderer)
        assert isinstance(development[-1], structlog.dev.ConsoleRenderer)
