"""
Unit tests for logging configuration.
"""

import logging
from unittest.mock import MagicMock, patch

import pytest
import structlog

from photogallery.logging_config import (
    configure_structured_logging,
    get_log_level,
    get_logger,
    is_development_environment,
    log_error,
    log_performance,
    log_security_event,
    log_user_action,
)


class TestLogLevel:
    @pytest.mark.parametrize("value,expected", [("DEBUG", logging.DEBUG), ("warning", logging.WARNING), ("bogus", logging.INFO)])
    def test_get_log_level(self, monkeypatch, value, expected):
        monkeypatch.setenv("LOG_LEVEL", value)
        assert get_log_level() == expected

    @pytest.mark.parametrize("environment,expected", [("development", True), ("test", True), ("production", False)])
    def test_is_development_environment(self, monkeypatch, environment, expected):
        monkeypatch.setenv("ENVIRONMENT", environment)
        assert is_development_environment() is expected


class TestConfigureStructuredLogging:
    @patch("photogallery.logging_config.structlog.configure")
    def test_development_uses_console_renderer(self, mock_configure, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "development")

        configure_structured_logging()

        processors = mock_configure.call_args.kwargs["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    @patch("photogallery.logging_config.structlog.configure")
    def test_production_uses_json_renderer(self, mock_configure, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")

        configure_structured_logging()

        processors = mock_configure.call_args.kwargs["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)


class TestLogHelpers:
    def test_get_logger_defaults_to_caller_module(self):
        with patch("photogallery.logging_config.structlog.get_logger") as mock_get_logger:
            get_logger()

        mock_get_logger.assert_called_once_with(__name__)

    @patch("photogallery.logging_config.get_logger")
    def test_log_performance(self, mock_get_logger):
        mock_logger = MagicMock()
        mock_get_logger.return_value = mock_logger

        log_performance("resize_image", 0.25, fit="cover")

        mock_logger.info.assert_called_once_with(
            "performance_metric", operation="resize_image", duration_seconds=0.25, fit="cover"
        )

    @patch("photogallery.logging_config.get_logger")
    def test_log_user_action(self, mock_get_logger):
        mock_logger = MagicMock()
        mock_get_logger.return_value = mock_logger

        log_user_action("admin", "delete_photo", photo_id="abc")

        mock_logger.info.assert_called_once()
        assert mock_logger.info.call_args.kwargs["action"] == "delete_photo"
        assert mock_logger.info.call_args.kwargs["photo_id"] == "abc"

    @patch("photogallery.logging_config.get_logger")
    def test_log_error_levels(self, mock_get_logger):
        mock_logger = MagicMock()
        mock_get_logger.return_value = mock_logger
        error = ValueError("bad")

        log_error(error, {"photo_id": "abc"})
        log_error(error, level="warning")

        error_kwargs = mock_logger.error.call_args.kwargs
        assert error_kwargs["error_type"] == "ValueError"
        assert error_kwargs["photo_id"] == "abc"
        assert error_kwargs["exc_info"] is error
        assert "exc_info" not in mock_logger.warning.call_args.kwargs

    @patch("photogallery.logging_config.get_logger")
    def test_log_security_event(self, mock_get_logger):
        mock_logger = MagicMock()
        mock_get_logger.return_value = mock_logger

        log_security_event("login_failed")

        mock_logger.warning.assert_called_once_with("security_event", event_type="login_failed", user_id=None)
