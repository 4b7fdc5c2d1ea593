"""Tests for logging setup."""

import logging

import pytest

from clinic_scheduler.utils.logging import PACKAGE_LOGGER, LogConfig, get_logger, setup_logging

PINNED = ("httpx", "uvicorn.access", "uvicorn.error", PACKAGE_LOGGER)


@pytest.fixture(autouse=True)
def restore_levels():
    """Put pinned logger levels back after each test."""
    saved = {name: logging.getLogger(name).level for name in PINNED}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


class TestSetupLogging:
    """Tests for logger level pins."""

    def test_package_logger_follows_config(self):
        """Test the package logger uses the configured level."""
        setup_logging(LogConfig(level="debug"))

        assert logging.getLogger(PACKAGE_LOGGER).level == logging.DEBUG
        assert logging.getLogger("uvicorn.error").level == logging.INFO

    def test_request_loggers_quietened(self):
        """Test per-request loggers only emit warnings."""
        setup_logging()

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("uvicorn.access").level == logging.WARNING
        assert logging.getLogger(PACKAGE_LOGGER).level == logging.INFO


class TestGetLogger:
    """Tests for module loggers."""

    def test_level_from_env(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "warning")
        assert get_logger("clinic_scheduler.tests.env").level == logging.WARNING

    def test_explicit_level_wins(self, monkeypatch):
        """Test an explicit level overrides LOG_LEVEL."""
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        assert get_logger("clinic_scheduler.tests.explicit", level="error").level == logging.ERROR
