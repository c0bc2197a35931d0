"""Tests for logging configuration."""

import logging

import pytest
from shared.logging import configure_logging, default_level


@pytest.fixture()
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


class TestDefaultLevel:
    def test_per_environment(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        assert default_level("production") == "INFO"
        assert default_level("development") == "DEBUG"
        assert default_level("test") == "WARNING"
        assert default_level("unknown") == "INFO"

    def test_environment_variable_wins(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        assert default_level("development") == "ERROR"


class TestConfigureLogging:
    def test_console_only_without_log_dir(self, restore_root_logger):
        configure_logging(level="info", log_dir=None, env="test")
        assert restore_root_logger.level == logging.INFO
        assert len(restore_root_logger.handlers) == 1

    def test_rotating_files_in_log_dir(self, restore_root_logger, tmp_path):
        log_dir = tmp_path / "logs"
        configure_logging(level="DEBUG", log_dir=str(log_dir), log_file_prefix="orders", env="production")

        assert len(restore_root_logger.handlers) == 3
        assert (log_dir / "orders.log").exists()
        assert (log_dir / "orders_error.log").exists()
