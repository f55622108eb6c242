"""
Unit tests for settings and diagnostic logging setup.
"""

import logging
from pathlib import Path

import json_log_formatter
import pytest

from entkit.config import Settings
from entkit.diagnostics import error_log, get_logger, info_log, setup_logging, warn_log


@pytest.fixture
def restore_root_logger():
    """Put the root logger back after setup_logging replaces its handlers."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch):
        for name in Settings.model_fields:
            monkeypatch.delenv(f"ENTKIT_{name.upper()}", raising=False)

        settings = Settings()

        assert settings.database_path == Path(".entkit") / "app.db"
        assert settings.wal_mode is True
        assert settings.busy_timeout_ms == 5000
        assert settings.log_level == "INFO"
        assert settings.log_format == "text"

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("ENTKIT_DATA_DIR", "/var/lib/entkit")
        monkeypatch.setenv("ENTKIT_DATABASE_NAME", "prod.db")
        monkeypatch.setenv("ENTKIT_WAL_MODE", "false")

        settings = Settings()

        assert settings.database_path == Path("/var/lib/entkit/prod.db")
        assert settings.wal_mode is False


class TestLogging:
    """Tests for setup_logging and the log helpers."""

    def test_json_format(self, restore_root_logger):
        setup_logging(Settings(log_format="json", log_level="DEBUG"))

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, json_log_formatter.JSONFormatter)

    def test_text_format(self, restore_root_logger):
        setup_logging(Settings(log_format="text", log_level="warning"))

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert not isinstance(root.handlers[0].formatter, json_log_formatter.JSONFormatter)

    def test_component_logger_namespace(self):
        assert get_logger("ItemStore").name == "entkit.ItemStore"

    def test_helpers_attach_component_and_data(self, caplog):
        caplog.set_level(logging.INFO, logger="entkit")

        info_log("UserStore", "ready", {"count": 2})
        warn_log("UserStore", "slow")

        info, warning = caplog.records
        assert info.getMessage() == "[UserStore] ready"
        assert info.data == {"count": 2}
        assert warning.levelno == logging.WARNING
        assert warning.component == "UserStore"

    def test_error_log_carries_exception(self, caplog):
        error = RuntimeError("disk full")

        error_log("ItemStore", "Failed to add item", error, {"record": {}})

        (record,) = caplog.records
        assert record.getMessage() == "[ItemStore] Failed to add item: disk full"
        assert record.exc_info[1] is error
