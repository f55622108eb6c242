"""
Shared fixtures for entkit tests.
"""

import tempfile
from datetime import datetime, timedelta, timezone

import pytest

from entkit.db import reset_database
from entkit.entities.item_schema import ITEM_FIELDS
from entkit.entities.user_schema import USER_FIELDS
from entkit.entity import reset_entity_registry
from entkit.storage import Database


class FakeClock:
    """Clock that advances by a fixed step on every call."""

    def __init__(self, start=None, step=timedelta(seconds=1)):
        self.now = start or datetime(2026, 1, 1, tzinfo=timezone.utc)
        self.step = step

    def __call__(self):
        self.now += self.step
        return self.now


@pytest.fixture
def data_dir():
    """Create temporary data directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def database(data_dir):
    """Database in the temporary directory."""
    return Database(f"{data_dir}/test.db", wal_mode=False)


@pytest.fixture
def items_table(database):
    """Table declared from the Item field definitions."""
    return database.define_table("items", ITEM_FIELDS)


@pytest.fixture
def users_table(database):
    """Table declared from the User field definitions."""
    return database.define_table("users", USER_FIELDS)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def isolated_app(data_dir, monkeypatch):
    """Point the process-wide database and registry at a fresh directory."""
    monkeypatch.setenv("ENTKIT_DATA_DIR", data_dir)
    monkeypatch.setenv("ENTKIT_WAL_MODE", "false")
    reset_database()
    reset_entity_registry()
    yield data_dir
    reset_database()
    reset_entity_registry()
