"""
Application database for entkit.

Declares one table per entity type, straight from each type's field
definitions, and holds the process-wide database instance.

Invariants:
    - Tables are declared from field definitions, never by hand
    - One database instance per process (reset_database is for tests)
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from .config import Settings
from .entities.item_schema import ITEM_FIELDS
from .entities.user_schema import USER_FIELDS
from .storage import Database, Table

logger = logging.getLogger(__name__)

_database: Optional[AppDatabase] = None
_database_lock = threading.Lock()


class AppDatabase(Database):
    """Database with the items and users tables declared.

    Attributes:
        items: Item table
        users: User table
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        settings = settings or Settings()
        super().__init__(
            settings.database_path,
            wal_mode=settings.wal_mode,
            busy_timeout_ms=settings.busy_timeout_ms,
        )

        self.items: Table = self.define_table("items", ITEM_FIELDS)
        self.users: Table = self.define_table("users", USER_FIELDS)
        logger.info(f"Opened database at {self.path} with tables {self.tables}")


def get_database() -> AppDatabase:
    """Get the process-wide database, opening it on first access."""
    global _database
    with _database_lock:
        if _database is None:
            _database = AppDatabase()
        return _database


def reset_database() -> None:
    """Forget the process-wide database (for testing only)."""
    global _database
    with _database_lock:
        _database = None
