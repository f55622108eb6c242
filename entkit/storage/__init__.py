"""
Storage module for entkit.

Embedded, transactional, indexed table store backed by SQLite:
- Database: connection management and table declaration
- Table: per-entity handle with single-row and bulk operations
"""

from .database import Database
from .table import Record, Table

__all__ = [
    "Database",
    "Record",
    "Table",
]
