"""
SQLite-backed table store for entkit.

This module manages the embedded database that persists entity records:
- One SQLite table per entity type
- One column per indexed field, plus the full record as JSON
- An AUTOINCREMENT integer primary key (ids are never reused)

Invariants:
    - Tables are declared from a compiled StorageIndexSpec, never by hand
    - Every multi-row write runs in a single transaction
    - Declaring an existing table is a no-op

How to change safely:
    - Adding an indexed field to an existing table needs a migration
      (not supported; recreate the database)
    - Use transaction() for all multi-statement writes

Table layout (for ITEM_FIELDS):
    items:
        - id INTEGER PRIMARY KEY AUTOINCREMENT
        - record_json TEXT
        - "createdAt" INTEGER (Unix microseconds, UTC)
        - "updatedAt" INTEGER (Unix microseconds, UTC)
        - "name" TEXT
        - "description" TEXT
        - INDEX on each indexed column
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path

from ..errors import SchemaCompilationError
from ..schema import FieldDef, FieldType, compile_storage_schema
from .table import Table, quote

logger = logging.getLogger(__name__)

COLUMN_TYPES = {
    FieldType.STRING: "TEXT",
    FieldType.NUMBER: "NUMERIC",
    FieldType.DATE_TIME: "INTEGER",
    FieldType.BOOLEAN: "INTEGER",
}


class Database:
    """Embedded transactional table store.

    Example:
        >>> db = Database("/tmp/app.db")
        >>> items = db.define_table("items", ITEM_FIELDS)
        >>> item_id = await items.add({"name": "Les Paul"})
    """

    def __init__(
        self,
        path: str | Path,
        wal_mode: bool = True,
        busy_timeout_ms: int = 5000,
    ) -> None:
        """Initialize the database.

        Args:
            path: SQLite database file
            wal_mode: Enable SQLite WAL mode
            busy_timeout_ms: SQLite busy timeout
        """
        self.path = Path(path)
        self.wal_mode = wal_mode
        self.busy_timeout_ms = busy_timeout_ms
        self._tables: dict[str, Table] = {}

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        """Open a configured connection for one operation.

        Yields:
            SQLite connection in autocommit mode
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(
            str(self.path),
            timeout=self.busy_timeout_ms / 1000.0,
            isolation_level=None,  # Autocommit by default, explicit transactions
        )
        conn.row_factory = sqlite3.Row

        try:
            conn.execute(f"PRAGMA busy_timeout = {self.busy_timeout_ms}")
            if self.wal_mode:
                conn.execute("PRAGMA journal_mode = WAL")
            conn.execute("PRAGMA synchronous = NORMAL")

            yield conn
        finally:
            conn.close()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Open a connection inside an immediate write transaction.

        Commits on success, rolls back and re-raises on any error.
        """
        with self.connect() as conn:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
                conn.execute("COMMIT")
            except Exception:
                conn.execute("ROLLBACK")
                raise

    def define_table(self, name: str, fields: Mapping[str, FieldDef]) -> Table:
        """Declare a table from field definitions.

        Args:
            name: Table name
            fields: Field definitions (base fields included)

        Returns:
            Table handle

        Raises:
            SchemaCompilationError: If the fields declare no auto-increment primary key
        """
        spec = compile_storage_schema(fields)
        if spec.primary_key is None:
            raise SchemaCompilationError(f"Table '{name}' has no auto-increment primary key")

        columns = [f"{quote(spec.primary_key)} INTEGER PRIMARY KEY AUTOINCREMENT"]
        columns.append("record_json TEXT NOT NULL DEFAULT '{}'")
        statements = []
        for index_name in spec.indexes:
            columns.append(f"{quote(index_name)} {COLUMN_TYPES[fields[index_name].type]}")
            statements.append(
                f"CREATE INDEX IF NOT EXISTS {quote(f'idx_{name}_{index_name}')} "
                f"ON {quote(name)}({quote(index_name)});"
            )

        script = f"CREATE TABLE IF NOT EXISTS {quote(name)} ({', '.join(columns)});\n"
        script += "\n".join(statements)

        with self.connect() as conn:
            conn.executescript(script)

        table = Table(self, name, fields, spec)
        self._tables[name] = table
        logger.debug(f"Declared table {name}: {spec}")
        return table

    def table(self, name: str) -> Table:
        """Get a declared table by name.

        Raises:
            KeyError: If the table was never declared
        """
        return self._tables[name]

    @property
    def tables(self) -> list[str]:
        """Names of declared tables."""
        return list(self._tables)
