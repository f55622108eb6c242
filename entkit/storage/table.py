"""
Table handle for the entkit table store.

A Table exposes the storage operations the engine consumes:
add, update, delete, get, bulk_get, bulk_add, bulk_put, bulk_delete
and an ordered scan (to_list). All operations are coroutines; the
blocking SQLite work runs in the default executor, so callers suspend
at storage I/O.

Invariants:
    - Each bulk call is one transaction (all-or-nothing)
    - update() on a missing id raises RecordNotFoundError
    - delete() and bulk_delete() on missing ids are no-ops
    - Index columns always mirror the JSON record
"""

from __future__ import annotations

import asyncio
import functools
import json
import sqlite3
from collections.abc import Mapping, Sequence
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any, Callable, Optional, TypeVar

from ..errors import RecordNotFoundError
from ..schema import FieldDef, FieldType, StorageIndexSpec

if TYPE_CHECKING:
    from .database import Database

T = TypeVar("T")

Record = dict[str, Any]

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def quote(identifier: str) -> str:
    """Quote an SQL identifier."""
    return '"' + identifier.replace('"', '""') + '"'


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _index_value(value: Any) -> Any:
    """Convert a field value to its sortable SQLite column value."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return (value - EPOCH) // timedelta(microseconds=1)
    if isinstance(value, bool):
        return int(value)
    return value


class Table:
    """Handle on one entity table.

    Attributes:
        name: Table name
        fields: Field definitions the table was declared from
        spec: Compiled storage index spec
    """

    def __init__(
        self,
        database: Database,
        name: str,
        fields: Mapping[str, FieldDef],
        spec: StorageIndexSpec,
    ) -> None:
        self.database = database
        self.name = name
        self.fields = dict(fields)
        self.spec = spec
        self.primary_key: str = spec.primary_key or "id"
        self._date_fields = [n for n, f in self.fields.items() if f.type == FieldType.DATE_TIME]

    # Encoding

    def _encode(self, record: Mapping[str, Any]) -> list[Any]:
        """Row values for record_json followed by each index column."""
        payload = {k: v for k, v in record.items() if k != self.primary_key}
        values: list[Any] = [json.dumps(payload, default=_json_default)]
        values.extend(_index_value(record.get(name)) for name in self.spec.indexes)
        return values

    def _decode(self, row: sqlite3.Row) -> Record:
        payload = json.loads(row["record_json"])
        for name in self._date_fields:
            # Blank strings pass the date rule as "omitted"
            if isinstance(payload.get(name), str) and payload[name]:
                payload[name] = datetime.fromisoformat(payload[name])
        return {self.primary_key: row[self.primary_key], **payload}

    def _check_column(self, field_name: str) -> str:
        if field_name != self.primary_key and field_name not in self.spec.indexes:
            raise ValueError(f"Field '{field_name}' is not indexed on table '{self.name}'")
        return quote(field_name)

    def _insert_statement(self, verb: str, with_key: bool) -> str:
        columns = ["record_json", *(quote(c) for c in self.spec.indexes)]
        if with_key:
            columns.insert(0, quote(self.primary_key))
        placeholders = ", ".join("?" * len(columns))
        return f"{verb} INTO {quote(self.name)} ({', '.join(columns)}) VALUES ({placeholders})"

    @functools.cached_property
    def _update_sql(self) -> str:
        assignments = ", ".join(
            ["record_json = ?", *(f"{quote(c)} = ?" for c in self.spec.indexes)]
        )
        return f"UPDATE {quote(self.name)} SET {assignments} WHERE {quote(self.primary_key)} = ?"

    @functools.cached_property
    def _select_sql(self) -> str:
        return f"SELECT {quote(self.primary_key)}, record_json FROM {quote(self.name)}"

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(func, *args))

    # Synchronous implementations (run in executor)

    def _insert(self, conn: sqlite3.Connection, record: Mapping[str, Any]) -> int:
        key = record.get(self.primary_key)
        if key is None:
            cursor = conn.execute(self._insert_statement("INSERT", False), self._encode(record))
        else:
            cursor = conn.execute(
                self._insert_statement("INSERT", True), [key, *self._encode(record)]
            )
        return int(cursor.lastrowid)

    def _fetch(self, conn: sqlite3.Connection, key: int) -> Optional[Record]:
        row = conn.execute(
            f"{self._select_sql} WHERE {quote(self.primary_key)} = ?", (key,)
        ).fetchone()
        return self._decode(row) if row else None

    def _add_sync(self, record: Mapping[str, Any]) -> int:
        with self.database.transaction() as conn:
            return self._insert(conn, record)

    def _bulk_add_sync(self, records: Sequence[Mapping[str, Any]]) -> list[int]:
        with self.database.transaction() as conn:
            return [self._insert(conn, record) for record in records]

    def _update_sync(self, key: int, changes: Mapping[str, Any]) -> None:
        if self.primary_key in changes and changes[self.primary_key] != key:
            raise ValueError(f"Primary key '{self.primary_key}' cannot be changed")
        with self.database.transaction() as conn:
            existing = self._fetch(conn, key)
            if existing is None:
                raise RecordNotFoundError(
                    f"Entity with id {key} not found", table=self.name, record_id=key
                )
            merged = {**existing, **changes, self.primary_key: key}
            conn.execute(self._update_sql, [*self._encode(merged), key])

    def _bulk_put_sync(self, records: Sequence[Mapping[str, Any]]) -> None:
        with self.database.transaction() as conn:
            for record in records:
                key = record.get(self.primary_key)
                if key is None:
                    self._insert(conn, record)
                else:
                    conn.execute(
                        self._insert_statement("INSERT OR REPLACE", True),
                        [key, *self._encode(record)],
                    )

    def _bulk_delete_sync(self, keys: Sequence[int]) -> None:
        with self.database.transaction() as conn:
            conn.executemany(
                f"DELETE FROM {quote(self.name)} WHERE {quote(self.primary_key)} = ?",
                [(key,) for key in keys],
            )

    def _bulk_get_sync(self, keys: Sequence[int]) -> list[Optional[Record]]:
        with self.database.connect() as conn:
            return [self._fetch(conn, key) for key in keys]

    def _query_sync(self, sql: str, params: Sequence[Any] = ()) -> list[Record]:
        with self.database.connect() as conn:
            return [self._decode(row) for row in conn.execute(sql, params).fetchall()]

    def _count_sync(self, sql: str, params: Sequence[Any]) -> int:
        with self.database.connect() as conn:
            return int(conn.execute(sql, params).fetchone()[0])

    # Storage boundary

    async def add(self, record: Mapping[str, Any]) -> int:
        """Insert one record and return its generated id."""
        return await self._run(self._add_sync, record)

    async def update(self, key: int, changes: Mapping[str, Any]) -> None:
        """Merge changes onto an existing record.

        Raises:
            RecordNotFoundError: If no record has this id
        """
        await self._run(self._update_sync, key, changes)

    async def delete(self, key: int) -> None:
        """Delete one record; missing ids are ignored."""
        await self._run(self._bulk_delete_sync, [key])

    async def get(self, key: int) -> Optional[Record]:
        """Get one record, or None if absent."""
        return (await self._run(self._bulk_get_sync, [key]))[0]

    async def bulk_get(self, keys: Sequence[int]) -> list[Optional[Record]]:
        """Get records aligned with keys; absent ids yield None."""
        return await self._run(self._bulk_get_sync, list(keys))

    async def bulk_add(self, records: Sequence[Mapping[str, Any]]) -> list[int]:
        """Insert records in one transaction; ids are returned in input order."""
        return await self._run(self._bulk_add_sync, list(records))

    async def bulk_put(self, records: Sequence[Mapping[str, Any]]) -> None:
        """Insert or replace full records by primary key in one transaction."""
        await self._run(self._bulk_put_sync, list(records))

    async def bulk_delete(self, keys: Sequence[int]) -> None:
        """Delete records in one transaction; missing ids are ignored."""
        await self._run(self._bulk_delete_sync, list(keys))

    async def to_list(self, order_by: Optional[str] = None, descending: bool = False) -> list[Record]:
        """All records, ordered by an indexed field (ties broken by id).

        Raises:
            ValueError: If order_by is not an indexed field
        """
        direction = "DESC" if descending else "ASC"
        order = f"{quote(self.primary_key)} {direction}"
        if order_by is not None and order_by != self.primary_key:
            order = f"{self._check_column(order_by)} {direction}, {order}"
        return await self._run(self._query_sync, f"{self._select_sql} ORDER BY {order}")

    async def first_where(self, field_name: str, value: Any) -> Optional[Record]:
        """First record (lowest id) whose indexed field equals value."""
        column = self._check_column(field_name)
        rows = await self._run(
            self._query_sync,
            f"{self._select_sql} WHERE {column} = ? ORDER BY {quote(self.primary_key)} LIMIT 1",
            [_index_value(value)],
        )
        return rows[0] if rows else None

    async def count_where(self, field_name: str, value: Any) -> int:
        """Number of records whose indexed field equals value."""
        column = self._check_column(field_name)
        return await self._run(
            self._count_sync,
            f"SELECT COUNT(*) FROM {quote(self.name)} WHERE {column} = ?",
            [_index_value(value)],
        )
