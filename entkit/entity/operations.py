"""
Generic CRUD operations over one entity table.

BaseOperations wraps a Table handle with add/update/delete/load and
their bulk variants. Every operation logs a diagnostic entry when it
starts, another on success (with the observed data shape), and an error
entry with the input and the caught exception on failure, then
re-raises the exception unchanged.

Invariants:
    - load() returns records newest-createdAt first
    - bulk_update() aborts before any write if any id is missing
    - Bulk operations are single storage transactions
    - Logging never changes return values or control flow
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple, Union

from ..diagnostics import debug_log, error_log
from ..errors import RecordNotFoundError
from ..schema import DB_FIELDS
from ..storage import Record, Table


@dataclass(frozen=True)
class BulkUpdateOperation:
    """One entry of a bulk update.

    Attributes:
        id: Target record id
        changes: Fields to merge onto the stored record
    """

    id: int
    changes: Dict[str, Any]


BulkUpdateInput = Union[
    BulkUpdateOperation, Mapping[str, Any], Tuple[int, Mapping[str, Any]]
]


def as_bulk_update(update: BulkUpdateInput) -> BulkUpdateOperation:
    """Accept a BulkUpdateOperation, an {"id", "changes"} mapping or an (id, changes) pair."""
    if isinstance(update, BulkUpdateOperation):
        return update
    if isinstance(update, Mapping):
        return BulkUpdateOperation(id=update["id"], changes=dict(update["changes"]))
    record_id, changes = update
    return BulkUpdateOperation(id=record_id, changes=dict(changes))


class BaseOperations:
    """Logged CRUD operations for one entity table.

    Attributes:
        entity_name: Display name of the entity type (e.g. "Item")
        table_name: Storage table name (e.g. "items")
        table: Table handle, owned exclusively by this object
    """

    ID_FIELD = DB_FIELDS.ID
    CREATED_AT_FIELD = DB_FIELDS.CREATED_AT
    UPDATED_AT_FIELD = DB_FIELDS.UPDATED_AT

    def __init__(self, entity_name: str, table_name: str, table: Table) -> None:
        self.entity_name = entity_name
        self.table_name = table_name
        self.table = table

    @property
    def component(self) -> str:
        """Diagnostic component name for this entity's log entries."""
        return f"{self.entity_name}Store"

    async def load(self) -> List[Record]:
        """Load all records, newest first."""
        debug_log(self.component, f"Loading {self.table_name} from database...")

        try:
            records = await self.table.to_list(order_by=self.CREATED_AT_FIELD, descending=True)
        except Exception as e:
            error_log(self.component, f"Failed to load {self.table_name}", e)
            raise

        debug_log(
            self.component,
            "Load completed",
            {
                "count": len(records),
                "entities": [
                    {"id": r.get(self.ID_FIELD), "name": r.get("name", "No name")}
                    for r in records
                ],
            },
        )
        return records

    async def add(self, record: Mapping[str, Any]) -> int:
        """Insert one record and return its generated id."""
        label = self.entity_name.lower()
        debug_log(self.component, f"Adding {label}", dict(record))

        try:
            record_id = await self.table.add(record)
        except Exception as e:
            error_log(self.component, f"Failed to add {label}", e, {"record": dict(record)})
            raise

        debug_log(
            self.component,
            f"{self.entity_name} added successfully",
            {"id": record_id, "entity": dict(record)},
        )
        return record_id

    async def update(self, record_id: int, changes: Mapping[str, Any]) -> None:
        """Merge changes onto an existing record.

        Raises:
            RecordNotFoundError: If no record has this id
        """
        label = self.entity_name.lower()
        debug_log(self.component, f"Updating {label}", {"id": record_id, "changes": dict(changes)})

        try:
            await self.table.update(record_id, changes)
        except Exception as e:
            error_log(
                self.component,
                f"Failed to update {label}",
                e,
                {"id": record_id, "changes": dict(changes)},
            )
            raise

        debug_log(
            self.component,
            f"{self.entity_name} updated successfully",
            {"id": record_id, "updated_fields": list(changes)},
        )

    async def delete(self, record_id: int) -> None:
        """Delete one record; deleting a missing id is not an error."""
        label = self.entity_name.lower()
        debug_log(self.component, f"Deleting {label}", {"id": record_id})

        try:
            await self.table.delete(record_id)
        except Exception as e:
            error_log(self.component, f"Failed to delete {label}", e, {"id": record_id})
            raise

        debug_log(self.component, f"{self.entity_name} deleted successfully", {"id": record_id})

    async def bulk_add(self, records: Sequence[Mapping[str, Any]]) -> List[int]:
        """Insert records in one transaction; ids come back in input order."""
        debug_log(
            self.component,
            f"Bulk adding {len(records)} {self.table_name}",
            {"count": len(records)},
        )

        try:
            ids = await self.table.bulk_add(records)
        except Exception as e:
            error_log(
                self.component,
                f"Failed to bulk add {self.table_name}",
                e,
                {"count": len(records), "records": [dict(r) for r in records]},
            )
            raise

        debug_log(
            self.component,
            "Bulk add completed successfully",
            {"count": len(ids), "ids": ids},
        )
        return ids

    async def bulk_update(self, updates: Iterable[BulkUpdateInput]) -> None:
        """Merge changes onto several records in one transaction.

        Fetches every target first; if any id is missing nothing is written.

        Raises:
            RecordNotFoundError: If any id does not exist
        """
        operations = [as_bulk_update(u) for u in updates]
        ids = [op.id for op in operations]
        debug_log(
            self.component,
            f"Bulk updating {len(operations)} {self.table_name}",
            {"count": len(operations), "ids": ids},
        )

        try:
            existing = await self.table.bulk_get(ids)
            merged: List[Record] = []
            for op, current in zip(operations, existing):
                if current is None:
                    raise RecordNotFoundError(
                        f"Entity with id {op.id} not found",
                        table=self.table_name,
                        record_id=op.id,
                    )
                merged.append({**current, **op.changes, self.table.primary_key: op.id})

            await self.table.bulk_put(merged)
        except Exception as e:
            error_log(
                self.component,
                f"Failed to bulk update {self.table_name}",
                e,
                {
                    "count": len(operations),
                    "updates": [{"id": op.id, "changes": op.changes} for op in operations],
                },
            )
            raise

        debug_log(
            self.component,
            "Bulk update completed successfully",
            {"count": len(operations)},
        )

    async def bulk_delete(self, ids: Sequence[int]) -> None:
        """Delete records in one transaction; missing ids are ignored."""
        debug_log(
            self.component,
            f"Bulk deleting {len(ids)} {self.table_name}",
            {"ids": list(ids)},
        )

        try:
            await self.table.bulk_delete(ids)
        except Exception as e:
            error_log(
                self.component,
                f"Failed to bulk delete {self.table_name}",
                e,
                {"ids": list(ids)},
            )
            raise

        debug_log(
            self.component,
            "Bulk delete completed successfully",
            {"count": len(ids), "ids": list(ids)},
        )
