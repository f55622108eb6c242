"""
Base entity with validation, timestamping and cache resynchronization.

BaseEntity layers the business rules shared by every entity type on top
of BaseOperations:
- createdAt/updatedAt stamping on create, updatedAt on every update
- trimming of string-typed fields before validation
- validate-or-raise before every write
- a full reload into the reactive store after every successful mutation

Invariants:
    - The store always equals load() right after a mutation completes
    - createdAt is never changed after creation
    - A failed write (validation or storage) leaves the store untouched

How to change safely:
    - Keep trimming before validation (blank strings must be rejected)
    - Do not replace the post-mutation reload with incremental patching
      without re-deriving the store invariant
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Type, TypeVar

from ..schema import (
    DB_FIELDS,
    FieldDefinitions,
    FieldType,
    ValidationSchema,
    compile_validation_schema,
    validate_or_raise,
)
from ..storage import Record, Table
from .observable import ReactiveStore
from .operations import BaseOperations, BulkUpdateInput, BulkUpdateOperation, as_bulk_update
from .registry import get_entity_registry

E = TypeVar("E", bound="BaseEntity")

Clock = Callable[[], datetime]

CREATION_EXCLUDED = (DB_FIELDS.ID, DB_FIELDS.CREATED_AT, DB_FIELDS.UPDATED_AT)
UPDATE_EXCLUDED = (DB_FIELDS.ID, DB_FIELDS.CREATED_AT)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BaseEntity(BaseOperations):
    """Entity type with validated, cache-synchronized CRUD.

    Subclasses pass their display name, field definitions and table, and
    are obtained through get_instance() rather than constructed directly.

    Attributes:
        store: Reactive snapshot of all records, newest first
        field_definitions: Field definitions (base fields included)
        validation_schema: Compiled from field_definitions

    Example:
        >>> class ItemEntity(BaseEntity):
        ...     def __init__(self, table=None):
        ...         super().__init__("Item", ITEM_FIELDS, table or get_database().table("items"))
        >>> item_id = await ItemEntity.get_instance().add({"name": "Les Paul"})
    """

    def __init__(
        self,
        entity_name: str,
        field_definitions: FieldDefinitions,
        table: Table,
        clock: Optional[Clock] = None,
    ) -> None:
        table_name = f"{entity_name.lower()}s"
        super().__init__(entity_name, table_name, table)

        self.store: ReactiveStore[List[Record]] = ReactiveStore([])
        self.field_definitions = field_definitions
        self.validation_schema: ValidationSchema = compile_validation_schema(field_definitions)
        self.clock: Clock = clock or utc_now

    def _trim_strings(self, data: dict[str, Any]) -> None:
        for name, field_def in self.field_definitions.items():
            value = data.get(name)
            if field_def.type == FieldType.STRING and isinstance(value, str):
                data[name] = value.strip()

    def create_entity(self, data: Mapping[str, Any]) -> Record:
        """Build a validated record from a creation payload.

        Raises:
            ValidationError: If any rule is violated
        """
        now = self.clock()
        entity = {k: v for k, v in data.items() if k not in CREATION_EXCLUDED}
        entity[DB_FIELDS.CREATED_AT] = now
        entity[DB_FIELDS.UPDATED_AT] = now

        self._trim_strings(entity)
        validate_or_raise(entity, self.validation_schema, self.entity_name)
        return entity

    def create_entity_update(self, changes: Mapping[str, Any]) -> Record:
        """Build validated changes from an update payload.

        Raises:
            ValidationError: If any rule is violated
        """
        update_data = {k: v for k, v in changes.items() if k not in UPDATE_EXCLUDED}
        update_data[DB_FIELDS.UPDATED_AT] = self.clock()

        self._trim_strings(update_data)
        validate_or_raise(update_data, self.validation_schema, f"{self.entity_name} update")
        return update_data

    async def add(self, data: Mapping[str, Any]) -> int:
        entity = self.create_entity(data)
        record_id = await super().add(entity)
        await self.reload_after_operation()
        return record_id

    async def update(self, record_id: int, changes: Mapping[str, Any]) -> None:
        update_data = self.create_entity_update(changes)
        await super().update(record_id, update_data)
        await self.reload_after_operation()

    async def delete(self, record_id: int) -> None:
        await super().delete(record_id)
        await self.reload_after_operation()

    async def bulk_add(self, data: Sequence[Mapping[str, Any]]) -> List[int]:
        entities = [self.create_entity(item) for item in data]
        ids = await super().bulk_add(entities)
        await self.reload_after_operation()
        return ids

    async def bulk_update(self, updates: Iterable[BulkUpdateInput]) -> None:
        validated = [
            BulkUpdateOperation(id=op.id, changes=self.create_entity_update(op.changes))
            for op in map(as_bulk_update, updates)
        ]
        await super().bulk_update(validated)
        await self.reload_after_operation()

    async def bulk_delete(self, ids: Sequence[int]) -> None:
        await super().bulk_delete(ids)
        await self.reload_after_operation()

    async def load(self) -> List[Record]:
        """Load all records and publish them to the store."""
        records = await super().load()
        self.store.set(records)
        return records

    async def reload_after_operation(self) -> None:
        await self.load()

    @classmethod
    def get_instance(cls: Type[E]) -> E:
        """The process-wide instance of this entity type."""
        return get_entity_registry().get(cls)

    @staticmethod
    def create_getter(entity_class: Type[E]) -> Callable[[], E]:
        """Accessor for an entity type's singleton.

        Usage: get_item_entity = BaseEntity.create_getter(ItemEntity)
        """
        return entity_class.get_instance

    @staticmethod
    def create_store_getter(entity_class: Type[BaseEntity]) -> Callable[[], ReactiveStore[List[Record]]]:
        """Accessor for an entity type's reactive store.

        Usage: get_item_store = BaseEntity.create_store_getter(ItemEntity)
        """

        def get_store() -> ReactiveStore[List[Record]]:
            return entity_class.get_instance().store

        return get_store
