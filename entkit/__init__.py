"""
entkit - Schema-driven entity persistence and validation.

This package turns a declarative field-definition map into:
- a storage schema for an embedded transactional table store (SQLite)
- a validation schema enforced on every write
- a CRUD facade that keeps a reactive in-memory cache in step with storage

Architecture:
    ┌──────────────┐     ┌───────────────┐     ┌────────────────┐
    │ Caller (UI / │────▶│  BaseEntity   │────▶│ BaseOperations │
    │   service)   │     │ stamp / trim /│     │  logged CRUD   │
    └──────────────┘     │   validate    │     └───────┬────────┘
           ▲             └───────┬───────┘             │
           │                     │ load()              ▼
    ┌──────┴───────┐             │             ┌────────────────┐
    │ReactiveStore │◀────────────┘             │  Table (SQLite)│
    └──────────────┘                           └────────────────┘

Invariants:
    - Field definitions are the single source of truth per entity type
    - Every write is validated; violations are reported all at once
    - After any successful mutation the store equals a full load()
    - One entity instance (and one store) per entity type per process

How to change safely:
    - Add entity types as <type>_schema + <type> modules under entities/
    - Declare their tables in AppDatabase
    - Never write to an entity's store outside BaseEntity.load()
"""

from ._version import __version__
from .entities.item import ItemEntity, get_item_entity, get_item_store
from .entities.user import UserEntity, get_user_entity, get_user_store
from .errors import EntityError, RecordNotFoundError, SchemaCompilationError, ValidationError

__all__ = [
    "__version__",
    # Entities
    "ItemEntity",
    "UserEntity",
    "get_item_entity",
    "get_item_store",
    "get_user_entity",
    "get_user_store",
    # Errors
    "EntityError",
    "RecordNotFoundError",
    "SchemaCompilationError",
    "ValidationError",
]
