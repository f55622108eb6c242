"""
Entity module for entkit.

- BaseOperations: logged CRUD over one table
- BaseEntity: timestamping, trimming, validation and store resync
- ReactiveStore: observable snapshot of an entity type's records
- EntityRegistry: one lazily-built instance per entity type
"""

from .base import BaseEntity, utc_now
from .observable import ReactiveStore
from .operations import BaseOperations, BulkUpdateOperation
from .registry import EntityRegistry, get_entity_registry, reset_entity_registry

__all__ = [
    "BaseEntity",
    "BaseOperations",
    "BulkUpdateOperation",
    "EntityRegistry",
    "ReactiveStore",
    "get_entity_registry",
    "reset_entity_registry",
    "utc_now",
]
