"""
Singleton registry for entity instances.

Each entity type has exactly one process-wide instance, created lazily
on first access and kept for the life of the process. Every mutation
resynchronizes that instance's reactive store, so a second instance
would fragment the cache and silently desynchronize observers.

Invariants:
    - At most one instance per entity class
    - Construction happens at most once, even under concurrent first access
    - Instances are never torn down (reset_entity_registry is for tests)

Example:
    >>> entity = get_entity_registry().get(ItemEntity)
    >>> entity is get_entity_registry().get(ItemEntity)
    True
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional, Type, TypeVar

logger = logging.getLogger(__name__)

E = TypeVar("E")

# Global registry instance
_global_registry: Optional[EntityRegistry] = None
_registry_lock = threading.Lock()


class EntityRegistry:
    """Map from entity class to its lazily-constructed instance.

    Thread-safety:
        Construction is guarded by an internal lock; lookups of an
        existing instance do not take the lock.
    """

    def __init__(self) -> None:
        self._instances: Dict[type, Any] = {}
        self._lock = threading.Lock()

    def get(self, entity_class: Type[E]) -> E:
        """Get the instance of entity_class, constructing it on first access."""
        instance = self._instances.get(entity_class)
        if instance is not None:
            return instance

        with self._lock:
            instance = self._instances.get(entity_class)
            if instance is None:
                instance = entity_class()
                self._instances[entity_class] = instance
                logger.debug(f"Created singleton instance of {entity_class.__name__}")
            return instance

    def __contains__(self, entity_class: type) -> bool:
        return entity_class in self._instances

    def __len__(self) -> int:
        return len(self._instances)


def get_entity_registry() -> EntityRegistry:
    """Get the global entity registry.

    Creates a new registry if none exists.
    """
    global _global_registry
    with _registry_lock:
        if _global_registry is None:
            _global_registry = EntityRegistry()
        return _global_registry


def reset_entity_registry() -> None:
    """Reset the global registry (for testing only).

    Warning: This is intended for test cleanup only.
    Never use in production code.
    """
    global _global_registry
    with _registry_lock:
        _global_registry = None
