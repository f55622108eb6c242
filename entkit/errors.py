"""
Error types for entkit.

This module defines the exception types raised by the engine:
- EntityError: Base exception
- SchemaCompilationError: Field definitions that cannot be compiled
- ValidationError: Aggregated field-level violations on a write
- RecordNotFoundError: Target record(s) absent from storage

Storage failures reported by SQLite (sqlite3.Error) are not wrapped;
they are logged by the operations layer and re-raised unchanged.

Invariants:
    - All engine errors inherit from EntityError
    - A raised error never leaves storage or the reactive cache half-updated
    - Error messages are actionable
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class EntityError(Exception):
    """Base exception for all entkit errors.

    Attributes:
        message: Error message
        code: Error code for programmatic handling
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or "ENTITY_ERROR"
        self.details = details or {}


class SchemaCompilationError(EntityError):
    """Field definitions could not be compiled.

    This is a programmer/configuration defect, never a data error.

    Raised when:
    - A field selected for validation has no callable rule
    - More than one field is declared as auto-increment primary key
    - An entity field collides with a base field name
    """

    def __init__(self, message: str, field_name: Optional[str] = None) -> None:
        super().__init__(
            message,
            code="SCHEMA_COMPILATION_ERROR",
            details={"field": field_name},
        )
        self.field_name = field_name


class ValidationError(EntityError):
    """A record failed validation.

    Carries every violation found, not just the first one.

    Attributes:
        label: What was being validated (e.g. "Item", "Item update")
        errors: One message per violated rule
    """

    def __init__(
        self,
        message: str,
        label: Optional[str] = None,
        errors: Optional[List[str]] = None,
    ) -> None:
        super().__init__(
            message,
            code="VALIDATION_ERROR",
            details={"label": label, "errors": errors or []},
        )
        self.label = label
        self.errors = errors or []


class RecordNotFoundError(EntityError):
    """Record not found.

    Raised when:
    - update() targets an id that does not exist
    - bulk_update() references any id that does not exist
    """

    def __init__(
        self,
        message: str,
        table: Optional[str] = None,
        record_id: Optional[int] = None,
    ) -> None:
        super().__init__(
            message,
            code="NOT_FOUND",
            details={"table": table, "record_id": record_id},
        )
        self.table = table
        self.record_id = record_id
