"""
Schema module for entkit.

This module provides the declarative field-definition system:
- Field definitions (FieldDef, FieldType, field, BASE_FIELDS)
- Schema compilation into storage index specs and validation schemas
- Reusable validation rules and the validator itself

Invariants:
    - A field-definition map is the single source of truth per entity type
    - Storage indexes and validation are both derived from it, never hand-written
"""

from . import rules
from .compiler import (
    IndexDirective,
    StorageIndexSpec,
    ValidationRule,
    ValidationSchema,
    compile_storage_schema,
    compile_validation_schema,
)
from .fields import (
    BASE_FIELDS,
    DB_FIELDS,
    FieldDef,
    FieldDefinitions,
    FieldType,
    create_field_definitions,
    field,
)
from .validator import validate, validate_or_raise

__all__ = [
    # Fields
    "FieldDef",
    "FieldDefinitions",
    "FieldType",
    "field",
    "BASE_FIELDS",
    "DB_FIELDS",
    "create_field_definitions",
    # Compiler
    "IndexDirective",
    "StorageIndexSpec",
    "ValidationRule",
    "ValidationSchema",
    "compile_storage_schema",
    "compile_validation_schema",
    # Validation
    "rules",
    "validate",
    "validate_or_raise",
]
