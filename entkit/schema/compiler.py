"""
Schema compiler for entkit.

Pure functions deriving the two artifacts an entity type needs from its
field definitions:
- compile_storage_schema: which fields the table store indexes, and
  which field is the auto-increment primary key
- compile_validation_schema: field name -> rule, for fields that declare one

Invariants:
    - Output order follows declaration order
    - Compilation is deterministic and side-effect free
    - Compilation errors are programmer defects (SchemaCompilationError)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from ..errors import SchemaCompilationError
from .fields import FieldDef
from .rules import ValidationFunction


@dataclass(frozen=True)
class IndexDirective:
    """One index entry of a storage index spec.

    Attributes:
        field_name: Indexed field
        primary: Whether this is the auto-increment primary key
    """

    field_name: str
    primary: bool = False

    def __str__(self) -> str:
        return f"++{self.field_name}" if self.primary else self.field_name


@dataclass(frozen=True)
class StorageIndexSpec:
    """Index directives for one table, in declaration order."""

    directives: tuple[IndexDirective, ...] = field(default_factory=tuple)

    @property
    def primary_key(self) -> Optional[str]:
        """Name of the auto-increment primary key, if any."""
        for directive in self.directives:
            if directive.primary:
                return directive.field_name
        return None

    @property
    def indexes(self) -> list[str]:
        """Secondary index field names."""
        return [d.field_name for d in self.directives if not d.primary]

    def __str__(self) -> str:
        return ", ".join(str(d) for d in self.directives)


@dataclass(frozen=True)
class ValidationRule:
    """A compiled validation rule for one field."""

    validate: ValidationFunction


ValidationSchema = Dict[str, ValidationRule]


def compile_storage_schema(fields: Mapping[str, FieldDef]) -> StorageIndexSpec:
    """Derive the storage index spec from field definitions.

    Args:
        fields: Field definitions (base fields included)

    Returns:
        StorageIndexSpec with one directive per indexed or surrogate-key field

    Raises:
        SchemaCompilationError: If more than one field is an auto-increment primary key

    Example:
        >>> str(compile_storage_schema(ITEM_FIELDS))
        '++id, createdAt, updatedAt, name, description'
    """
    directives: list[IndexDirective] = []
    primary: Optional[str] = None

    for name, field_def in fields.items():
        if field_def.is_surrogate_key:
            if primary is not None:
                raise SchemaCompilationError(
                    f"Fields '{primary}' and '{name}' are both auto-increment primary keys",
                    field_name=name,
                )
            primary = name
            directives.append(IndexDirective(name, primary=True))
        elif field_def.indexed:
            directives.append(IndexDirective(name))

    return StorageIndexSpec(tuple(directives))


def compile_validation_schema(fields: Mapping[str, FieldDef]) -> ValidationSchema:
    """Derive the validation schema from field definitions.

    Only fields that declare a rule are included.

    Raises:
        SchemaCompilationError: If a declared rule is not callable
    """
    schema: ValidationSchema = {}
    for name, field_def in fields.items():
        if field_def.validate is None:
            continue
        if not callable(field_def.validate):
            raise SchemaCompilationError(
                f"Field {name} is missing validation function", field_name=name
            )
        schema[name] = ValidationRule(validate=field_def.validate)
    return schema
