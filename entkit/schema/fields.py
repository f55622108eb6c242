"""
Field definitions for entkit entity types.

A field-definition map (field name -> FieldDef) is the single source of
truth for an entity type. The same map is compiled into:
- a storage index spec (which fields the table store indexes)
- a validation schema (which rule guards which field)

Invariants:
    - Every entity inherits BASE_FIELDS (id, createdAt, updatedAt)
    - Entity-specific names never collide with base field names
    - At most one field carries both auto_increment and primary_key
    - Field names are unique by construction (dict keys)

How to change safely:
    - Add new fields at the end of an entity's map
    - Keep rules pure: (value) -> message or None
    - Never attach a rule to the primary key

Example:
    >>> from entkit.schema import rules
    >>> from entkit.schema.fields import FieldType, create_field_definitions, field
    >>> ITEM_FIELDS = create_field_definitions({
    ...     "name": field(FieldType.STRING, indexed=True, required=True,
    ...                   validate=rules.non_empty_string("Name")),
    ... })
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping, Optional

from ..errors import SchemaCompilationError
from . import rules
from .rules import ValidationFunction


class DB_FIELDS:
    """Names of the engine-managed fields every record carries."""

    ID = "id"
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"


class FieldType(Enum):
    """Primitive field types supported by the engine."""

    STRING = "string"
    NUMBER = "number"
    DATE_TIME = "date"
    BOOLEAN = "boolean"

    @classmethod
    def from_str(cls, value: str) -> FieldType:
        """Convert string representation to FieldType.

        Accepts "Date" and "date-time" as aliases for the date-time type.

        Raises:
            ValueError: If value is not a valid field type
        """
        normalized = value.lower()
        if normalized == "date-time":
            normalized = cls.DATE_TIME.value
        for kind in cls:
            if kind.value == normalized:
                return kind
        valid = [k.value for k in cls]
        raise ValueError(f"Invalid field type '{value}'. Valid types: {valid}")


@dataclass(frozen=True)
class FieldDef:
    """Definition of a single entity attribute.

    Attributes:
        type: Primitive type of the value
        indexed: Whether the table store maintains an index on this field
        required: Whether a value must be present (informational; enforced by rules)
        auto_increment: Whether the store assigns the value on insert
        primary_key: Whether this field is the record key
        validate: Optional pure rule returning a violation message or None
    """

    type: FieldType
    indexed: bool = False
    required: bool = False
    auto_increment: bool = False
    primary_key: bool = False
    validate: Optional[ValidationFunction] = None

    @property
    def is_surrogate_key(self) -> bool:
        """Whether this is the auto-increment primary key."""
        return self.auto_increment and self.primary_key


FieldDefinitions = Dict[str, FieldDef]


def field(
    type: str | FieldType,
    *,
    indexed: bool = False,
    required: bool = False,
    auto_increment: bool = False,
    primary_key: bool = False,
    validate: Optional[ValidationFunction] = None,
) -> FieldDef:
    """Convenience function to create a FieldDef.

    Example:
        >>> email = field("string", indexed=True, required=True,
        ...               validate=rules.email("Email"))
    """
    if isinstance(type, str):
        type = FieldType.from_str(type)
    return FieldDef(
        type=type,
        indexed=indexed,
        required=required,
        auto_increment=auto_increment,
        primary_key=primary_key,
        validate=validate,
    )


BASE_FIELDS: FieldDefinitions = {
    DB_FIELDS.ID: field(
        FieldType.NUMBER,
        indexed=True,
        auto_increment=True,
        primary_key=True,
    ),
    DB_FIELDS.CREATED_AT: field(
        FieldType.DATE_TIME,
        indexed=True,
        validate=rules.date(DB_FIELDS.CREATED_AT),
    ),
    DB_FIELDS.UPDATED_AT: field(
        FieldType.DATE_TIME,
        indexed=True,
        validate=rules.date(DB_FIELDS.UPDATED_AT),
    ),
}


def create_field_definitions(custom_fields: Mapping[str, FieldDef]) -> FieldDefinitions:
    """Merge entity-specific fields on top of the base fields.

    Args:
        custom_fields: Field definitions specific to the entity

    Returns:
        Complete field definitions, base fields first

    Raises:
        SchemaCompilationError: If a custom field reuses a base field name
    """
    for name in custom_fields:
        if name in BASE_FIELDS:
            raise SchemaCompilationError(
                f"Field '{name}' collides with a base field", field_name=name
            )
    return {**BASE_FIELDS, **custom_fields}
