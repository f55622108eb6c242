"""
Record validation against a compiled validation schema.

Invariants:
    - Every rule in the schema runs, in schema order (no short-circuit)
    - Only schema fields are checked; extra record keys are ignored
    - validate() is pure: same input, same error list
"""

from __future__ import annotations

from typing import Any, List, Mapping

from ..errors import ValidationError
from .compiler import ValidationSchema


def validate(record: Mapping[str, Any], schema: ValidationSchema) -> List[str]:
    """Collect every violation of schema by record.

    Args:
        record: Candidate record (absent fields are passed to rules as None)
        schema: Compiled validation schema

    Returns:
        List of violation messages (empty if valid)
    """
    errors: List[str] = []
    for field_name, rule in schema.items():
        error = rule.validate(record.get(field_name))
        if error:
            errors.append(error)
    return errors


def validate_or_raise(
    record: Mapping[str, Any],
    schema: ValidationSchema,
    label: str = "Object",
) -> None:
    """Validate record and raise a single aggregated error if invalid.

    Raises:
        ValidationError: If any rule reports a violation
    """
    errors = validate(record, schema)
    if errors:
        raise ValidationError(
            f"{label} validation failed: {', '.join(errors)}",
            label=label,
            errors=errors,
        )
