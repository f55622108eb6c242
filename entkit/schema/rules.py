"""
Reusable validation rules.

Each constructor takes the display name of a field and returns a pure
rule: (value) -> violation message, or None when the value is acceptable.
Rules receive None for absent fields and decide themselves whether
absence is a violation ("required" rules) or not ("format" rules).
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Callable, Optional

ValidationFunction = Callable[[Any], Optional[str]]

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _is_number(value: Any) -> bool:
    # bool is a subclass of int
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def required(field_name: str) -> ValidationFunction:
    """Reject None and the empty string."""

    def rule(value: Any) -> Optional[str]:
        if value is None or value == "":
            return f"{field_name} is required"
        return None

    return rule


def string(field_name: str) -> ValidationFunction:
    """Type-check only; absence is allowed."""

    def rule(value: Any) -> Optional[str]:
        if value is not None and not isinstance(value, str):
            return f"{field_name} must be a string"
        return None

    return rule


def non_empty_string(field_name: str) -> ValidationFunction:
    """Require a string that is not blank after stripping."""

    def rule(value: Any) -> Optional[str]:
        if not value or not isinstance(value, str):
            return f"{field_name} is required and must be a string"
        if not value.strip():
            return f"{field_name} cannot be empty"
        return None

    return rule


def number(field_name: str) -> ValidationFunction:
    def rule(value: Any) -> Optional[str]:
        if value is not None and not _is_number(value):
            return f"{field_name} must be a number"
        return None

    return rule


def positive_number(field_name: str) -> ValidationFunction:
    def rule(value: Any) -> Optional[str]:
        if value is not None and (not _is_number(value) or value <= 0):
            return f"{field_name} must be a positive number"
        return None

    return rule


def boolean(field_name: str) -> ValidationFunction:
    def rule(value: Any) -> Optional[str]:
        if value is not None and not isinstance(value, bool):
            return f"{field_name} must be a boolean"
        return None

    return rule


def date(field_name: str) -> ValidationFunction:
    """Require a datetime, or nothing at all."""

    def rule(value: Any) -> Optional[str]:
        if value and not isinstance(value, datetime):
            return f"{field_name} must be a datetime"
        return None

    return rule


def email(field_name: str) -> ValidationFunction:
    """Check the address format only when a value is present.

    Pair with required() or non_empty_string() to reject absence.
    """

    def rule(value: Any) -> Optional[str]:
        if value and isinstance(value, str) and not EMAIL_PATTERN.match(value):
            return f"{field_name} must be a valid email address"
        return None

    return rule
