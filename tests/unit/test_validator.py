"""
Unit tests for validation rules and the validator.

Tests cover:
- Each reusable rule
- Error collection order and aggregation
- ValidationError contents
"""

from datetime import datetime, timezone

import pytest

from entkit.entities.item_schema import ITEM_FIELDS
from entkit.entities.user_schema import USER_FIELDS
from entkit.errors import EntityError, ValidationError
from entkit.schema import compile_validation_schema, rules, validate, validate_or_raise


class TestRules:
    """Tests for the reusable rule constructors."""

    def test_required(self):
        """None and empty string are missing; other values pass."""
        rule = rules.required("Name")
        assert rule(None) == "Name is required"
        assert rule("") == "Name is required"
        assert rule(0) is None
        assert rule("x") is None

    def test_string(self):
        """Only present non-strings fail."""
        rule = rules.string("Description")
        assert rule(None) is None
        assert rule("") is None
        assert rule(5) == "Description must be a string"

    def test_non_empty_string(self):
        """Absent, non-string and blank values fail with distinct messages."""
        rule = rules.non_empty_string("Name")
        assert rule(None) == "Name is required and must be a string"
        assert rule("") == "Name is required and must be a string"
        assert rule(12) == "Name is required and must be a string"
        assert rule("   ") == "Name cannot be empty"
        assert rule("Les Paul") is None

    def test_number(self):
        """Booleans are not numbers."""
        rule = rules.number("Price")
        assert rule(None) is None
        assert rule(3.5) is None
        assert rule(True) == "Price must be a number"
        assert rule("3") == "Price must be a number"

    def test_positive_number(self):
        rule = rules.positive_number("Quantity")
        assert rule(1) is None
        assert rule(0) == "Quantity must be a positive number"
        assert rule(-2.5) == "Quantity must be a positive number"

    def test_boolean(self):
        rule = rules.boolean("Active")
        assert rule(False) is None
        assert rule(1) == "Active must be a boolean"

    def test_date(self):
        """Present non-datetime values fail."""
        rule = rules.date("Created At")
        assert rule(None) is None
        assert rule(datetime(2026, 1, 1, tzinfo=timezone.utc)) is None
        assert rule("2026-01-01") == "Created At must be a datetime"

    def test_email(self):
        """Format is only checked when a value is present."""
        rule = rules.email("Email")
        assert rule(None) is None
        assert rule("") is None
        assert rule("a@b.co") is None
        assert rule("bad") == "Email must be a valid email address"
        assert rule("a b@c.d") == "Email must be a valid email address"


class TestValidate:
    """Tests for validate()."""

    def test_valid_record(self):
        """A record satisfying every rule yields no errors."""
        schema = compile_validation_schema(ITEM_FIELDS)
        assert validate({"name": "Guitar", "description": "Sunburst"}, schema) == []

    def test_all_errors_collected_in_order(self):
        """Every rule runs; errors come back in schema order."""
        schema = compile_validation_schema(USER_FIELDS)
        errors = validate({"email": "not-an-email", "passwordHash": ""}, schema)
        assert errors == [
            "Email must be a valid email address",
            "Password Hash is required and must be a string",
        ]

    def test_absent_fields_passed_as_none(self):
        """Missing required fields are reported."""
        schema = compile_validation_schema(ITEM_FIELDS)
        assert validate({}, schema) == ["Name is required and must be a string"]

    def test_extra_keys_ignored(self):
        """Keys outside the schema are not checked."""
        schema = compile_validation_schema(ITEM_FIELDS)
        assert validate({"name": "x", "color": 42}, schema) == []

    def test_pure(self):
        """Same input, same output."""
        schema = compile_validation_schema(USER_FIELDS)
        record = {"email": "bad"}
        assert validate(record, schema) == validate(record, schema)


class TestValidateOrRaise:
    """Tests for validate_or_raise()."""

    def test_passes_silently(self):
        schema = compile_validation_schema(ITEM_FIELDS)
        validate_or_raise({"name": "Guitar"}, schema, "Item")

    def test_aggregated_message(self):
        """Errors are joined into one message prefixed by the label."""
        schema = compile_validation_schema(USER_FIELDS)
        with pytest.raises(ValidationError) as exc_info:
            validate_or_raise({"email": "bad"}, schema, "User")

        error = exc_info.value
        assert str(error) == (
            "User validation failed: Email must be a valid email address, "
            "Password Hash is required and must be a string"
        )
        assert error.label == "User"
        assert len(error.errors) == 2
        assert error.code == "VALIDATION_ERROR"
        assert isinstance(error, EntityError)

    def test_default_label(self):
        schema = compile_validation_schema(ITEM_FIELDS)
        with pytest.raises(ValidationError, match="^Object validation failed"):
            validate_or_raise({}, schema)
