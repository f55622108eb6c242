"""
Unit tests for field definitions and the schema compiler.

Tests cover:
- FieldDef / FieldType creation
- Base field merging and collisions
- Storage index spec compilation
- Validation schema compilation
"""

import pytest

from entkit.entities.item_schema import ITEM_FIELDS
from entkit.entities.user_schema import USER_FIELDS
from entkit.errors import SchemaCompilationError
from entkit.schema import (
    BASE_FIELDS,
    DB_FIELDS,
    FieldDef,
    FieldType,
    IndexDirective,
    compile_storage_schema,
    compile_validation_schema,
    create_field_definitions,
    field,
    rules,
)


class TestFieldDef:
    """Tests for FieldDef and field()."""

    def test_create_string_field(self):
        """String field can be created from a type name."""
        f = field("string", indexed=True, required=True)
        assert f.type == FieldType.STRING
        assert f.indexed is True
        assert f.required is True
        assert f.validate is None

    def test_date_alias(self):
        """'Date' and 'date-time' are accepted for the date-time type."""
        assert FieldType.from_str("Date") == FieldType.DATE_TIME
        assert FieldType.from_str("date") == FieldType.DATE_TIME
        assert field("date-time").type == FieldType.DATE_TIME

    def test_invalid_type_raises(self):
        """Unknown type names raise ValueError."""
        with pytest.raises(ValueError, match="Invalid field type"):
            field("uuid")

    def test_defaults_are_optional(self):
        """Absence of flags means optional, unindexed."""
        f = FieldDef(type=FieldType.NUMBER)
        assert not f.required
        assert not f.indexed
        assert not f.is_surrogate_key


class TestBaseFields:
    """Tests for BASE_FIELDS and create_field_definitions."""

    def test_base_fields(self):
        """Every entity carries id, createdAt and updatedAt."""
        assert list(BASE_FIELDS) == [DB_FIELDS.ID, DB_FIELDS.CREATED_AT, DB_FIELDS.UPDATED_AT]
        assert BASE_FIELDS[DB_FIELDS.ID].is_surrogate_key
        assert BASE_FIELDS[DB_FIELDS.ID].validate is None
        assert BASE_FIELDS[DB_FIELDS.CREATED_AT].type == FieldType.DATE_TIME
        assert BASE_FIELDS[DB_FIELDS.UPDATED_AT].indexed

    def test_custom_fields_follow_base_fields(self):
        """Custom fields are merged after the base fields."""
        fields = create_field_definitions({"title": field("string")})
        assert list(fields) == ["id", "createdAt", "updatedAt", "title"]

    def test_collision_with_base_field_raises(self):
        """Entity fields cannot reuse base field names."""
        with pytest.raises(SchemaCompilationError, match="collides"):
            create_field_definitions({"createdAt": field("string")})


class TestCompileStorageSchema:
    """Tests for compile_storage_schema."""

    def test_item_spec(self):
        """Indexed fields are emitted in declaration order."""
        spec = compile_storage_schema(ITEM_FIELDS)
        assert spec.primary_key == "id"
        assert spec.indexes == ["createdAt", "updatedAt", "name", "description"]
        assert str(spec) == "++id, createdAt, updatedAt, name, description"

    def test_unindexed_fields_skipped(self):
        """Fields without indexed are not emitted."""
        spec = compile_storage_schema(USER_FIELDS)
        assert "passwordHash" not in spec.indexes
        assert "email" in spec.indexes

    def test_primary_directive(self):
        """The surrogate key directive is flagged primary."""
        spec = compile_storage_schema(BASE_FIELDS)
        assert spec.directives[0] == IndexDirective("id", primary=True)

    def test_no_primary_key(self):
        """A map without a surrogate key compiles to indexes only."""
        spec = compile_storage_schema({"name": field("string", indexed=True)})
        assert spec.primary_key is None
        assert str(spec) == "name"

    def test_two_primary_keys_raise(self):
        """At most one auto-increment primary key is allowed."""
        fields = {
            "id": field("number", auto_increment=True, primary_key=True),
            "other_id": field("number", auto_increment=True, primary_key=True),
        }
        with pytest.raises(SchemaCompilationError, match="both auto-increment"):
            compile_storage_schema(fields)


class TestCompileValidationSchema:
    """Tests for compile_validation_schema."""

    def test_only_fields_with_rules(self):
        """Fields without a rule are left out."""
        schema = compile_validation_schema(ITEM_FIELDS)
        assert list(schema) == ["createdAt", "updatedAt", "name", "description"]
        assert "id" not in schema

    def test_rule_is_kept(self):
        """The compiled rule is the declared function."""
        rule = rules.non_empty_string("Title")
        schema = compile_validation_schema({"title": field("string", validate=rule)})
        assert schema["title"].validate is rule

    def test_non_callable_rule_raises(self):
        """A declared rule that is not callable is a compilation error."""
        fields = {"title": FieldDef(type=FieldType.STRING, validate="required")}
        with pytest.raises(SchemaCompilationError, match="missing validation function"):
            compile_validation_schema(fields)

    def test_deterministic(self):
        """Compiling twice yields equal schemas."""
        assert compile_validation_schema(USER_FIELDS) == compile_validation_schema(USER_FIELDS)
