"""Field definitions for Item."""

from ..schema import FieldType, create_field_definitions, field, rules

ITEM_FIELDS = create_field_definitions(
    {
        "name": field(
            FieldType.STRING,
            indexed=True,
            required=True,
            validate=rules.non_empty_string("Name"),
        ),
        "description": field(
            FieldType.STRING,
            indexed=True,
            validate=rules.string("Description"),
        ),
    }
)
