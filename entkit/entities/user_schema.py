"""Field definitions for User."""

from ..schema import FieldType, create_field_definitions, field, rules

USER_FIELDS = create_field_definitions(
    {
        "email": field(
            FieldType.STRING,
            indexed=True,
            required=True,
            validate=rules.email("Email"),
        ),
        "passwordHash": field(
            FieldType.STRING,
            required=True,
            validate=rules.non_empty_string("Password Hash"),
        ),
    }
)
