"""Validation schemas for user payloads using Marshmallow.

Input is normalized in a ``pre_load`` hook before the field rules run, so
length limits apply to the normalized value.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from marshmallow import EXCLUDE, Schema, ValidationError, fields, pre_load, validate

FIELD_ORDER = ('name', 'email', 'age')

EMAIL_PATTERN = r'^[^\s@]+@[^\s@]+\.[^\s@]+$'


def normalize_name(value: str) -> str:
    """Collapse whitespace and capitalize each word."""
    return ' '.join(word.capitalize() for word in value.split())


def normalize_email(value: str) -> str:
    return value.strip().lower()


class UserCreateSchema(Schema):
    """Schema for validating user creation requests."""

    class Meta:
        unknown = EXCLUDE

    name = fields.Str(
        required=True,
        validate=[
            validate.Length(min=1, error='Name is required'),
            validate.Length(max=100, error='Name must be 100 characters or less'),
        ],
        error_messages={
            'required': 'Name is required',
            'null': 'Name is required',
            'invalid': 'Name must be a string',
        }
    )

    email = fields.Str(
        required=True,
        validate=[
            validate.Length(min=1, error='Email is required'),
            validate.Length(max=255, error='Email must be 255 characters or less'),
            validate.Regexp(EMAIL_PATTERN, error='Invalid email address'),
        ],
        error_messages={
            'required': 'Email is required',
            'null': 'Email is required',
            'invalid': 'Invalid email address',
        }
    )

    age = fields.Int(
        strict=True,
        allow_none=True,
        validate=validate.Range(min=0, max=150, error='Age must be between 0 and 150'),
        error_messages={'invalid': 'Age must be an integer'}
    )

    @pre_load
    def normalize(self, data, **kwargs):
        """Trim and case-fold string fields before validation.

        JSON has a single number type, so an integral float age such as 30.0
        is accepted as the integer 30.
        """
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if isinstance(data.get('name'), str):
            data['name'] = normalize_name(data['name'])
        if isinstance(data.get('email'), str):
            data['email'] = normalize_email(data['email'])
        age = data.get('age')
        if isinstance(age, float) and age.is_integer():
            data['age'] = int(age)
        return data


class UserUpdateSchema(UserCreateSchema):
    """Schema for validating user update requests; every field is optional."""

    def __init__(self, **kwargs):
        kwargs.setdefault('partial', True)
        super().__init__(**kwargs)


@dataclass
class ValidationOutcome:
    """Normalized fields, or the violations that prevented normalization."""

    data: Dict[str, Any] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def first_error(self) -> Optional[str]:
        return self.errors[0] if self.errors else None


def _flatten_messages(messages: Any) -> List[str]:
    if isinstance(messages, str):
        return [messages]
    if isinstance(messages, dict):
        ordered = [key for key in FIELD_ORDER if key in messages]
        ordered += [key for key in messages if key not in FIELD_ORDER]
        result = []
        for key in ordered:
            result.extend(_flatten_messages(messages[key]))
        return result
    result = []
    for item in messages:
        result.extend(_flatten_messages(item))
    return result


def validate_user_payload(data: Any, partial: bool = False) -> ValidationOutcome:
    """Validate and normalize a create or update payload.

    Args:
        data: Decoded JSON body
        partial: Apply rules only to the fields present (update)

    Returns:
        ValidationOutcome with normalized data or violation messages
    """
    if not isinstance(data, dict):
        return ValidationOutcome(errors=['Request body must be a JSON object'])

    schema = user_update_schema if partial else user_create_schema
    try:
        return ValidationOutcome(data=schema.load(data))
    except ValidationError as err:
        return ValidationOutcome(errors=_flatten_messages(err.messages))


# Schema instances for reuse
user_create_schema = UserCreateSchema()
user_update_schema = UserUpdateSchema()
