"""Validation module for API input validation.

Provides Marshmallow schemas and the payload validation entry point.
"""

from .schemas import (
    UserCreateSchema, UserUpdateSchema, ValidationOutcome,
    normalize_email, normalize_name, validate_user_payload,
    user_create_schema, user_update_schema,
)

__all__ = [
    'UserCreateSchema', 'UserUpdateSchema', 'ValidationOutcome',
    'normalize_email', 'normalize_name', 'validate_user_payload',
    'user_create_schema', 'user_update_schema',
]
