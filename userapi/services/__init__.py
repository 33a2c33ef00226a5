"""Service layer implementations.

Services orchestrate repository operations and translate their outcomes
into tagged results for the HTTP layer.
"""

from .user_service import ErrorKind, Result, UserService

__all__ = [
    'ErrorKind',
    'Result',
    'UserService',
]
