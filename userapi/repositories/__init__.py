"""Repository pattern implementation.

This module provides the data access layer for the users table.
"""

from .base import BaseRepository, is_unique_violation
from .user_repository import UserRepository, UserRepositoryInterface

__all__ = [
    'BaseRepository',
    'UserRepository',
    'UserRepositoryInterface',
    'is_unique_violation',
]
