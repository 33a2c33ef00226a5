"""User service.

Wraps the user repository and reports every outcome as a tagged Result
instead of raising for expected failures.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from userapi.exceptions import DuplicateEmailError
from userapi.models import User
from userapi.repositories import UserRepositoryInterface

logger = logging.getLogger(__name__)

T = TypeVar('T')


class ErrorKind(str, Enum):
    """Failure kinds a service call can report."""

    NOT_FOUND = 'not_found'
    EMAIL_EXISTS = 'email_exists'
    DATABASE_ERROR = 'database_error'


@dataclass(frozen=True)
class Result(Generic[T]):
    """Success carrying data, or failure carrying an ErrorKind."""

    success: bool
    data: Optional[T] = None
    error: Optional[ErrorKind] = None

    @classmethod
    def ok(cls, data: Optional[T] = None) -> 'Result[T]':
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: ErrorKind) -> 'Result[T]':
        return cls(success=False, error=error)


class UserService:
    """CRUD operations on users."""

    def __init__(self, user_repo: UserRepositoryInterface):
        """Initialize user service.

        Args:
            user_repo: Storage port for users
        """
        self.user_repo = user_repo

    def get_all_users(self) -> Result[List[User]]:
        """List users, newest first."""
        try:
            return Result.ok(self.user_repo.get_all())
        except SQLAlchemyError:
            logger.exception("Failed to list users")
            return Result.fail(ErrorKind.DATABASE_ERROR)

    def get_user_by_id(self, user_id: int) -> Result[User]:
        """Fetch one user."""
        try:
            user = self.user_repo.get_by_id(user_id)
        except SQLAlchemyError:
            logger.exception(f"Failed to fetch user {user_id}")
            return Result.fail(ErrorKind.DATABASE_ERROR)

        if user is None:
            return Result.fail(ErrorKind.NOT_FOUND)
        return Result.ok(user)

    def create_user(self, user_data: Dict[str, Any]) -> Result[User]:
        """Create a user from already validated fields.

        Args:
            user_data: name, email and optional age

        Returns:
            Result with the created user, or EMAIL_EXISTS / DATABASE_ERROR
        """
        try:
            user = self.user_repo.create(
                name=user_data['name'],
                email=user_data['email'],
                age=user_data.get('age'),
            )
            return Result.ok(user)
        except DuplicateEmailError:
            return Result.fail(ErrorKind.EMAIL_EXISTS)
        except SQLAlchemyError:
            logger.exception("Failed to create user")
            return Result.fail(ErrorKind.DATABASE_ERROR)

    def update_user(self, user_id: int, user_data: Dict[str, Any]) -> Result[User]:
        """Apply a partial update.

        Only keys present in ``user_data`` are written; absent fields keep
        their stored values.

        Args:
            user_id: User ID
            user_data: Subset of name, email and age

        Returns:
            Result with the updated user, or NOT_FOUND / EMAIL_EXISTS / DATABASE_ERROR
        """
        changes = {key: user_data[key] for key in ('name', 'email', 'age') if key in user_data}
        try:
            user = self.user_repo.update(user_id, **changes)
        except DuplicateEmailError:
            return Result.fail(ErrorKind.EMAIL_EXISTS)
        except SQLAlchemyError:
            logger.exception(f"Failed to update user {user_id}")
            return Result.fail(ErrorKind.DATABASE_ERROR)

        if user is None:
            return Result.fail(ErrorKind.NOT_FOUND)
        return Result.ok(user)

    def delete_user(self, user_id: int) -> Result[None]:
        """Hard-delete a user."""
        try:
            deleted = self.user_repo.delete(user_id)
        except SQLAlchemyError:
            logger.exception(f"Failed to delete user {user_id}")
            return Result.fail(ErrorKind.DATABASE_ERROR)

        if not deleted:
            return Result.fail(ErrorKind.NOT_FOUND)
        return Result.ok()
