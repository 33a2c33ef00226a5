"""User repository implementation.

Handles all database operations for the User model.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from sqlalchemy import desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from userapi.exceptions import DuplicateEmailError
from userapi.models import User, utcnow

from .base import BaseRepository, is_unique_violation

logger = logging.getLogger(__name__)


class UserRepositoryInterface(ABC):
    """Interface for User storage operations."""

    @abstractmethod
    def get_all(self) -> List[User]:
        """Get all users, newest first."""

    @abstractmethod
    def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID."""

    @abstractmethod
    def create(self, **fields) -> User:
        """Create new user."""

    @abstractmethod
    def update(self, user_id: int, **fields) -> Optional[User]:
        """Update the given fields of an existing user."""

    @abstractmethod
    def delete(self, user_id: int) -> bool:
        """Delete user by ID."""


class UserRepository(BaseRepository[User], UserRepositoryInterface):
    """Repository for the User model."""

    def __init__(self, db_session: Session):
        """Initialize user repository.

        Args:
            db_session: SQLAlchemy database session
        """
        super().__init__(db_session, User)

    def get_all(self) -> List[User]:
        """Get all users ordered by creation time, newest first.

        Returns:
            List of users
        """
        return (
            self.db.query(User)
            .order_by(desc(User.created_at), desc(User.id))
            .all()
        )

    def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email.

        Args:
            email: Email to search for

        Returns:
            User instance if found, None otherwise
        """
        return self.db.query(User).filter(User.email == email).first()

    def create(self, **fields) -> User:
        """Create a new user.

        Args:
            **fields: name, email and optional age

        Returns:
            Created user instance

        Raises:
            DuplicateEmailError: If the email is already taken
        """
        now = utcnow()
        try:
            return super().create(created_at=now, updated_at=now, **fields)
        except IntegrityError as e:
            if is_unique_violation(e):
                raise DuplicateEmailError(fields.get("email")) from e
            raise

    def update(self, user_id: int, **fields) -> Optional[User]:
        """Update only the provided fields of a user.

        Args:
            user_id: User ID
            **fields: Fields to change

        Returns:
            Updated user, None if not found

        Raises:
            DuplicateEmailError: If the new email is already taken
        """
        fields.pop("id", None)
        fields.pop("created_at", None)
        try:
            return super().update(user_id, updated_at=utcnow(), **fields)
        except IntegrityError as e:
            if is_unique_violation(e):
                raise DuplicateEmailError(fields.get("email")) from e
            raise
