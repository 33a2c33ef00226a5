"""Base repository implementation.

Provides common database operations shared by repository classes.
"""

import logging
from typing import Generic, List, Optional, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

# Generic type for model classes
ModelType = TypeVar('ModelType')

UNIQUE_VIOLATION_SQLSTATE = '23505'


def is_unique_violation(error: IntegrityError) -> bool:
    """Check whether an IntegrityError was caused by a unique constraint.

    PostgreSQL reports SQLSTATE 23505; SQLite only reports it in the message.
    """
    orig = getattr(error, 'orig', None)
    code = getattr(orig, 'pgcode', None) or getattr(orig, 'sqlstate', None)
    if code == UNIQUE_VIOLATION_SQLSTATE:
        return True
    message = str(orig if orig is not None else error).lower()
    return 'unique constraint failed' in message or 'duplicate key' in message


class BaseRepository(Generic[ModelType]):
    """Base repository class with common CRUD operations."""

    def __init__(self, db_session: Session, model_class: type):
        """Initialize repository with database session and model class.

        Args:
            db_session: SQLAlchemy database session
            model_class: SQLAlchemy model class
        """
        self.db = db_session
        self.model_class = model_class

    def create(self, **kwargs) -> ModelType:
        """Create a new record.

        Args:
            **kwargs: Field values for the new record

        Returns:
            Created model instance

        Raises:
            IntegrityError: If database constraints are violated
        """
        try:
            instance = self.model_class(**kwargs)
            self.db.add(instance)
            self.db.commit()
            self.db.refresh(instance)
            logger.info(f"Created {self.model_class.__name__} with id {instance.id}")
            return instance
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Failed to create {self.model_class.__name__}: {e.orig}")
            raise

    def get_by_id(self, id: int) -> Optional[ModelType]:
        """Get a record by its ID.

        Args:
            id: Record ID

        Returns:
            Model instance if found, None otherwise
        """
        return self.db.get(self.model_class, id)

    def get_all(self) -> List[ModelType]:
        """Get all records."""
        return self.db.query(self.model_class).all()

    def update(self, id: int, **kwargs) -> Optional[ModelType]:
        """Update a record.

        Args:
            id: Record ID
            **kwargs: Fields to update

        Returns:
            Updated model instance if found, None otherwise

        Raises:
            IntegrityError: If database constraints are violated
        """
        try:
            instance = self.get_by_id(id)
            if not instance:
                return None

            for field, value in kwargs.items():
                if hasattr(instance, field):
                    setattr(instance, field, value)

            self.db.commit()
            self.db.refresh(instance)
            logger.info(f"Updated {self.model_class.__name__} with id {id}")
            return instance
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Failed to update {self.model_class.__name__} {id}: {e.orig}")
            raise

    def delete(self, id: int) -> bool:
        """Delete a record.

        Args:
            id: Record ID

        Returns:
            True if deleted, False if not found
        """
        instance = self.get_by_id(id)
        if not instance:
            return False

        self.db.delete(instance)
        self.db.commit()
        logger.info(f"Deleted {self.model_class.__name__} with id {id}")
        return True

    def count(self) -> int:
        """Count all records."""
        return self.db.query(self.model_class).count()
