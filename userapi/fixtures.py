"""Seed records for development and test databases."""

import logging

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from userapi.models import User

logger = logging.getLogger(__name__)

FIXTURE_USERS = (
    {"id": 1, "name": "John Doe", "email": "john@example.com", "age": 30},
    {"id": 2, "name": "Jane Smith", "email": "jane@example.com", "age": 25},
    {"id": 3, "name": "Bob Johnson", "email": "bob@example.com", "age": 35},
)


def _advance_id_sequence(session: Session) -> None:
    # explicit ids do not move a PostgreSQL serial sequence
    if session.get_bind().dialect.name != "postgresql":
        return
    session.execute(
        text("SELECT setval(pg_get_serial_sequence('users', 'id'), (SELECT MAX(id) FROM users))")
    )
    session.commit()


def load_fixtures(session_factory: sessionmaker, environment: str = "development") -> int:
    """Upsert the fixture users by id.

    Failures are logged and swallowed so a conflicting row never blocks startup.

    Args:
        session_factory: Session factory bound to the target database
        environment: Current NODE_ENV value

    Returns:
        Number of fixtures written
    """
    if environment == "production":
        logger.warning("Attempted to load fixtures in production environment")
        return 0

    logger.info("Loading development fixtures...")
    with session_factory() as session:
        try:
            for fixture in FIXTURE_USERS:
                session.merge(User(**fixture))
            session.commit()
            _advance_id_sequence(session)
        except SQLAlchemyError as e:
            session.rollback()
            logger.warning(f"Could not load fixtures: {e}")
            return 0

    logger.info(f"Loaded {len(FIXTURE_USERS)} user fixtures")
    return len(FIXTURE_USERS)
