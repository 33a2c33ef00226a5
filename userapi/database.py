"""Database handles.

A ``Database`` owns the SQLAlchemy engine and session factory for one backing
store. The process bootstrap builds exactly one and passes it to the Flask app;
there is no module-level engine.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Mapping, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from userapi.config import FILE, MEMORY, SERVER, DatabaseConfig, get_database_config
from userapi.fixtures import load_fixtures
from userapi.models import Base, User

logger = logging.getLogger(__name__)


class Database:
    """Storage handle for one database target."""

    def __init__(self, config: DatabaseConfig, environment: str = "development",
                 echo: bool = False):
        """Create the engine and session factory.

        Args:
            config: Resolved database target
            environment: Current NODE_ENV value, gates fixture loading
            echo: Log SQL statements
        """
        self.config = config
        self.environment = environment
        self.echo = echo
        self.engine = self._create_engine()
        self.session_factory = sessionmaker(bind=self.engine, autoflush=False)

    @classmethod
    def from_config(cls, config: DatabaseConfig, **kwargs) -> "Database":
        """Instantiate the handle class matching ``config.type``."""
        handles = {
            MEMORY: MemoryDatabase,
            FILE: FileDatabase,
            SERVER: ServerDatabase,
        }
        try:
            handle_class = handles[config.type]
        except KeyError:
            raise ValueError(f"Unsupported database type: {config.type}") from None
        return handle_class(config, **kwargs)

    def _create_engine(self) -> Engine:
        raise NotImplementedError

    def prepare_schema(self) -> None:
        """Create missing tables from the model metadata."""
        Base.metadata.create_all(bind=self.engine)

    def should_load_fixtures(self) -> bool:
        return self.config.load_fixtures

    def initialize(self) -> None:
        """Bring the schema up to date and seed fixtures when configured."""
        self.prepare_schema()
        logger.info(f"Database connection established ({self.config.type})")
        if self.should_load_fixtures():
            load_fixtures(self.session_factory, self.environment)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Get database session with automatic cleanup."""
        db = self.session_factory()
        try:
            yield db
        finally:
            db.close()

    def ping(self) -> bool:
        """Check connectivity with a trivial query."""
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning(f"Database ping failed: {e}")
            return False

    def close(self) -> None:
        """Release every pooled connection."""
        self.engine.dispose()
        logger.info("Database connection closed")


class MemoryDatabase(Database):
    """In-memory SQLite shared by all sessions through a single connection."""

    def _create_engine(self) -> Engine:
        return create_engine(
            self.config.sqlalchemy_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=self.echo,
        )


class FileDatabase(Database):
    """SQLite file on local disk; the parent directory is created on demand."""

    def __init__(self, config: DatabaseConfig, **kwargs):
        self.path = Path(config.path)
        self.is_new = not self.path.exists()
        super().__init__(config, **kwargs)

    def _create_engine(self) -> Engine:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        return create_engine(
            self.config.sqlalchemy_url,
            connect_args={"check_same_thread": False},
            echo=self.echo,
        )

    def should_load_fixtures(self) -> bool:
        if self.is_new:
            logger.info(f"Creating new development database at {self.path}")
            return True
        with self.session() as db:
            if db.query(User).count() == 0:
                logger.info(f"Development database at {self.path} is empty")
                return True
        logger.info(f"Using existing development database at {self.path}")
        return False


class ServerDatabase(Database):
    """External database server, schema managed by Alembic migrations."""

    def _create_engine(self) -> Engine:
        return create_engine(
            self.config.sqlalchemy_url,
            pool_size=10,
            max_overflow=20,
            pool_pre_ping=True,
            pool_recycle=3600,
            echo=self.echo,
        )

    def prepare_schema(self) -> None:
        from userapi.migrations import upgrade_database

        upgrade_database(self.engine)


def open_database(environment: str, echo: bool = False,
                  env: Optional[Mapping[str, str]] = None) -> Database:
    """Resolve the target from the environment, connect and initialize it.

    Args:
        environment: Current NODE_ENV value
        echo: Log SQL statements
        env: Optional mapping overriding the process environment

    Returns:
        Initialized Database handle

    Raises:
        ConfigurationError: If the environment does not describe a target
    """
    database = Database.from_config(
        get_database_config(env), environment=environment, echo=echo
    )
    try:
        database.initialize()
    except Exception:
        database.close()
        raise
    return database
