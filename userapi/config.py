"""Configuration management using environment variables.

Settings are read with python-decouple, so values come from the process
environment first and from a ``.env`` file second.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from decouple import config

from userapi.exceptions import ConfigurationError

DEFAULT_SERVER_URL = "postgresql://localhost:5432/myapp_dev"
DEFAULT_FILE_PATH = "./data/dev.db"

# driver for server URLs that do not name one
POSTGRES_DRIVER = "postgresql+psycopg2"

MEMORY = "memory"
FILE = "file"
SERVER = "server"


@dataclass(frozen=True)
class DatabaseConfig:
    """Resolved database target."""

    type: str
    url: Optional[str] = None
    path: Optional[str] = None
    load_fixtures: bool = False

    @property
    def sqlalchemy_url(self) -> str:
        """SQLAlchemy URL for this target."""
        if self.type == MEMORY:
            return "sqlite://"
        if self.type == FILE:
            return f"sqlite:///{Path(self.path).as_posix()}"
        return with_default_driver(self.url)


def with_default_driver(url: str) -> str:
    """Pin bare ``postgresql://`` and ``postgres://`` URLs to psycopg2."""
    for scheme in ("postgresql://", "postgres://"):
        if url.startswith(scheme):
            return f"{POSTGRES_DRIVER}://{url[len(scheme):]}"
    return url


def _reader(env: Optional[Mapping[str, str]]):
    if env is None:
        return lambda name, default=None: config(name, default=default)
    return lambda name, default=None: env.get(name, default)


def get_database_config(env: Optional[Mapping[str, str]] = None) -> DatabaseConfig:
    """Derive the database target from environment variables.

    Args:
        env: Mapping to read variables from. Defaults to the process
            environment (and ``.env``) through decouple.

    Returns:
        DatabaseConfig describing a memory, file or server database

    Raises:
        ConfigurationError: If server mode is selected without DATABASE_URL
    """
    read = _reader(env)
    node_env = read("NODE_ENV") or "development"

    if node_env == "test":
        return DatabaseConfig(type=MEMORY, load_fixtures=True)

    if read("DATABASE_TYPE") == "postgres":
        return DatabaseConfig(
            type=SERVER,
            url=read("DATABASE_URL") or DEFAULT_SERVER_URL,
            load_fixtures=read("FORCE_FIXTURES") == "true",
        )

    if node_env == "development":
        return DatabaseConfig(type=FILE, path=DEFAULT_FILE_PATH)

    url = read("DATABASE_URL")
    if not url:
        raise ConfigurationError(
            f"DATABASE_URL must be set when NODE_ENV is '{node_env}'"
        )
    return DatabaseConfig(type=SERVER, url=url)


class Config:
    """Base configuration class."""

    # Environment
    NODE_ENV: str = config('NODE_ENV', default='development')
    DEBUG: bool = config('DEBUG', default=False, cast=bool)

    # HTTP listener
    HOST: str = config('HOST', default='0.0.0.0')
    PORT: int = config('PORT', default=3000, cast=int)

    # Logging
    LOG_LEVEL: str = config('LOG_LEVEL', default='INFO')
    SQL_ECHO: bool = config('SQL_ECHO', default=False, cast=bool)

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.NODE_ENV == 'production'


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = config('DEBUG', default=True, cast=bool)


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    LOG_LEVEL = config('LOG_LEVEL', default='WARNING')


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = True


def get_config() -> Config:
    """Get configuration based on environment."""
    env = config('NODE_ENV', default='development')

    if env == 'production':
        return ProductionConfig()
    elif env == 'test':
        return TestingConfig()
    else:
        return DevelopmentConfig()


# Global config instance
settings = get_config()
