"""Alembic migration scripts for the users schema.

``env.py`` and ``versions/`` live next to this module so they ship with the
package; ``upgrade_database`` applies them programmatically.
"""

import logging
from pathlib import Path
from typing import Optional

from alembic import command
from alembic.config import Config as AlembicConfig
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent


def alembic_config(url: Optional[str] = None) -> AlembicConfig:
    """Build an Alembic config pointing at the project's migration scripts."""
    cfg = AlembicConfig()
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    if url:
        # configparser interpolation
        cfg.set_main_option("sqlalchemy.url", url.replace("%", "%%"))
    return cfg


def upgrade_database(engine: Engine, revision: str = "head") -> None:
    """Apply migrations up to ``revision`` on the given engine."""
    cfg = alembic_config()
    with engine.begin() as connection:
        cfg.attributes["connection"] = connection
        logger.info(f"Applying migrations up to {revision}")
        command.upgrade(cfg, revision)
