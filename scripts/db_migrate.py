#!/usr/bin/env python3
"""Database migration and management script.

Wraps the Alembic scripts in ``userapi/migrations/`` and the fixture loader so they run
against the database selected by NODE_ENV / DATABASE_TYPE / DATABASE_URL.
"""

import argparse
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import logging

from alembic import command

from userapi.config import get_database_config, settings
from userapi.database import Database
from userapi.fixtures import load_fixtures
from userapi.migrations import alembic_config

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def upgrade(revision):
    url = get_database_config().sqlalchemy_url
    logger.info(f"Upgrading database to {revision}")
    command.upgrade(alembic_config(url), revision)


def downgrade(revision):
    url = get_database_config().sqlalchemy_url
    logger.info(f"Downgrading database to {revision}")
    command.downgrade(alembic_config(url), revision)


def current():
    command.current(alembic_config(get_database_config().sqlalchemy_url), verbose=True)


def seed():
    database = Database.from_config(get_database_config(), environment=settings.NODE_ENV)
    try:
        count = load_fixtures(database.session_factory, settings.NODE_ENV)
        logger.info(f"Seeded {count} users")
    finally:
        database.close()


def main():
    parser = argparse.ArgumentParser(description="Database management tool")
    subparsers = parser.add_subparsers(dest="command", required=True)

    upgrade_parser = subparsers.add_parser("upgrade", help="Apply migrations")
    upgrade_parser.add_argument("revision", nargs="?", default="head")

    downgrade_parser = subparsers.add_parser("downgrade", help="Revert migrations")
    downgrade_parser.add_argument("revision", nargs="?", default="-1")

    subparsers.add_parser("current", help="Show the current revision")
    subparsers.add_parser("seed", help="Upsert the fixture users")

    args = parser.parse_args()

    if args.command == "upgrade":
        upgrade(args.revision)
    elif args.command == "downgrade":
        downgrade(args.revision)
    elif args.command == "current":
        current()
    elif args.command == "seed":
        seed()


if __name__ == "__main__":
    main()
