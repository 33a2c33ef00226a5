"""Helper to initialize the database selected by the environment.

Usage (from repo root):
python3 scripts/init_db.py

Creates or migrates the schema for the NODE_ENV / DATABASE_TYPE target and
seeds the fixture users where that target allows it.
"""

import os
import sys

# ensure repo root is on path
HERE = os.path.dirname(os.path.dirname(__file__))
if HERE not in sys.path:
    sys.path.insert(0, HERE)

from userapi.config import settings
from userapi.database import open_database
from userapi.logging_config import configure_logging

if __name__ == "__main__":
    configure_logging(settings.LOG_LEVEL)
    print(f"Initializing DB for environment '{settings.NODE_ENV}'")
    database = open_database(settings.NODE_ENV, echo=settings.SQL_ECHO)
    database.close()
    print("Done.")
