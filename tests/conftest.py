import os
import sys

# Ensure repo root is on sys.path so tests can import the userapi package
REPO_ROOT = os.path.dirname(os.path.dirname(__file__))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

import pytest

from userapi import create_app
from userapi.config import MEMORY, DatabaseConfig
from userapi.database import MemoryDatabase


@pytest.fixture
def database():
    # every MemoryDatabase owns its own in-memory SQLite, so tests are hermetic
    db = MemoryDatabase(DatabaseConfig(type=MEMORY), environment="test")
    db.initialize()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def session(database):
    db = database.session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def app(database):
    return create_app(database=database, test_config={"TESTING": True})


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client
