"""
This file contains shared fixtures for the test suite.
"""

import os

import pytest
import pytest_asyncio
from unittest.mock import AsyncMock

# Set env vars before any application modules are imported
os.environ.setdefault("DBDM_TEST_MODE", "1")

from dbdm.config import get_settings
from dbdm.db.client import DBClient
from dbdm.db.connection import AiosqliteDriver

USERS_COLUMNS = {
    "id": "TEXT PRIMARY KEY",
    "name": "TEXT NOT NULL",
    "email": "TEXT UNIQUE NOT NULL",
    "age": "INTEGER",
}


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Drop cached settings so each test sees its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "test.sqlite")


@pytest_asyncio.fixture
async def db(db_path):
    """A connected client with an empty ``users`` table."""
    client = DBClient(db_path)
    await client.connect()
    await client.create_table("users", USERS_COLUMNS)
    try:
        yield client
    finally:
        await client.close()


@pytest_asyncio.fixture
async def seeded_db(db):
    await db.create("users", {"name": "John Doe", "email": "john@example.com", "age": 30})
    await db.create("users", {"name": "Jane Doe", "email": "jane@example.com", "age": 25})
    await db.create("users", {"name": "Bob Smith", "email": "bob@example.com", "age": 35})
    return db


@pytest.fixture
def fake_driver():
    """Driver double that records every call instead of touching SQLite."""
    driver = AsyncMock(spec=AiosqliteDriver)
    driver.open.return_value = object()
    driver.execute.return_value = 1
    driver.query_all.return_value = []
    driver.query_one.return_value = None
    return driver
