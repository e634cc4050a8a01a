"""
Record Mapper - pytest Configuration and Fixtures

Provides shared fixtures for:
- Isolated descriptor registries
- In-memory SQLite connections with a users table

Record types used by several test modules live in tests/sample_records.py
(importable as `sample_records`; tests/ is on the pytest pythonpath).
"""

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection

from mapper.registry import DescriptorRegistry, reset_descriptor_registry


# ============================================================================
# Registry Fixtures
# ============================================================================

@pytest.fixture
def registry():
    """A fresh DescriptorRegistry so tests never share cached descriptors."""
    return DescriptorRegistry()


@pytest.fixture(autouse=True)
def _reset_global_registry():
    """Reset the process-wide registry around every test."""
    reset_descriptor_registry()
    yield
    reset_descriptor_registry()


# ============================================================================
# Database Fixtures
# ============================================================================

USERS_DDL = """
    CREATE TABLE users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name VARCHAR(64),
        created_time TIMESTAMP,
        created_by VARCHAR(64),
        updated_time TIMESTAMP,
        updated_by VARCHAR(64)
    )
"""


@pytest.fixture
def sqlite_connection() -> Connection:
    """
    In-memory SQLite connection with an empty users table.

    Yields:
        SQLAlchemy Connection; the database disappears when it is closed
    """
    engine = create_engine("sqlite://")
    connection = engine.connect()
    connection.execute(text(USERS_DDL))
    try:
        yield connection
    finally:
        connection.close()
        engine.dispose()


@pytest.fixture
def seeded_connection(sqlite_connection) -> Connection:
    """sqlite_connection with users 1-3 (User1, User2, User3) inserted directly."""
    for user_id in (1, 2, 3):
        sqlite_connection.execute(
            text("INSERT INTO users (id, name) VALUES (:id, :name)"),
            {"id": user_id, "name": f"User{user_id}"},
        )
    return sqlite_connection
