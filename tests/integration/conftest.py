import os
from collections.abc import Generator
from typing import Any

import psycopg
import pytest

from prod2testing.config.settings import Settings
from prod2testing.database.connection import close_pool, get_connection, init_pool

TEST_SCHEMA = "prod2testing_it"


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "prod2testing_test")
    return Settings(db_schema=TEST_SCHEMA)


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        with get_connection() as conn:
            conn.execute("SELECT 1")
    except Exception as e:
        close_pool()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env.")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    """Connection with a seeded schema; everything is rolled back afterwards."""
    with get_connection() as conn:
        conn.execute(f"CREATE SCHEMA IF NOT EXISTS {TEST_SCHEMA}")
        conn.execute(
            f"""
            CREATE TABLE {TEST_SCHEMA}.customer (
                id integer PRIMARY KEY,
                email text,
                phone text
            )
            """
        )
        conn.execute(
            f"""
            INSERT INTO {TEST_SCHEMA}.customer (id, email, phone) VALUES
                (1, 'a@x.com', '555'),
                (2, '', '555'),
                (3, 'c@x.com', NULL)
            """
        )
        conn.execute(f"CREATE TABLE {TEST_SCHEMA}.audit_log (message text)")
        conn.execute(f"INSERT INTO {TEST_SCHEMA}.audit_log VALUES ('secret'), ('other')")
        try:
            yield conn
        finally:
            conn.rollback()


@pytest.fixture
def test_schema() -> str:
    return TEST_SCHEMA
