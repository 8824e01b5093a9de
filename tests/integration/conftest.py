import os
import uuid
from collections.abc import Generator

import psycopg
import pytest

from app.config.settings import Settings
from app.database.connection import close_pool, get_connection, init_pool
from app.database.repositories.session_config_repository import SessionConfigRepository


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "doc_intake_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        psycopg.connect(
            host=test_settings.db_host,
            port=test_settings.db_port,
            dbname=test_settings.db_database,
            user=test_settings.db_username,
            password=test_settings.db_password,
            connect_timeout=3,
        ).close()
        init_pool(test_settings)
    except psycopg.Error as e:
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run.")
    try:
        SessionConfigRepository().ensure_schema()
        yield
    finally:
        close_pool()


@pytest.fixture
def profile(integration_pool: None) -> Generator[str, None, None]:
    """A unique config profile, deleted after the test."""
    name = f"test-{uuid.uuid4()}"
    yield name
    with get_connection() as conn:
        conn.execute("DELETE FROM session_configs WHERE profile = %s", (name,))
        conn.commit()
