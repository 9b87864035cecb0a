"""
Shared fixtures for integration tests.

Integration tests run against the PostgreSQL database at DATABASE_URL
(e.g. via docker-compose). When it cannot be reached the tests are
skipped.
"""

from collections.abc import Generator

import pytest
from psycopg_pool import ConnectionPool, PoolTimeout

from src.adapters.repository.postgres import PostgresSubscriptionRepository, run_migrations
from src.config.settings import get_settings


@pytest.fixture(scope="session")
def pool() -> Generator[ConnectionPool, None, None]:
    """Create connection pool for integration tests, with migrations applied."""
    settings = get_settings()
    pool = ConnectionPool(conninfo=settings.database_url, min_size=1, max_size=10, open=False)
    try:
        pool.open(wait=True, timeout=5.0)
    except PoolTimeout:
        pool.close()
        pytest.skip(f"PostgreSQL not reachable at {settings.database_url}")

    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def repository(pool: ConnectionPool) -> PostgresSubscriptionRepository:
    """Create repository instance for each test."""
    return PostgresSubscriptionRepository(pool, timeout=5.0)


@pytest.fixture(autouse=True)
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Clean both tables before each test."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM subscription_tokens")
        conn.execute("DELETE FROM subscriptions")
        conn.commit()
    yield


@pytest.fixture
def insert_subscriber_row(pool: ConnectionPool):
    """Seed a row directly, bypassing domain validation."""

    def insert(email: str, status: str = "confirmed") -> None:
        with pool.connection() as conn:
            conn.execute(
                "INSERT INTO subscriptions (id, email, name, subscribed_at, status) "
                "VALUES (gen_random_uuid(), %s, %s, NOW(), %s)",
                (email, "le guin", status),
            )
            conn.commit()

    return insert
