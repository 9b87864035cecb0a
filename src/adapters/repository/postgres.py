"""
PostgreSQL repository adapter - Implements SubscriptionRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Transaction Design:
-------------------
begin() borrows one connection from the pool for the lifetime of a
PostgresSubscriptionTransaction. Subscriber and token inserts run on that
connection inside one database transaction; nothing is visible to other
sessions until commit(). When the scope is left without a successful
commit (an insert failed, the commit failed, or the caller raised), the
transaction is rolled back. The connection is returned to the pool on
every exit path.

Driver errors (psycopg.Error, including pool timeouts) are re-raised as
RepositoryError with the original attached as __cause__.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from uuid import UUID, uuid4

import psycopg
from psycopg_pool import ConnectionPool

from src.domain.ports import RepositoryError, SubscriptionStatus
from src.domain.subscriber import NewSubscriber

logger = logging.getLogger(__name__)


class PostgresSubscriptionTransaction:
    """
    Implements SubscriptionTransaction protocol on one borrowed connection.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, conn: psycopg.Connection) -> None:
        self._conn = conn
        self.committed = False

    def insert_subscriber(self, subscriber: NewSubscriber) -> UUID:
        """Insert a pending_confirmation subscriber and return its new id."""
        sql = """
            INSERT INTO subscriptions (id, email, name, subscribed_at, status)
            VALUES (%s, %s, %s, NOW(), %s)
        """
        subscriber_id = uuid4()
        try:
            self._conn.execute(
                sql,
                (
                    subscriber_id,
                    subscriber.email.value,
                    subscriber.name.value,
                    SubscriptionStatus.PENDING_CONFIRMATION.value,
                ),
            )
        except psycopg.Error as e:
            raise RepositoryError("could not insert subscriber") from e
        return subscriber_id

    def store_token(self, subscriber_id: UUID, token: str) -> None:
        """Insert the confirmation token row."""
        sql = """
            INSERT INTO subscription_tokens (subscription_token, subscriber_id)
            VALUES (%s, %s)
        """
        try:
            self._conn.execute(sql, (token, subscriber_id))
        except psycopg.Error as e:
            raise RepositoryError("could not store token") from e

    def commit(self) -> None:
        try:
            self._conn.commit()
        except psycopg.Error as e:
            raise RepositoryError("could not commit") from e
        self.committed = True


class PostgresSubscriptionRepository:
    """
    Implements SubscriptionRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool, timeout: float | None = None) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
            timeout: Seconds to wait for a free connection (pool default if None)
        """
        self._pool = pool
        self._timeout = timeout

    @contextmanager
    def begin(self) -> Iterator[PostgresSubscriptionTransaction]:
        """
        Borrow a connection and open a transaction scope on it.

        Raises:
            RepositoryError: If no connection can be acquired
        """
        try:
            conn = self._pool.getconn(timeout=self._timeout)
        except psycopg.Error as e:
            raise RepositoryError("could not acquire a connection") from e

        transaction = PostgresSubscriptionTransaction(conn)
        try:
            yield transaction
        finally:
            if not transaction.committed:
                self._rollback(conn)
            self._pool.putconn(conn)

    def get_confirmed_subscriber_emails(self) -> list[str]:
        """Load stored emails of confirmed subscribers, oldest first."""
        sql = """
            SELECT email
            FROM subscriptions
            WHERE status = %s
            ORDER BY subscribed_at
        """
        try:
            with self._pool.connection(timeout=self._timeout) as conn, conn.cursor() as cursor:
                cursor.execute(sql, (SubscriptionStatus.CONFIRMED.value,))
                return [row[0] for row in cursor.fetchall()]
        except psycopg.Error as e:
            raise RepositoryError("could not load confirmed subscribers") from e

    def confirm_subscriber(self, token: str) -> bool:
        """
        Mark the subscriber owning ``token`` as confirmed.

        A single UPDATE with a token sub-select, so the lookup and the
        transition are atomic. Re-confirming matches the row again and
        is reported as success.
        """
        sql = """
            UPDATE subscriptions
            SET status = %s
            WHERE id = (
                SELECT subscriber_id
                FROM subscription_tokens
                WHERE subscription_token = %s
            )
        """
        try:
            with self._pool.connection(timeout=self._timeout) as conn, conn.cursor() as cursor:
                cursor.execute(sql, (SubscriptionStatus.CONFIRMED.value, token))
                conn.commit()
                return cursor.rowcount == 1
        except psycopg.Error as e:
            raise RepositoryError("could not confirm subscriber") from e

    def _rollback(self, conn: psycopg.Connection) -> None:
        try:
            conn.rollback()
        except psycopg.Error:
            # The pool discards connections left in a bad state on putconn().
            logger.warning("Rollback failed; connection will be discarded by the pool", exc_info=True)


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        logger.info("Executing migration: %s", sql_file.name)
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)
                # pool.connection() commits on clean exit

            logger.info("Migration complete: %s", sql_file.name)
        except psycopg.Error as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
