"""Repository adapters - Database implementations."""

from .postgres import PostgresSubscriptionRepository, PostgresSubscriptionTransaction, run_migrations

__all__ = ["PostgresSubscriptionRepository", "PostgresSubscriptionTransaction", "run_migrations"]
