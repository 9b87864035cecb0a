"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- An in-memory transactional repository with failure injection
- A recording email sender with failure injection
- A test FastAPI application wired to those doubles
"""

from collections.abc import Generator, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID, uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api.dependencies import get_email_sender, get_repository
from src.api.errors import register_error_handlers
from src.api.routes import router
from src.config.settings import Settings, get_settings
from src.domain.ports import EmailDeliveryError, RepositoryError, SubscriptionStatus
from src.domain.subscriber import NewSubscriber

TEST_BASE_URL = "http://newsletter.test-host.com"


@dataclass
class StoredSubscription:
    id: UUID
    email: str
    name: str
    subscribed_at: datetime
    status: SubscriptionStatus


class InMemoryTransaction:
    """Stages writes and applies them to the repository only on commit."""

    def __init__(self, repository: "InMemorySubscriptionRepository") -> None:
        self._repository = repository
        self._subscriptions: list[StoredSubscription] = []
        self._tokens: dict[str, UUID] = {}
        self.committed = False

    def insert_subscriber(self, subscriber: NewSubscriber) -> UUID:
        self._repository.check_failure("insert_subscriber")
        row = StoredSubscription(
            id=uuid4(),
            email=subscriber.email.value,
            name=subscriber.name.value,
            subscribed_at=datetime.now(timezone.utc),
            status=SubscriptionStatus.PENDING_CONFIRMATION,
        )
        self._subscriptions.append(row)
        return row.id

    def store_token(self, subscriber_id: UUID, token: str) -> None:
        self._repository.check_failure("store_token")
        if token in self._repository.tokens or token in self._tokens:
            raise RepositoryError("duplicate subscription token")
        self._tokens[token] = subscriber_id

    def commit(self) -> None:
        self._repository.check_failure("commit")
        existing_emails = {row.email for row in self._repository.subscriptions.values()}
        for row in self._subscriptions:
            if row.email in existing_emails:
                raise RepositoryError("duplicate subscriber email")
        for row in self._subscriptions:
            self._repository.subscriptions[row.id] = row
        self._repository.tokens.update(self._tokens)
        self.committed = True


class InMemorySubscriptionRepository:
    """
    SubscriptionRepository double with PostgreSQL-like transaction semantics.

    Names listed in ``fail_on`` ("begin", "insert_subscriber", "store_token",
    "commit", "get_confirmed_subscriber_emails", "confirm_subscriber") raise
    RepositoryError when reached.
    """

    def __init__(self) -> None:
        self.subscriptions: dict[UUID, StoredSubscription] = {}
        self.tokens: dict[str, UUID] = {}
        self.fail_on: set[str] = set()
        self.open_transactions = 0
        self.rollbacks = 0

    def check_failure(self, operation: str) -> None:
        if operation in self.fail_on:
            raise RepositoryError(f"simulated failure in {operation}")

    @contextmanager
    def begin(self) -> Iterator[InMemoryTransaction]:
        self.check_failure("begin")
        transaction = InMemoryTransaction(self)
        self.open_transactions += 1
        try:
            yield transaction
        finally:
            self.open_transactions -= 1
            if not transaction.committed:
                self.rollbacks += 1

    def get_confirmed_subscriber_emails(self) -> list[str]:
        self.check_failure("get_confirmed_subscriber_emails")
        rows = sorted(self.subscriptions.values(), key=lambda row: row.subscribed_at)
        return [row.email for row in rows if row.status == SubscriptionStatus.CONFIRMED]

    def confirm_subscriber(self, token: str) -> bool:
        self.check_failure("confirm_subscriber")
        subscriber_id = self.tokens.get(token)
        if subscriber_id is None:
            return False
        self.subscriptions[subscriber_id].status = SubscriptionStatus.CONFIRMED
        return True

    def add_subscriber(
        self,
        email: str,
        name: str = "le guin",
        status: SubscriptionStatus = SubscriptionStatus.CONFIRMED,
    ) -> UUID:
        """Seed a row directly, bypassing validation (like legacy data)."""
        row = StoredSubscription(
            id=uuid4(),
            email=email,
            name=name,
            subscribed_at=datetime.now(timezone.utc),
            status=status,
        )
        self.subscriptions[row.id] = row
        return row.id

    def token_for(self, subscriber_id: UUID) -> str | None:
        for token, owner in self.tokens.items():
            if owner == subscriber_id:
                return token
        return None


@dataclass
class SentEmail:
    recipient: str
    subject: str
    html_body: str
    text_body: str


class RecordingEmailSender:
    """EmailSender double; ``fail_on_call`` makes the n-th call (1-based) fail."""

    def __init__(self, fail_on_call: int | None = None) -> None:
        self.sent: list[SentEmail] = []
        self.calls = 0
        self.fail_on_call = fail_on_call

    def send_email(self, recipient: str, subject: str, html_body: str, text_body: str) -> None:
        self.calls += 1
        if self.fail_on_call is not None and self.calls == self.fail_on_call:
            raise EmailDeliveryError(f"simulated delivery failure for {recipient}")
        self.sent.append(SentEmail(recipient, subject, html_body, text_body))


@pytest.fixture
def memory_repository() -> InMemorySubscriptionRepository:
    return InMemorySubscriptionRepository()


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(application_base_url=TEST_BASE_URL, email_backend="console")


@pytest.fixture
def app(
    memory_repository: InMemorySubscriptionRepository,
    email_sender: RecordingEmailSender,
    test_settings: Settings,
) -> Generator[FastAPI, None, None]:
    """Create test FastAPI application wired to in-memory doubles."""
    test_app = FastAPI()
    register_error_handlers(test_app)
    test_app.include_router(router)

    test_app.dependency_overrides[get_repository] = lambda: memory_repository
    test_app.dependency_overrides[get_email_sender] = lambda: email_sender
    test_app.dependency_overrides[get_settings] = lambda: test_settings
    yield test_app
    test_app.dependency_overrides.clear()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client for the application."""
    return TestClient(app)


@pytest.fixture
def make_email_sender() -> type[RecordingEmailSender]:
    """Factory for senders configured to fail on a given call."""
    return RecordingEmailSender
