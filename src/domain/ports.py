"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure, plus the wrapper errors adapters raise so that
driver exception types never cross into the domain. Adapters implement
these protocols through structural subtyping.
"""

from contextlib import AbstractContextManager
from enum import Enum
from typing import Protocol
from uuid import UUID

from .subscriber import NewSubscriber


class SubscriptionStatus(str, Enum):
    """
    Lifecycle of a subscription row.

    State Transitions (forward-only):
    - PENDING_CONFIRMATION -> CONFIRMED (confirmation link followed)

    Only CONFIRMED subscribers receive newsletter issues.
    """

    PENDING_CONFIRMATION = "pending_confirmation"
    CONFIRMED = "confirmed"


class RepositoryError(Exception):
    """Store failure raised by repository adapters, wrapping the driver error."""

    pass


class EmailDeliveryError(Exception):
    """Transport failure raised by email adapters, wrapping the client error."""

    pass


class SubscriptionTransaction(Protocol):
    """
    Handle on one open store transaction.

    Writes issued through the handle become durable only after commit().
    Leaving the owning context without a successful commit() rolls back.
    """

    def insert_subscriber(self, subscriber: NewSubscriber) -> UUID:
        """
        Insert a subscriber row with status pending_confirmation.

        Returns:
            The generated subscriber id

        Raises:
            RepositoryError: If the insert fails
        """
        ...

    def store_token(self, subscriber_id: UUID, token: str) -> None:
        """
        Insert the confirmation token row for a subscriber.

        Raises:
            RepositoryError: If the insert fails (e.g. duplicate token)
        """
        ...

    def commit(self) -> None:
        """
        Commit every write issued through this handle.

        Raises:
            RepositoryError: If the commit fails; nothing is durable then
        """
        ...


class SubscriptionRepository(Protocol):
    """Port interface for subscription persistence."""

    def begin(self) -> AbstractContextManager[SubscriptionTransaction]:
        """
        Open a transaction scope.

        Entering the returned context borrows a connection and raises
        RepositoryError if none can be acquired. Exiting always returns
        the connection, rolling back anything not committed.
        """
        ...

    def get_confirmed_subscriber_emails(self) -> list[str]:
        """
        Load the stored email of every confirmed subscriber.

        Values are returned exactly as stored, without validation.

        Raises:
            RepositoryError: If the query fails
        """
        ...

    def confirm_subscriber(self, token: str) -> bool:
        """
        Mark the subscriber owning ``token`` as confirmed.

        Returns:
            True if a subscriber matched the token, False otherwise

        Raises:
            RepositoryError: If the update fails
        """
        ...


class EmailSender(Protocol):
    """Port interface for email delivery."""

    def send_email(self, recipient: str, subject: str, html_body: str, text_body: str) -> None:
        """
        Send one email.

        Args:
            recipient: Validated recipient address
            subject: Subject line
            html_body: HTML rendition of the content
            text_body: Plain-text rendition of the content

        Raises:
            EmailDeliveryError: If the transport rejects or fails the send
        """
        ...
