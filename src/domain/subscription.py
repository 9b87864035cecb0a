"""
Subscription domain service - Intake and confirmation workflow.

Intake Workflow (strictly sequential, first failure wins)
=========================================================

1. Received   -> validate name and email             (ValidationFailure)
2. Validated  -> open a store transaction            (PersistenceFailure)
3. Inserted   -> insert subscriber, pending status   (PersistenceFailure)
4. Tokenized  -> generate + store token, same tx     (PersistenceFailure)
5. Committed  -> commit the transaction              (PersistenceFailure)
6. Dispatched -> send the confirmation email         (DispatchFailure)

Subscriber and token rows are written in one transaction: a failure in
steps 3-5 leaves nothing durable. The email is sent only after commit
and is not transactional with the store, so a committed subscriber whose
confirmation email failed can exist. The workflow does not undo the
commit in that case.
"""

import logging
from collections.abc import Callable
from contextlib import ExitStack
from dataclasses import dataclass, field
from uuid import UUID

from .exceptions import DispatchFailure, PersistenceFailure, UnknownSubscriptionToken, ValidationFailure
from .ports import EmailDeliveryError, EmailSender, RepositoryError, SubscriptionRepository
from .subscriber import NewSubscriber, SubscriberEmail
from .tokens import generate_subscription_token, is_well_formed_token

logger = logging.getLogger(__name__)

CONFIRMATION_SUBJECT = "Welcome!"


def confirmation_link(base_url: str, token: str) -> str:
    """Build the link a subscriber follows to confirm."""
    return f"{base_url.rstrip('/')}/subscriptions/confirm?subscription_token={token}"


@dataclass
class SubscriptionService:
    """
    Domain service for newsletter subscriptions.

    Orchestrates the intake flow: validation, atomic subscriber and
    token persistence, and confirmation email dispatch.
    """

    repository: SubscriptionRepository
    email_sender: EmailSender
    base_url: str
    token_generator: Callable[[], str] = field(default=generate_subscription_token)

    def subscribe(self, name: str, email: str) -> UUID:
        """
        Register a new pending subscriber and send the confirmation email.

        Args:
            name: Raw subscriber name
            email: Raw subscriber email

        Returns:
            Id of the new subscriber row

        Raises:
            ValidationFailure: If name or email is malformed
            PersistenceFailure: If the subscriber could not be stored
            DispatchFailure: If the confirmation email could not be sent
        """
        new_subscriber = NewSubscriber.parse(name, email)

        with ExitStack() as stack:
            try:
                transaction = stack.enter_context(self.repository.begin())
            except RepositoryError as e:
                raise PersistenceFailure("Failed to acquire a database connection from the pool") from e

            try:
                subscriber_id = transaction.insert_subscriber(new_subscriber)
            except RepositoryError as e:
                raise PersistenceFailure("Failed to insert new subscriber in the database") from e

            token = self.token_generator()
            try:
                transaction.store_token(subscriber_id, token)
            except RepositoryError as e:
                raise PersistenceFailure(
                    "Failed to store the confirmation token for a new subscriber"
                ) from e

            try:
                transaction.commit()
            except RepositoryError as e:
                raise PersistenceFailure(
                    "Failed to commit SQL transaction to store a new subscriber"
                ) from e

        logger.info("Stored pending subscriber %s", subscriber_id)

        try:
            self._send_confirmation_email(new_subscriber.email, token)
        except EmailDeliveryError as e:
            raise DispatchFailure("Failed to send a confirmation email") from e

        return subscriber_id

    def confirm(self, token: str) -> None:
        """
        Confirm the subscriber owning a confirmation token.

        Confirming an already confirmed subscriber succeeds silently.

        Raises:
            ValidationFailure: If the token is not 25 alphanumeric characters
            UnknownSubscriptionToken: If no subscriber owns the token
            PersistenceFailure: If the store update fails
        """
        if not is_well_formed_token(token):
            raise ValidationFailure("The subscription token is malformed.")

        try:
            confirmed = self.repository.confirm_subscriber(token)
        except RepositoryError as e:
            raise PersistenceFailure("Failed to mark subscriber as confirmed") from e

        if not confirmed:
            raise UnknownSubscriptionToken("There is no subscriber associated with the provided token.")

    def _send_confirmation_email(self, recipient: SubscriberEmail, token: str) -> None:
        link = confirmation_link(self.base_url, token)
        html_body = (
            "Welcome to our newsletter!<br />"
            f'Click <a href="{link}">here</a> to confirm your subscription.'
        )
        text_body = f"Welcome to our newsletter!\nVisit {link} to confirm your subscription."
        self.email_sender.send_email(recipient.value, CONFIRMATION_SUBJECT, html_body, text_body)
