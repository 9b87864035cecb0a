"""
Newsletter publishing - Fan-out of one issue to confirmed subscribers.

Stored emails are re-validated before use. Rows that no longer parse
(written before stricter validation existed, or corrupted) are skipped
with a warning instead of failing the run. Sends are sequential; the
first failed send aborts the run and emails already sent stay sent.
"""

import logging
from dataclasses import dataclass, field

from .exceptions import DispatchFailure, PersistenceFailure, ValidationFailure, error_chain
from .ports import EmailDeliveryError, EmailSender, RepositoryError, SubscriptionRepository
from .subscriber import ConfirmedSubscriber, SubscriberEmail

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewsletterIssue:
    """One issue: subject line plus HTML and plain-text bodies."""

    title: str
    html_body: str
    text_body: str


@dataclass
class PublishReport:
    """Outcome of a completed publish run."""

    delivered: list[str] = field(default_factory=list)
    skipped: int = 0


@dataclass
class NewsletterPublisher:
    """Sends a newsletter issue to every confirmed subscriber."""

    repository: SubscriptionRepository
    email_sender: EmailSender

    def publish(self, issue: NewsletterIssue) -> PublishReport:
        """
        Deliver ``issue`` to every confirmed subscriber with a valid email.

        Raises:
            PersistenceFailure: If confirmed subscribers cannot be loaded
            DispatchFailure: On the first failed send; no further sends
        """
        report = PublishReport()
        subscribers, report.skipped = self._get_confirmed_subscribers()

        for subscriber in subscribers:
            recipient = subscriber.email.value
            try:
                self.email_sender.send_email(
                    recipient, issue.title, issue.html_body, issue.text_body
                )
            except EmailDeliveryError as e:
                raise DispatchFailure(f"Failed to send newsletter issue to {recipient}") from e
            report.delivered.append(recipient)

        logger.info(
            "Published %r to %d subscriber(s), skipped %d",
            issue.title,
            len(report.delivered),
            report.skipped,
        )
        return report

    def _get_confirmed_subscribers(self) -> tuple[list[ConfirmedSubscriber], int]:
        try:
            stored_emails = self.repository.get_confirmed_subscriber_emails()
        except RepositoryError as e:
            raise PersistenceFailure("Failed to load confirmed subscribers") from e

        subscribers = []
        skipped = 0
        for stored_email in stored_emails:
            try:
                subscribers.append(ConfirmedSubscriber(email=SubscriberEmail.parse(stored_email)))
            except ValidationFailure as e:
                skipped += 1
                logger.warning(
                    "Skipping a confirmed subscriber. Their stored contact details are invalid.\n%s",
                    error_chain(e),
                )
        return subscribers, skipped
