"""
Domain layer - Pure business logic with zero framework imports.

This package contains the subscription intake workflow, the newsletter
publisher and the error taxonomy. It defines its own port interfaces for
infrastructure abstraction, so adapters can be swapped without touching
the workflows.
"""

from .exceptions import (
    DispatchFailure,
    NewsletterError,
    PersistenceFailure,
    UnknownSubscriptionToken,
    ValidationFailure,
    error_chain,
)
from .newsletter import NewsletterIssue, NewsletterPublisher, PublishReport
from .ports import (
    EmailDeliveryError,
    EmailSender,
    RepositoryError,
    SubscriptionRepository,
    SubscriptionStatus,
    SubscriptionTransaction,
)
from .subscriber import ConfirmedSubscriber, NewSubscriber, SubscriberEmail, SubscriberName
from .subscription import SubscriptionService
from .tokens import generate_subscription_token

__all__ = [
    "ConfirmedSubscriber",
    "DispatchFailure",
    "EmailDeliveryError",
    "EmailSender",
    "NewSubscriber",
    "NewsletterError",
    "NewsletterIssue",
    "NewsletterPublisher",
    "PersistenceFailure",
    "PublishReport",
    "RepositoryError",
    "SubscriberEmail",
    "SubscriberName",
    "SubscriptionRepository",
    "SubscriptionService",
    "SubscriptionStatus",
    "SubscriptionTransaction",
    "UnknownSubscriptionToken",
    "ValidationFailure",
    "error_chain",
    "generate_subscription_token",
]
