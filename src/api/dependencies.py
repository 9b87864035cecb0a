"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from fastapi import Depends, Request
from psycopg_pool import ConnectionPool

from src.adapters.email.console import ConsoleEmailSender
from src.adapters.email.http_client import HttpEmailClient
from src.adapters.repository.postgres import PostgresSubscriptionRepository
from src.config.settings import Settings, get_settings
from src.domain.newsletter import NewsletterPublisher
from src.domain.ports import EmailSender, SubscriptionRepository
from src.domain.subscription import SubscriptionService


def build_email_sender(settings: Settings) -> ConsoleEmailSender | HttpEmailClient:
    """Create the email adapter selected by settings.email_backend."""
    if settings.email_backend == "http":
        return HttpEmailClient(
            base_url=settings.email_api_base_url,
            sender=settings.email_sender,
            authorization_token=settings.email_authorization_token,
            timeout=settings.email_timeout_seconds,
        )
    return ConsoleEmailSender()


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_repository(
    request: Request, settings: Settings = Depends(get_settings)
) -> SubscriptionRepository:
    """Create repository with connection pool from app state."""
    return PostgresSubscriptionRepository(get_pool(request), timeout=settings.pool_timeout_seconds)


def get_email_sender(request: Request) -> EmailSender:
    """Get the email sender created at startup (shared across requests)."""
    return request.app.state.email_sender


def get_subscription_service(
    repository: SubscriptionRepository = Depends(get_repository),
    email_sender: EmailSender = Depends(get_email_sender),
    settings: Settings = Depends(get_settings),
) -> SubscriptionService:
    """
    Create subscription service with injected dependencies.

    Wires together the repository, email sender and public base URL.
    """
    return SubscriptionService(
        repository=repository,
        email_sender=email_sender,
        base_url=settings.application_base_url,
    )


def get_newsletter_publisher(
    repository: SubscriptionRepository = Depends(get_repository),
    email_sender: EmailSender = Depends(get_email_sender),
) -> NewsletterPublisher:
    """Create newsletter publisher with injected dependencies."""
    return NewsletterPublisher(repository=repository, email_sender=email_sender)
