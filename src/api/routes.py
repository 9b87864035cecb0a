"""
API routes - Subscription and newsletter endpoints.

This module defines the HTTP endpoints:
- POST /subscriptions - Subscribe (form-encoded name and email)
- GET /subscriptions/confirm - Confirm a subscription via its token
- POST /newsletters - Publish an issue to confirmed subscribers

Routes raise domain errors; the handlers in src.api.errors turn them
into responses. Endpoints are plain functions because the store and
email adapters block, so FastAPI runs them in its thread pool.
"""

import logging
from uuid import uuid4

from fastapi import APIRouter, Depends, Form, Query, Response, status

from src.api.dependencies import get_newsletter_publisher, get_subscription_service
from src.api.models import ErrorResponse, PublishNewsletterRequest
from src.domain.newsletter import NewsletterPublisher
from src.domain.subscription import SubscriptionService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/subscriptions",
    tags=["subscriptions"],
    response_class=Response,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid name or email"},
        500: {"model": ErrorResponse, "description": "Subscriber could not be stored or emailed"},
    },
    summary="Subscribe to the newsletter",
    description="Submit a name and email. A confirmation link is emailed to the subscriber.",
)
def subscribe(
    name: str = Form(...),
    email: str = Form(...),
    service: SubscriptionService = Depends(get_subscription_service),
) -> Response:
    """
    Register a pending subscriber and send the confirmation email.

    - **name**: Subscriber display name
    - **email**: Subscriber email address
    """
    request_id = uuid4()
    logger.info("request_id %s - Adding '%s' '%s' as a new subscriber", request_id, email, name)
    subscriber_id = service.subscribe(name, email)
    logger.info("request_id %s - Subscriber %s saved and emailed", request_id, subscriber_id)
    return Response(status_code=status.HTTP_200_OK)


@router.get(
    "/subscriptions/confirm",
    tags=["subscriptions"],
    response_class=Response,
    responses={
        400: {"model": ErrorResponse, "description": "Missing or malformed token"},
        401: {"model": ErrorResponse, "description": "Unknown token"},
    },
    summary="Confirm a subscription",
)
def confirm(
    subscription_token: str = Query(...),
    service: SubscriptionService = Depends(get_subscription_service),
) -> Response:
    """Mark the subscriber owning the token as confirmed."""
    service.confirm(subscription_token)
    return Response(status_code=status.HTTP_200_OK)


@router.post(
    "/newsletters",
    tags=["newsletters"],
    response_class=Response,
    responses={
        400: {"description": "Malformed request body"},
        500: {"model": ErrorResponse, "description": "Issue could not be delivered"},
    },
    summary="Publish a newsletter issue",
    description="Send the issue to every confirmed subscriber, one at a time. "
    "Subscribers whose stored email is no longer valid are skipped.",
)
def publish_newsletter(
    body: PublishNewsletterRequest,
    publisher: NewsletterPublisher = Depends(get_newsletter_publisher),
) -> Response:
    request_id = uuid4()
    logger.info("request_id %s - Publishing newsletter issue %r", request_id, body.title)
    report = publisher.publish(body.to_issue())
    logger.info(
        "request_id %s - Delivered to %d subscriber(s), skipped %d",
        request_id,
        len(report.delivered),
        report.skipped,
    )
    return Response(status_code=status.HTTP_200_OK)
