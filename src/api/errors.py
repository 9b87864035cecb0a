"""
Error classification - Domain failures to HTTP responses.

The classifier is the only place that decides the externally visible
status for a domain error. Operators get the full causal chain in the
logs; callers get the status and a terse body:

- ValidationFailure         -> 400, validation message
- UnknownSubscriptionToken  -> 401, generic message
- PersistenceFailure        -> 500, generic message
- DispatchFailure           -> 500, generic message
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.domain.exceptions import (
    DispatchFailure,
    NewsletterError,
    PersistenceFailure,
    UnknownSubscriptionToken,
    ValidationFailure,
    error_chain,
)

logger = logging.getLogger(__name__)

INTERNAL_ERROR_DETAIL = "Internal Server Error"

_STATUS_BY_ERROR: dict[type[NewsletterError], int] = {
    ValidationFailure: status.HTTP_400_BAD_REQUEST,
    UnknownSubscriptionToken: status.HTTP_401_UNAUTHORIZED,
    PersistenceFailure: status.HTTP_500_INTERNAL_SERVER_ERROR,
    DispatchFailure: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def classify(error: NewsletterError) -> int:
    """Map a domain error to its HTTP status code (500 when unknown)."""
    for error_type in type(error).__mro__:
        if error_type in _STATUS_BY_ERROR:
            return _STATUS_BY_ERROR[error_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def public_detail(error: NewsletterError, status_code: int) -> str:
    """Message safe to show the caller; never includes internal causes."""
    if status_code >= 500:
        return INTERNAL_ERROR_DETAIL
    return error.message


async def newsletter_error_handler(request: Request, exc: NewsletterError) -> JSONResponse:
    """Log the causal chain and answer with the classified status."""
    status_code = classify(exc)
    if status_code >= 500:
        logger.error("%s %s failed\n%s", request.method, request.url.path, error_chain(exc))
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=status_code, content={"detail": public_detail(exc, status_code)})


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed form or JSON bodies are client errors (400)."""
    logger.info("%s %s rejected: malformed request", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the exception handlers on an application."""
    app.add_exception_handler(NewsletterError, newsletter_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
