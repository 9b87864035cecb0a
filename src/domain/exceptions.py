"""
Domain exceptions - Semantic error types for subscriptions and publishing.

This module defines the error taxonomy the API layer classifies into HTTP
status codes. Every failure carries a human-readable stage description in
``message``; the low-level cause is attached with ``raise ... from cause``
and is only ever rendered for operators via ``error_chain()``.
"""


class NewsletterError(Exception):
    """Base class for newsletter domain errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationFailure(NewsletterError):
    """Subscriber input (name, email or token) is malformed."""

    pass


class PersistenceFailure(NewsletterError):
    """Connection acquisition, insert, token storage, read or commit failed."""

    pass


class DispatchFailure(NewsletterError):
    """Outbound email (confirmation or newsletter issue) could not be sent."""

    pass


class UnknownSubscriptionToken(NewsletterError):
    """Well-formed confirmation token that matches no subscriber."""

    pass


def error_chain(error: BaseException) -> str:
    """
    Render an error together with every underlying cause.

    Follows ``__cause__`` links, falling back to ``__context__`` when the
    context was not suppressed. Intended for operator logs only.

    Example:
        Failed to insert new subscriber in the database

        Caused by:
        \tRepositoryError: could not insert subscriber
        Caused by:
        \tUniqueViolation: duplicate key value violates unique constraint
    """
    lines = [str(error)]
    seen = {id(error)}
    current = _next_cause(error)
    if current is not None:
        lines.append("")
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        lines.append(f"Caused by:\n\t{type(current).__name__}: {current}")
        current = _next_cause(current)
    return "\n".join(lines)


def _next_cause(error: BaseException) -> BaseException | None:
    if error.__cause__ is not None:
        return error.__cause__
    if error.__suppress_context__:
        return None
    return error.__context__
