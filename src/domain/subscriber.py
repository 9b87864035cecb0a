"""
Subscriber value types - Validated name and email.

Untrusted input is turned into these types once, at the edge of the
domain. Everything downstream (persistence, dispatch) only accepts the
validated types, so a NewSubscriber can never be built from unchecked
fields.
"""

import unicodedata
from dataclasses import dataclass

import email_validator
from email_validator import EmailNotValidError, validate_email

from .exceptions import ValidationFailure

MAX_NAME_LENGTH = 256
FORBIDDEN_NAME_CHARACTERS = frozenset('/()"<>\\{}')

# Reserved names (localhost, .local, .test) are accepted like any other domain.
email_validator.SPECIAL_USE_DOMAIN_NAMES.clear()


@dataclass(frozen=True)
class SubscriberEmail:
    """Syntactically valid email address. No DNS or deliverability check."""

    value: str

    @classmethod
    def parse(cls, raw: str) -> "SubscriberEmail":
        """
        Validate a raw string as an email address.

        Single-label domains and bracketed IP literals are accepted.
        The stored value is the input string, unchanged.

        Raises:
            ValidationFailure: If the string is not a valid email address
        """
        try:
            validate_email(
                raw,
                check_deliverability=False,
                globally_deliverable=False,
                allow_domain_literal=True,
            )
        except EmailNotValidError as e:
            raise ValidationFailure(f"{raw!r} is not a valid subscriber email.") from e
        return cls(raw)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SubscriberName:
    """Display name: non-blank, at most 256 code points, no markup or control characters."""

    value: str

    @classmethod
    def parse(cls, raw: str) -> "SubscriberName":
        """
        Validate a raw string as a subscriber name.

        Raises:
            ValidationFailure: If the name is blank, too long, or contains
                one of / ( ) " < > \\ { } or a control character
        """
        is_blank = raw.strip() == ""
        is_too_long = len(raw) > MAX_NAME_LENGTH
        has_forbidden_characters = any(
            c in FORBIDDEN_NAME_CHARACTERS or unicodedata.category(c) == "Cc" for c in raw
        )

        if is_blank or is_too_long or has_forbidden_characters:
            raise ValidationFailure(f"{raw!r} is not a valid subscriber name.")
        return cls(raw)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class NewSubscriber:
    """Validated subscription request."""

    name: SubscriberName
    email: SubscriberEmail

    @classmethod
    def parse(cls, name: str, email: str) -> "NewSubscriber":
        """Validate both fields, name first."""
        return cls(name=SubscriberName.parse(name), email=SubscriberEmail.parse(email))


@dataclass(frozen=True)
class ConfirmedSubscriber:
    """Recipient of newsletter issues, re-validated from stored data."""

    email: SubscriberEmail
