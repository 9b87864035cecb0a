"""
Console email sender adapter - Implements EmailSender protocol.

This module provides a console-based implementation of the domain's
email sender port, logging outgoing emails for local development.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleEmailSender:
    """
    Implements EmailSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For development purposes - confirmation links show up in the logs.
    """

    def send_email(self, recipient: str, subject: str, html_body: str, text_body: str) -> None:
        """
        Log an email instead of delivering it.

        Only the plain-text body is logged; it carries the same content
        as the HTML body, including any confirmation link.
        """
        logger.info("[EMAIL] To: %s Subject: %s\n%s", recipient, subject, text_body)

    def close(self) -> None:
        """Nothing to release."""
