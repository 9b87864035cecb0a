"""
HTTP email API adapter - Implements EmailSender protocol.

Sends email through a Postmark-compatible REST API:

    POST {base_url}/email
    X-Postmark-Server-Token: <token>
    {"From": ..., "To": ..., "Subject": ..., "HtmlBody": ..., "TextBody": ...}

Any transport error or non-2xx response is raised as EmailDeliveryError,
with the httpx exception attached as __cause__. No retries.
"""

import logging

import httpx
from pydantic import SecretStr

from src.domain.ports import EmailDeliveryError

logger = logging.getLogger(__name__)


class HttpEmailClient:
    """
    Implements EmailSender protocol via httpx.

    Uses structural subtyping - no explicit inheritance from Protocol.
    One httpx.Client (and its connection pool) is shared by all requests.
    """

    def __init__(
        self,
        base_url: str,
        sender: str,
        authorization_token: SecretStr,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: Email API root, e.g. https://api.postmarkapp.com
            sender: Address used in the From field
            authorization_token: API server token
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.sender = sender
        self._authorization_token = authorization_token
        self._client = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def send_email(self, recipient: str, subject: str, html_body: str, text_body: str) -> None:
        payload = {
            "From": self.sender,
            "To": recipient,
            "Subject": subject,
            "HtmlBody": html_body,
            "TextBody": text_body,
        }
        headers = {"X-Postmark-Server-Token": self._authorization_token.get_secret_value()}

        try:
            response = self._client.post("/email", json=payload, headers=headers)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise EmailDeliveryError(f"email API rejected or failed the request: {e}") from e

        logger.debug("Email API accepted message to %s", recipient)

    def close(self) -> None:
        """Close the underlying connection pool."""
        self._client.close()
