"""Email adapters - Outbound email implementations."""

from .console import ConsoleEmailSender
from .http_client import HttpEmailClient

__all__ = ["ConsoleEmailSender", "HttpEmailClient"]
