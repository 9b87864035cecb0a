"""Logging setup for the application process."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install a stream handler on the root logger (no-op if one exists)."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
