"""
Logging utilities for the duplication job and the setup server.

Provides a consistent logging format and configuration.
"""

import logging
import sys


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with a sensible default format."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )
    # httpx logs every request line at INFO, including token endpoint URLs.
    logging.getLogger("httpx").setLevel(logging.WARNING)


def preview_token(token: str) -> str:
    """Return the first eight characters of a token for audit output."""
    return f"{token[:8]}..."


__all__ = ["configure_logging", "preview_token"]
