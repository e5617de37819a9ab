"""
Error taxonomy for the duplication job.

Every fatal condition is raised as a ``JobError`` subclass carrying an
``ErrorKind``; the job entrypoint maps kinds to process exit codes.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

import httpx


class ErrorKind(str, Enum):
    CONFIGURATION = "configuration"
    AUTHENTICATION = "authentication"
    UPSTREAM = "upstream"
    PERSISTENCE = "persistence"


class JobError(Exception):
    """Base class for errors that end a job run."""

    kind: ErrorKind


class ConfigurationError(JobError):
    """Raised when a required setting is missing before any API call."""

    kind = ErrorKind.CONFIGURATION


class PersistenceError(JobError):
    """Raised when a rotated refresh token cannot be written."""

    kind = ErrorKind.PERSISTENCE


class HTTPJobError(JobError):
    """An error derived from an HTTP exchange with Misoca."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        status_text: Optional[str] = None,
        body: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.status_text = status_text
        self.body = body

    @classmethod
    def from_response(cls, response: httpx.Response, message: str):
        try:
            body: Any = response.json()
        except ValueError:
            body = response.text
        return cls(
            message,
            status_code=response.status_code,
            status_text=response.reason_phrase,
            body=body,
        )

    @classmethod
    def from_transport_error(cls, exc: httpx.HTTPError):
        return cls(str(exc) or exc.__class__.__name__)

    @property
    def error_code(self) -> Optional[str]:
        """The OAuth/API ``error`` field of a JSON error body, if any."""
        if isinstance(self.body, dict):
            value = self.body.get("error")
            return value if isinstance(value, str) else None
        return None

    def diagnostics(self) -> Dict[str, Any]:
        return {
            "status": self.status_code,
            "status_text": self.status_text,
            "data": self.body,
            "message": self.message,
        }


class AuthenticationError(HTTPJobError):
    kind = ErrorKind.AUTHENTICATION


class UpstreamAPIError(HTTPJobError):
    kind = ErrorKind.UPSTREAM


__all__ = [
    "AuthenticationError",
    "ConfigurationError",
    "ErrorKind",
    "HTTPJobError",
    "JobError",
    "PersistenceError",
    "UpstreamAPIError",
]
