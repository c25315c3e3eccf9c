"""
Error taxonomy for the Optimizely client.

Configuration and validation errors are raised synchronously, before any
request is scheduled. The remaining errors are the rejection values of an
awaited request.
"""

import json
from typing import Any, Optional, Sequence


class OptimizelyError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(OptimizelyError, ValueError):
    """The client cannot be constructed with the given settings."""


class ValidationError(OptimizelyError, ValueError):
    """A required field is missing or empty on an operation call."""

    def __init__(self, message: str, fields: Sequence[str] = ()):
        super().__init__(message)
        self.fields = tuple(fields)


class ServerError(OptimizelyError):
    """The remote service answered with a non-success status."""

    def __init__(self, status_code: int, body: str, url: Optional[str] = None):
        super().__init__(f"Server error {status_code}: {body[:200]}")
        self.status_code = status_code
        self.body = body
        self.url = url

    def json(self) -> Any:
        """Decode the error body, which the API usually sends as JSON."""
        return json.loads(self.body)


class TransportError(OptimizelyError):
    """The request never produced a response (DNS, connect, protocol...)."""


class CancelledError(OptimizelyError):
    """The in-flight request was aborted before it completed."""


class TimedOutError(OptimizelyError):
    """The transport gave up waiting for the response."""
