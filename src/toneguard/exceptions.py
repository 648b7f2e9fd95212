"""toneguard exception hierarchy.

Provides a structured exception tree so callers can tell a rejected
input apart from an unavailable service or an unusable response.
"""

from __future__ import annotations


class ToneGuardError(Exception):
    """Base for all toneguard exceptions."""


class ValidationError(ToneGuardError):
    """Bad or missing input, raised before any service call is made."""


class ServiceError(ToneGuardError):
    """The tone service failed at the transport or service level."""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        original: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.original = original

    @property
    def is_rejection(self) -> bool:
        """True when the service refused the request (4xx)."""
        return self.status is not None and 400 <= self.status < 500

    def __str__(self) -> str:
        if self.status is None:
            return self.message
        return f"{self.message} (status {self.status})"


class ResponseParseError(ToneGuardError):
    """Service content could not be parsed as a JSON object."""


class InvalidResponseError(ToneGuardError):
    """Parsed response is missing or violates a required field."""

    def __init__(self, field: str, detail: str = ""):
        message = f"Invalid response: missing {field}" if not detail else (
            f"Invalid response: {field} {detail}"
        )
        super().__init__(message)
        self.field = field


class StoreError(ToneGuardError):
    """Record store read/write failures."""
