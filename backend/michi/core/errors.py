"""Error taxonomy shared by services and routes.

Every error carries the HTTP status it maps to so the exception handlers in
``michi.main`` can render ``{"error": ..., "details": ...}`` bodies without
each route repeating the translation.
"""
from __future__ import annotations

from typing import Any


class MichiError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500

    def __init__(self, message: str, *, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ConfigurationError(MichiError):
    """A required setting (API key, store path) is missing or unusable."""

    status_code = 500


class InvalidRequestError(MichiError, ValueError):
    """Caller supplied input that must be corrected before resubmitting."""

    status_code = 400


class NotFoundError(MichiError):
    status_code = 404


class SchemaMismatchError(MichiError):
    """Generative model output failed structural validation."""

    status_code = 500

    def __init__(self, message: str = "AI response does not match schema", *, details: Any = None) -> None:
        super().__init__(message, details=details)


class UpstreamUnavailableError(MichiError):
    """Third-party quota or credential failure; upstream text is never leaked."""

    status_code = 502

    def __init__(self, message: str = "The AI service is temporarily unavailable") -> None:
        super().__init__(message)
