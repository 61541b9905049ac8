"""
Storefront error taxonomy.

Every error carries the HTTP status it maps to, so the API layer can render
all of them with a single exception handler.
"""
from typing import Any, Optional


class StorefrontError(Exception):
    status_code = 500

    def __init__(self, message: str, *, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(StorefrontError):
    """Missing or malformed caller input."""
    status_code = 400


class NotFoundError(StorefrontError):
    """Unknown product identifier."""
    status_code = 404


class ConfigurationError(StorefrontError):
    """A required external credential is absent."""
    status_code = 500


class ProviderError(StorefrontError):
    """The payment provider call failed; ``details`` holds its message."""
    status_code = 500
