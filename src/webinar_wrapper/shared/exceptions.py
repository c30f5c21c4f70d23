"""
Shared exceptions.

Every error that can reach the HTTP boundary derives from AppError and
carries the status code it maps to.
"""

from __future__ import annotations

from typing import Any, Optional


class AppError(Exception):
    """Base application error."""

    status_code: int = 500

    def __init__(self, message: str = "Application error", details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def to_response(self) -> dict[str, Any]:
        return {"error": self.message}


class ConfigurationError(AppError):
    """Required credentials are missing for the requested provider or channel."""

    status_code = 400


class ValidationError(AppError):
    """A batch could not be processed because none of its records are valid."""

    status_code = 400

    def __init__(
        self,
        message: str,
        validation_errors: Optional[list[str]] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details)
        self.validation_errors = list(validation_errors or [])

    def to_response(self) -> dict[str, Any]:
        body = super().to_response()
        body["validation_errors"] = self.validation_errors
        return body


class ProviderError(AppError):
    """A meeting provider rejected a credential exchange or provisioning call."""

    status_code = 500

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        provider_response: dict[str, Any] | None = None,
        webinar_name: str | None = None,
    ) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.provider_response = provider_response or {}
        self.webinar_name = webinar_name


class CredentialError(ProviderError):
    """Provider credential could not be obtained for the batch."""


class DeliveryError(AppError):
    """A single notification could not be delivered.

    Captured into the recipient's outcome; never surfaces as an HTTP error.
    """

    def __init__(self, message: str, error_code: str | None = None) -> None:
        super().__init__(message)
        self.error_code = error_code


class UnexpectedError(AppError):
    """Anything else raised while handling a request."""

    status_code = 500
