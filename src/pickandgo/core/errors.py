"""Error handling with friendly messages."""

from __future__ import annotations

from typing import Any


class PickAndGoError(Exception):
    """Base exception for all Pick & Go client errors."""

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        self.message = message
        self.suggestion = suggestion
        super().__init__(message)

    def __str__(self) -> str:
        if self.suggestion:
            return f"{self.message}\nSuggestion: {self.suggestion}"
        return self.message


class ConfigError(PickAndGoError):
    """Configuration error."""

    pass


class ApiError(PickAndGoError):
    """Backend call failed.

    Mirrors the error envelope the backend returns: the payload's ``message``
    when a response exists, otherwise a generic network error.
    """

    def __init__(
        self,
        message: str = "Network error",
        status_code: int | None = None,
        payload: dict[str, Any] | None = None,
        suggestion: str | None = None,
    ) -> None:
        super().__init__(message, suggestion)
        self.status_code = status_code
        self.payload = payload or {"success": False, "message": message}


class NetworkTimeoutError(ApiError):
    """Backend call did not complete within the configured timeout."""

    def __init__(self, operation: str, timeout: float) -> None:
        super().__init__(
            f"Network timeout: {operation} did not respond within {timeout:g}s",
            suggestion="Check your connection and try again",
        )
        self.operation = operation
        self.timeout = timeout


class AuthError(PickAndGoError):
    """Authentication/session error."""

    pass


class FormFieldError(PickAndGoError):
    """Unknown form field path."""

    def __init__(self, path: str) -> None:
        super().__init__(
            f"Unknown vehicle form field '{path}'",
            "Use a dotted path such as 'location.city' or 'pricing.daily_rate'",
        )
        self.path = path


class StagingError(PickAndGoError):
    """Unknown document or photo slot."""

    pass


class AgreementNotAcceptedError(PickAndGoError):
    """Submission attempted before the agreement was accepted."""

    def __init__(self, message: str = "Please accept the business agreement to continue") -> None:
        super().__init__(message)


class WizardError(PickAndGoError):
    """Wizard operation not allowed in the current state."""

    pass
