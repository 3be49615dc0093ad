"""Errors raised by alert ingestion and rendered by the API layer."""

from __future__ import annotations


class AlertServiceError(Exception):
    """Base error carrying the HTTP-facing status and message."""

    status_code = 500

    def __init__(self, error: str, *, reason: str | None = None) -> None:
        super().__init__(error)
        self.error = error
        self.reason = reason


class AlertValidationError(AlertServiceError):
    """Request is missing a required field."""

    status_code = 400


class SenderBlockedError(AlertServiceError):
    """Sending account has an active block."""

    status_code = 403

    def __init__(self, user_id: str, reason: str | None) -> None:
        super().__init__("User is blocked and cannot send alerts", reason=reason)
        self.user_id = user_id


class AlertProcessingError(AlertServiceError):
    """Unexpected failure after the request was accepted."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__("Internal server error")
        self.message = message
