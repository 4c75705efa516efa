"""Error types raised by services and the calendar integration."""

from __future__ import annotations


class CRMError(Exception):
    """Base error; the message is what callers show to the user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(CRMError):
    pass


class ValidationError(CRMError):
    pass


class GoogleCalendarError(CRMError):
    """Google OAuth / Calendar API failure."""

    def __init__(self, message: str, error_code: str | None = None, details: dict | None = None):
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}
