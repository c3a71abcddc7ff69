"""
Custom exceptions for the authentication module.

This module defines exceptions raised when stored Google credentials are
missing or cannot be used to talk to the Gmail API.
"""


class AuthError(Exception):
    """Base exception class for authentication errors."""

    def __init__(self, message: str = "Authentication error occurred"):
        self.message = message
        super().__init__(self.message)


class TokenNotFoundError(AuthError):
    """Raised when no stored token exists at the configured location."""

    def __init__(self, location: str = None):
        message = f"Token not found at: {location}" if location else "Token not found"
        super().__init__(message)
        self.location = location


class TokenNotValidError(AuthError):
    """Raised when the client is used without usable credentials."""

    DEFAULT_MESSAGE = "Google client is not authenticated. Please login again."

    def __init__(self, message: str = None, original_error=None):
        super().__init__(message or self.DEFAULT_MESSAGE)
        self.original_error = original_error
