"""
Authentication module for the Gmail Fluent API.

This module loads stored Google OAuth credentials and defines the errors
raised when they are missing or unusable.
"""
from gfa.auth.credentials import credentials_usable, load_credentials
from gfa.auth.exceptions import (
    AuthError,
    TokenNotFoundError,
    TokenNotValidError,
)

__all__ = [
    "credentials_usable",
    "load_credentials",
    "AuthError",
    "TokenNotFoundError",
    "TokenNotValidError",
]
