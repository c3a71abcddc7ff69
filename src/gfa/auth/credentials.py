"""
Loading of stored Google OAuth credentials.

Obtaining and refreshing tokens is left to ``google-auth``; this module only
reads an authorized-user token file written by any OAuth flow and tells
whether it can be used.
"""
import json
import logging
from pathlib import Path
from typing import Optional

from google.oauth2.credentials import Credentials

from gfa.auth.exceptions import TokenNotFoundError, TokenNotValidError

# Configure logger
logger = logging.getLogger(__name__)


def load_credentials(auth_settings) -> Credentials:
    """
    Load credentials from the authorized-user token file.

    Args:
        auth_settings: Authentication settings from config

    Returns:
        OAuth credentials

    Raises:
        TokenNotFoundError: If the token file does not exist
        TokenNotValidError: If the file cannot be read as authorized-user info
    """
    token_path = Path(auth_settings.token_path).expanduser()
    if not token_path.exists():
        raise TokenNotFoundError(str(token_path))

    try:
        credentials = Credentials.from_authorized_user_file(
            str(token_path), scopes=list(auth_settings.scopes)
        )
    except (ValueError, json.JSONDecodeError) as e:
        logger.error(f"Invalid token file {token_path}: {e}")
        raise TokenNotValidError(f"Invalid token file {token_path}: {e}", original_error=e)

    logger.debug(f"Loaded credentials from {token_path}")
    return credentials


def credentials_usable(credentials: Optional[Credentials]) -> bool:
    """
    Whether requests can be made with ``credentials``.

    Expired credentials still count when they carry a refresh token, since
    the transport refreshes them on the next request.
    """
    if credentials is None:
        return False
    return bool(credentials.valid or credentials.refresh_token)
