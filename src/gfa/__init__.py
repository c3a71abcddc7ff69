"""
Gmail Fluent API (GFA)

A fluent, synchronous client for the Gmail REST API: build search queries,
page through messages, threads and drafts, read message parts and
attachments, and send mail or save drafts on existing threads.
"""

__version__ = "1.0.0"
__license__ = "MIT"

# Import key components for easier access
from gfa.config import get_settings, load_settings, Settings
from gfa.auth import AuthError, TokenNotValidError
from gfa.exceptions import GmailError
from gfa.filters import GmailFilter, PageCursor, QueryToken
from gfa.gmail import GmailClient

# Version information tuple (major, minor, patch)
VERSION = tuple(map(int, __version__.split(".")))
