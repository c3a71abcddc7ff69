"""
Gmail client for the Gmail Fluent API.

This module provides the entry point of the library: a client bound to one
set of credentials that builds the Gmail API service, executes single and
batched requests, and hands out resource objects for messages, threads,
drafts, labels, history and push notifications.
"""
import logging
from typing import Any, Dict, List, Optional, Sequence

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from gfa.auth import TokenNotValidError, credentials_usable, load_credentials
from gfa.config import Settings, get_settings
from gfa.gmail.drafts import DraftResource
from gfa.gmail.history import HistoryResource
from gfa.gmail.labels import LabelResource
from gfa.gmail.messages import MessageResource
from gfa.gmail.threads import ThreadResource
from gfa.gmail.watch import WatchResource

# Configure logger
logger = logging.getLogger(__name__)

# Constants
GMAIL_API_VERSION = "v1"


class GmailClient:
    """
    Synchronous client for the Gmail API.

    Requests are executed as they are made; batching is chosen per call
    through :meth:`execute_batch` and never stored on the client.
    """

    def __init__(
        self,
        credentials=None,
        settings: Optional[Settings] = None,
        service=None,
    ):
        """
        Initialize the Gmail client.

        Args:
            credentials: Google OAuth credentials
            settings: Application settings
            service: Prebuilt Gmail API service (built from credentials if None)
        """
        self.credentials = credentials
        self.settings = settings or get_settings()
        self.user_id = self.settings.gmail.user_id

        self._service = service
        self._profile: Optional[Dict[str, Any]] = None

        logger.debug("Gmail client initialized")

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "GmailClient":
        """Create a client from the token file named in the settings."""
        settings = settings or get_settings()
        return cls(credentials=load_credentials(settings.auth), settings=settings)

    def is_authenticated(self) -> bool:
        """Whether requests can be made with this client."""
        if self.credentials is None:
            return self._service is not None
        return credentials_usable(self.credentials)

    def throw_if_not_authenticated(self) -> None:
        """
        Raises:
            TokenNotValidError: If the client has no usable credentials
        """
        if not self.is_authenticated():
            raise TokenNotValidError()

    @property
    def service(self):
        """Gmail API service, built on first use."""
        if self._service is None:
            self.throw_if_not_authenticated()
            self._service = build(
                "gmail",
                GMAIL_API_VERSION,
                credentials=self.credentials,
                cache_discovery=False,
            )
        return self._service

    def execute(self, request) -> Any:
        """
        Execute one API request.

        Raises:
            HttpError: Propagated unchanged from the transport
        """
        try:
            return request.execute()
        except HttpError as e:
            logger.error(f"Gmail API HTTP error: {e}")
            raise

    def execute_batch(self, requests: Sequence[Any]) -> List[Any]:
        """
        Execute requests in batch calls.

        Args:
            requests: Unexecuted API requests

        Returns:
            Responses in the order of ``requests``

        Raises:
            Exception: The error of the first failed request, unchanged
        """
        requests = list(requests)
        if not requests:
            return []

        responses: List[Any] = [None] * len(requests)
        batch_size = self.settings.gmail.batch_size

        for start in range(0, len(requests), batch_size):
            chunk = requests[start:start + batch_size]
            errors: Dict[int, Exception] = {}

            def callback(request_id, response, exception):
                index = int(request_id)
                if exception is not None:
                    errors[index] = exception
                else:
                    responses[index] = response

            batch = self.service.new_batch_http_request(callback=callback)
            for offset, request in enumerate(chunk):
                batch.add(request, request_id=str(start + offset))

            logger.debug(f"Executing batch of {len(chunk)} requests")
            batch.execute()

            if errors:
                first = min(errors)
                logger.error(
                    f"{len(errors)} of {len(chunk)} batched requests failed, "
                    f"first at position {first}: {errors[first]}"
                )
                raise errors[first]

        return responses

    def profile(self, refresh: bool = False) -> Dict[str, Any]:
        """Profile of the mailbox owner (emailAddress, messagesTotal, ...)."""
        if self._profile is None or refresh:
            self._profile = self.execute(
                self.service.users().getProfile(userId=self.user_id)
            )
        return self._profile

    @property
    def email(self) -> Optional[str]:
        """Email address of the mailbox owner."""
        return self.profile().get("emailAddress")

    def messages(self):
        return MessageResource(self)

    def threads(self):
        return ThreadResource(self)

    def drafts(self):
        return DraftResource(self)

    def labels(self):
        return LabelResource(self)

    def history(self):
        return HistoryResource(self)

    def watch(self):
        return WatchResource(self)
