"""
Mailbox history listing.

History is paged like the other list endpoints but takes no search query,
so it keeps its own parameters instead of extending the search filter.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from gfa.exceptions import PreconditionError
from gfa.filters import PageCursor
from gfa.gmail.models import GmailHistory, HistoryAction

# Configure logger
logger = logging.getLogger(__name__)

# Values accepted by the historyTypes parameter
HISTORY_TYPES = {
    HistoryAction.MESSAGE_ADDED: "messageAdded",
    HistoryAction.MESSAGE_DELETED: "messageDeleted",
    HistoryAction.LABELS_ADDED: "labelAdded",
    HistoryAction.LABELS_REMOVED: "labelRemoved",
}


class HistoryList(list):
    """One page of history records."""

    def __init__(
        self,
        resource: "HistoryResource",
        items: Iterable[GmailHistory] = (),
        cursor: Optional[PageCursor] = None,
    ):
        super().__init__(items)
        self._resource = resource
        self.current_page_token = cursor.current_token if cursor else None
        self.next_page_token = cursor.next_token if cursor else None

    def has_next_page(self) -> bool:
        return bool(self.next_page_token)

    def next(self) -> "HistoryList":
        return self._resource.page_after(self.next_page_token)


class HistoryResource:
    """
    Changes to the mailbox since a known history id.

    Example:
        client.history().start_history_id("12345").history_types("messageAdded").list()
    """

    def __init__(self, client):
        client.throw_if_not_authenticated()
        self.client = client
        self.cursor = PageCursor()

        self._max_results: int = client.settings.gmail.history_per_page
        self._label_id: Optional[str] = None
        self._history_types: List[str] = []
        self._start_history_id: Optional[str] = None

    def max_results(self, max_results: int) -> "HistoryResource":
        if max_results and max_results > 0:
            self._max_results = int(max_results)
        return self

    def label_id(self, label_id: str) -> "HistoryResource":
        self._label_id = label_id
        return self

    def history_types(self, history_types: Union[str, HistoryAction, Iterable]) -> "HistoryResource":
        """
        Restrict the change kinds returned.

        Args:
            history_types: API names such as "messageAdded", or HistoryAction members
        """
        if isinstance(history_types, (str, HistoryAction)):
            history_types = [history_types]
        self._history_types = [
            HISTORY_TYPES.get(value, value) if isinstance(value, HistoryAction) else value
            for value in history_types
        ]
        return self

    def start_history_id(self, start_history_id: Union[str, int]) -> "HistoryResource":
        self._start_history_id = str(start_history_id)
        return self

    def to_request_params(self, page_token: Optional[str] = None) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if page_token:
            params["pageToken"] = page_token
        if self._max_results:
            params["maxResults"] = self._max_results
        if self._label_id:
            params["labelId"] = self._label_id
        if self._history_types:
            params["historyTypes"] = list(self._history_types)
        if self._start_history_id:
            params["startHistoryId"] = self._start_history_id
        return params

    def list(self, page_token: Optional[str] = None) -> HistoryList:
        """
        Fetch a page of history records.

        Raises:
            PreconditionError: If no start history id was set
        """
        self.cursor.reset()
        return self._fetch_page(page_token)

    def next(self) -> HistoryList:
        return self.page_after(self.cursor.next_token)

    def page_after(self, next_token: Optional[str]) -> HistoryList:
        """Fetch the page for ``next_token``; empty without a token."""
        if not next_token:
            return HistoryList(self)
        return self._fetch_page(next_token)

    def _fetch_page(self, page_token: Optional[str]) -> HistoryList:
        if not self._start_history_id:
            raise PreconditionError("start_history_id is required to list history")

        params = self.to_request_params(page_token)
        logger.debug(f"Listing history with params {params}")

        response = self.client.execute(
            self.client.service.users().history().list(userId=self.client.user_id, **params)
        )
        self.cursor.record_page(page_token, response.get("nextPageToken"))

        return HistoryList(
            self,
            [GmailHistory.from_api(entry) for entry in response.get("history") or []],
            self.cursor,
        )
