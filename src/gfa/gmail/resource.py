"""
Shared listing logic for messages, threads and drafts.

A resource is a search filter bound to a client: list endpoints are called
with the rendered filter, the returned stubs are hydrated with one batch of
``get`` requests, and the page tokens are kept on a cursor so the caller can
move forwards and backwards through the results.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from gfa.filters import GmailFilter, PageCursor

# Configure logger
logger = logging.getLogger(__name__)


class PaginatedList(list):
    """
    One page of wrapped results.

    Besides the items it carries the page position, captured when the page is
    built, and a way to fetch the neighbouring pages from the resource that
    produced it. A page returned past either end of the results is empty and
    has no position.
    """

    def __init__(
        self,
        resource: "PaginatedResource",
        items: Iterable[Any] = (),
        total: Optional[int] = None,
        cursor: Optional[PageCursor] = None,
    ):
        super().__init__(items)
        self._resource = resource

        self.total = total
        self.per_page = resource.per_page
        if cursor is None:
            self.page = None
            self.first_item = self.last_item = None
            self.current_page_token = self.next_page_token = None
            self._has_previous = False
            self._previous_page_token = None
            return

        self.page = cursor.page_number
        self.first_item, self.last_item = cursor.page_bounds(self.per_page, total)
        self.current_page_token = cursor.current_token
        self.next_page_token = cursor.next_token
        self._has_previous = cursor.has_previous()
        self._previous_page_token = cursor.previous_token()

    def has_next_page(self) -> bool:
        return bool(self.next_page_token)

    def has_previous_page(self) -> bool:
        return self._has_previous

    def previous_page_token(self) -> Optional[str]:
        return self._previous_page_token

    def next(self) -> "PaginatedList":
        """Fetch the page after this one (empty when there is none)."""
        return self._resource.page_after(self.next_page_token)

    def previous(self) -> "PaginatedList":
        """Fetch the page before this one (empty when there is none)."""
        return self._resource.page_before(self._has_previous, self._previous_page_token)


class PaginatedResource(GmailFilter):
    """
    Base class for list endpoints that take a search query.

    Subclasses set ``items_key`` and must override ``list_request``,
    ``get_request`` and ``wrap``.
    """

    # Key of the stub list in the list response
    items_key = ""

    def __init__(self, client):
        client.throw_if_not_authenticated()
        super().__init__()
        self.client = client
        self.cursor = PageCursor()
        self.max_results(self.default_page_size())

    def default_page_size(self) -> int:
        return self.default_max_results

    def list(self, page_token: Optional[str] = None) -> PaginatedList:
        """
        Fetch a page, starting a new pagination history.

        Args:
            page_token: Token of the page to fetch (first page if None)
        """
        self.cursor.reset()
        return self._fetch_page(page_token)

    def next(self) -> PaginatedList:
        return self.page_after(self.cursor.next_token)

    def previous(self) -> PaginatedList:
        return self.page_before(self.cursor.has_previous(), self.cursor.previous_token())

    def page_after(self, next_token: Optional[str]) -> PaginatedList:
        """Fetch the page for ``next_token``; empty without a token."""
        if not next_token:
            return PaginatedList(self)
        return self._fetch_page(next_token)

    def page_before(self, available: bool, previous_token: Optional[str]) -> PaginatedList:
        """Fetch the page for ``previous_token``, None being the first page."""
        if not available:
            return PaginatedList(self)

        # The token is recorded again once the page is fetched
        self.cursor.truncate_for_back_navigation(previous_token)
        return self._fetch_page(previous_token)

    def get(self, item_id: str):
        """Fetch and wrap a single item."""
        return self.wrap(self.client.execute(self.get_request(item_id)))

    def list_request(self, params: Dict[str, Any]):
        """Build the list request for ``params``. Required override."""
        raise NotImplementedError(f"{type(self).__name__} must implement list_request")

    def get_request(self, item_id: str):
        """Build the get request for one item. Required override."""
        raise NotImplementedError(f"{type(self).__name__} must implement get_request")

    def wrap(self, payload: Dict[str, Any]):
        """Wrap one fetched payload. Required override."""
        raise NotImplementedError(f"{type(self).__name__} must implement wrap")

    def _fetch_page(self, page_token: Optional[str]) -> PaginatedList:
        params = self.to_request_params(page_token)
        logger.debug(f"Listing {self.items_key} with params {params}")

        response = self.client.execute(self.list_request(params))
        self.cursor.record_page(page_token, response.get("nextPageToken"))

        total = response.get("resultSizeEstimate", 0)
        stubs: List[Dict[str, Any]] = response.get(self.items_key) or []
        if not stubs:
            return PaginatedList(self, [], total, self.cursor)

        payloads = self.client.execute_batch(
            [self.get_request(stub["id"]) for stub in stubs]
        )
        return PaginatedList(
            self, [self.wrap(payload) for payload in payloads], total, self.cursor
        )


def as_id_list(value) -> List[str]:
    """Accept one label id or a list of them."""
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)
