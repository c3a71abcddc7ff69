"""
Page-token bookkeeping for Gmail list endpoints.

Gmail pages forward only: each response carries an opaque token for the next
page and nothing for the previous one. The cursor records every token it has
used so a "previous page" can be requested by replaying an earlier token.
"""
from typing import List, Optional, Tuple


class PageCursor:
    """Tracks the current, next and previously visited page tokens."""

    def __init__(self):
        # None stands for the first page
        self.visited_tokens: List[Optional[str]] = []
        self.current_token: Optional[str] = None
        self.next_token: Optional[str] = None

    def reset(self) -> None:
        """
        Start a new query.

        The history restarts at the first page, so a query opened at a later
        page token can still step back to the first one.
        """
        self.visited_tokens = [None]
        self.current_token = None
        self.next_token = None

    @property
    def current_index(self) -> int:
        """Position of the current token in the history, -1 if absent."""
        try:
            return self.visited_tokens.index(self.current_token)
        except ValueError:
            return -1

    def record_page(self, used_token: Optional[str], next_token: Optional[str]) -> None:
        """
        Record a fetched page.

        Args:
            used_token: Token the page was requested with (None for the first page)
            next_token: Token returned by the API; falsy when this is the last page
        """
        self.current_token = used_token
        if used_token not in self.visited_tokens:
            self.visited_tokens.append(used_token)
        self.next_token = next_token or None

    def has_next(self) -> bool:
        return bool(self.next_token)

    def has_previous(self) -> bool:
        return self.current_index > 0

    def previous_token(self) -> Optional[str]:
        """Token of the page before the current one, or None."""
        if not self.has_previous():
            return None
        return self.visited_tokens[self.current_index - 1]

    def truncate_for_back_navigation(self, target: Optional[str]) -> None:
        """
        Drop ``target`` and every token recorded after it.

        The API may hand out different tokens for the same query later on, so
        forward entries are re-recorded when those pages are visited again.
        """
        if target in self.visited_tokens:
            del self.visited_tokens[self.visited_tokens.index(target):]

    @property
    def page_number(self) -> Optional[int]:
        """1-based number of the current page, None before the first fetch."""
        index = self.current_index
        return index + 1 if index >= 0 else None

    def page_bounds(
        self, per_page: int, total: Optional[int] = None
    ) -> Tuple[Optional[int], Optional[int]]:
        """
        1-based numbers of the first and last item on the current page.

        The last number is capped at ``total`` when an estimate is known; a page
        past the estimate has no bounds.
        """
        page = self.page_number
        if page is None or not per_page:
            return None, None
        first = (page - 1) * per_page + 1
        last = page * per_page
        if total is not None and last > total:
            last = total
        if first > last:
            return None, None
        return first, last
