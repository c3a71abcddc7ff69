"""
Thread listing and operations.
"""
import logging
from typing import Any, Dict, Union

from gfa.gmail.resource import PaginatedResource
from gfa.gmail.thread import GmailThread

# Configure logger
logger = logging.getLogger(__name__)

ThreadOrId = Union[GmailThread, str]


class ThreadResource(PaginatedResource):
    """Search, fetch and modify threads with the same filters as messages."""

    items_key = "threads"

    def default_page_size(self) -> int:
        return self.client.settings.gmail.threads_per_page

    def _threads(self):
        return self.client.service.users().threads()

    def list_request(self, params: Dict[str, Any]):
        return self._threads().list(userId=self.client.user_id, **params)

    def get_request(self, item_id: str):
        return self._threads().get(userId=self.client.user_id, id=item_id, format="full")

    def wrap(self, payload: Dict[str, Any]) -> GmailThread:
        return GmailThread(payload, self.client)

    def _resolve(self, thread: ThreadOrId) -> GmailThread:
        if isinstance(thread, GmailThread):
            return thread
        return self.get(thread)

    def modify_labels(self, thread: ThreadOrId, add=None, remove=None) -> GmailThread:
        return self._resolve(thread).modify_labels(add, remove)

    def add_labels(self, thread: ThreadOrId, label_ids) -> GmailThread:
        return self._resolve(thread).add_labels(label_ids)

    def remove_labels(self, thread: ThreadOrId, label_ids) -> GmailThread:
        return self._resolve(thread).remove_labels(label_ids)

    def trash(self, thread: ThreadOrId) -> GmailThread:
        return self._resolve(thread).trash()

    def untrash(self, thread: ThreadOrId) -> GmailThread:
        return self._resolve(thread).untrash()

    def delete(self, thread: ThreadOrId) -> None:
        thread_id = thread.id if isinstance(thread, GmailThread) else thread
        self.client.execute(self._threads().delete(userId=self.client.user_id, id=thread_id))
        logger.info(f"Deleted thread {thread_id}")
