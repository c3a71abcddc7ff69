"""
Wrapper around a Gmail thread payload.
"""
import logging
from typing import Any, Dict, List, Optional

from gfa.gmail.message import GmailMessage
from gfa.gmail.resource import as_id_list

# Configure logger
logger = logging.getLogger(__name__)


class GmailThread:
    """A conversation of messages. Modifying operations re-fetch the thread."""

    def __init__(self, payload: Dict[str, Any], client):
        self.client = client
        self._load(payload)

    def _load(self, payload: Dict[str, Any]) -> None:
        self.raw = payload
        self.id: str = payload.get("id")
        self.history_id: Optional[str] = payload.get("historyId")
        self.snippet: str = payload.get("snippet") or ""
        self.messages: List[GmailMessage] = [
            GmailMessage(message, self.client) for message in payload.get("messages") or []
        ]

    def __repr__(self) -> str:
        return f"GmailThread(id={self.id!r}, messages={len(self.messages)})"

    def _threads(self):
        return self.client.service.users().threads()

    def refresh(self) -> "GmailThread":
        """Reload the thread from the API."""
        self._load(
            self.client.execute(
                self._threads().get(userId=self.client.user_id, id=self.id, format="full")
            )
        )
        return self

    def modify_labels(self, add=None, remove=None) -> "GmailThread":
        """Add and remove labels on every message of the thread."""
        add_ids = as_id_list(add)
        remove_ids = as_id_list(remove)
        if not add_ids and not remove_ids:
            return self

        body = {}
        if add_ids:
            body["addLabelIds"] = add_ids
        if remove_ids:
            body["removeLabelIds"] = remove_ids

        logger.debug(f"Modifying labels of thread {self.id}: {body}")
        self.client.execute(
            self._threads().modify(userId=self.client.user_id, id=self.id, body=body)
        )
        return self.refresh()

    def add_labels(self, label_ids) -> "GmailThread":
        return self.modify_labels(add=label_ids)

    def remove_labels(self, label_ids) -> "GmailThread":
        return self.modify_labels(remove=label_ids)

    def trash(self) -> "GmailThread":
        self.client.execute(self._threads().trash(userId=self.client.user_id, id=self.id))
        return self.refresh()

    def untrash(self) -> "GmailThread":
        self.client.execute(self._threads().untrash(userId=self.client.user_id, id=self.id))
        return self.refresh()

    def delete(self) -> None:
        self.client.execute(self._threads().delete(userId=self.client.user_id, id=self.id))
        logger.info(f"Deleted thread {self.id}")
