"""
Wrapper around a Gmail draft payload.
"""
import logging
from typing import Any, Dict

from gfa.gmail.message import GmailMessage

# Configure logger
logger = logging.getLogger(__name__)


class GmailDraft:
    """A saved draft and the message it holds."""

    def __init__(self, payload: Dict[str, Any], client):
        self.client = client
        self.raw = payload
        self.id: str = payload.get("id")
        self.message = GmailMessage(payload.get("message") or {}, client)

    def __repr__(self) -> str:
        return f"GmailDraft(id={self.id!r}, subject={self.message.subject!r})"

    def edit(self):
        """Draft sendable prefilled from this draft, saved back with ``save()``."""
        # Imported here, sendable imports this module
        from gfa.gmail.sendable import Draft
        return Draft(self.client, draft=self).hydrate()

    def send(self) -> GmailMessage:
        """
        Send the draft as it is stored.

        Returns:
            The sent message, fetched again
        """
        users = self.client.service.users()
        sent = self.client.execute(
            users.drafts().send(userId=self.client.user_id, body={"id": self.id})
        )
        logger.info(f"Sent draft {self.id} as message {sent.get('id')}")
        return GmailMessage(
            self.client.execute(
                users.messages().get(userId=self.client.user_id, id=sent["id"], format="full")
            ),
            self.client,
        )

    def delete(self) -> None:
        self.client.execute(
            self.client.service.users().drafts().delete(userId=self.client.user_id, id=self.id)
        )
        logger.info(f"Deleted draft {self.id}")
