"""
Message listing and bulk operations.
"""
import logging
from typing import Any, Dict, Iterable, List, Union

from gfa.gmail.message import GmailMessage
from gfa.gmail.resource import PaginatedResource, as_id_list

# Configure logger
logger = logging.getLogger(__name__)

MessageOrId = Union[GmailMessage, str]


def _message_ids(messages: Iterable[MessageOrId]) -> List[str]:
    """Ids of a collection of messages or message ids."""
    if isinstance(messages, (str, GmailMessage)):
        raise TypeError("Expected a collection of messages or message ids")
    return [m.id if isinstance(m, GmailMessage) else m for m in messages]


class MessageResource(PaginatedResource):
    """
    Search, fetch and modify messages.

    The resource is also the search filter: chain filter methods and call
    :meth:`list` to fetch the first page.

    Example:
        client.messages().from_("alice@example.com").is_("unread").list()
    """

    items_key = "messages"

    def default_page_size(self) -> int:
        return self.client.settings.gmail.messages_per_page

    def _messages(self):
        return self.client.service.users().messages()

    def list_request(self, params: Dict[str, Any]):
        return self._messages().list(userId=self.client.user_id, **params)

    def get_request(self, item_id: str):
        return self._messages().get(userId=self.client.user_id, id=item_id, format="full")

    def wrap(self, payload: Dict[str, Any]) -> GmailMessage:
        return GmailMessage(payload, self.client)

    def _resolve(self, message: MessageOrId) -> GmailMessage:
        if isinstance(message, GmailMessage):
            return message
        return self.get(message)

    def create(self):
        """New email to send."""
        # Imported here, sendable imports the message wrappers
        from gfa.gmail.sendable import Email
        return Email(self.client)

    def create_reply(self, message: MessageOrId):
        return self._resolve(message).create_reply()

    def create_forward(self, message: MessageOrId):
        return self._resolve(message).create_forward()

    def create_draft(self, message: MessageOrId):
        return self._resolve(message).create_draft()

    def modify_labels(self, message: MessageOrId, add=None, remove=None) -> GmailMessage:
        return self._resolve(message).modify_labels(add, remove)

    def add_labels(self, message: MessageOrId, label_ids) -> GmailMessage:
        return self._resolve(message).add_labels(label_ids)

    def remove_labels(self, message: MessageOrId, label_ids) -> GmailMessage:
        return self._resolve(message).remove_labels(label_ids)

    def trash(self, message: MessageOrId) -> GmailMessage:
        return self._resolve(message).trash()

    def untrash(self, message: MessageOrId) -> GmailMessage:
        return self._resolve(message).untrash()

    def delete(self, message: MessageOrId) -> None:
        message_id = message.id if isinstance(message, GmailMessage) else message
        self.client.execute(
            self._messages().delete(userId=self.client.user_id, id=message_id)
        )
        logger.info(f"Deleted message {message_id}")

    def batch_modify_labels(self, messages: Iterable[MessageOrId], add=None, remove=None) -> None:
        """
        Add and remove labels on many messages in one call.

        Args:
            messages: Messages or message ids
            add: Label id or ids to add
            remove: Label id or ids to remove
        """
        ids = _message_ids(messages)
        add_ids = as_id_list(add)
        remove_ids = as_id_list(remove)
        if not ids or (not add_ids and not remove_ids):
            return

        body = {"ids": ids}
        if add_ids:
            body["addLabelIds"] = add_ids
        if remove_ids:
            body["removeLabelIds"] = remove_ids

        logger.debug(f"Batch modifying labels of {len(ids)} messages")
        self.client.execute(
            self._messages().batchModify(userId=self.client.user_id, body=body)
        )

    def batch_add_labels(self, messages: Iterable[MessageOrId], label_ids) -> None:
        self.batch_modify_labels(messages, add=label_ids)

    def batch_remove_labels(self, messages: Iterable[MessageOrId], label_ids) -> None:
        self.batch_modify_labels(messages, remove=label_ids)

    def batch_delete(self, messages: Iterable[MessageOrId]) -> None:
        """Permanently delete many messages in one call."""
        ids = _message_ids(messages)
        if not ids:
            return

        self.client.execute(
            self._messages().batchDelete(userId=self.client.user_id, body={"ids": ids})
        )
        logger.info(f"Deleted {len(ids)} messages")
