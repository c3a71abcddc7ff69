"""
Wrapper around a full Gmail message payload.
"""
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from gfa.exceptions import AttachmentNotFoundError
from gfa.gmail.extract import (
    find_attachments,
    find_body_by_content_type,
    find_header,
    flatten_parts,
    parse_date_header,
    parse_recipients,
)
from gfa.gmail.models import MessageAttachment, MessageRecipient
from gfa.gmail.resource import as_id_list

# Configure logger
logger = logging.getLogger(__name__)


class GmailMessage:
    """
    A fetched Gmail message.

    Headers, bodies, recipients and attachments are extracted once, when the
    message is built. Label operations update ``labels`` in place from the
    API response.
    """

    def __init__(self, payload: Dict[str, Any], client):
        """
        Initialize the message.

        Args:
            payload: ``users.messages`` resource fetched with ``format="full"``
            client: GmailClient the message was fetched with
        """
        self.client = client
        self.raw = payload

        part = payload.get("payload") or {}
        self._headers: List[Dict[str, str]] = part.get("headers") or []
        # Single part messages carry the body on the payload itself
        children = part.get("parts") or []
        self._flat_parts = flatten_parts(children) if children else ([part] if part else [])

        self.id: str = payload.get("id")
        self.thread_id: Optional[str] = payload.get("threadId")
        self.history_id: Optional[str] = payload.get("historyId")
        self.snippet: str = payload.get("snippet") or ""
        self.labels: List[str] = list(payload.get("labelIds") or [])

        self.header_message_id = self.get_header("message-id")
        self.reply_to = self.get_header("in-reply-to")
        self.references = self.get_header("references")
        self.subject = self.get_header("subject") or ""

        from_header = self.get_header("from") or ""
        senders = parse_recipients(from_header)
        self.from_: MessageRecipient = senders[0] if senders else MessageRecipient(email=from_header)
        self.to = parse_recipients(self.get_header("to"))
        self.cc = parse_recipients(self.get_header("cc"))
        self.bcc = parse_recipients(self.get_header("bcc"))

        date_header = self.get_header("date")
        self.date: Optional[datetime] = parse_date_header(date_header) if date_header else None

        self.text_body = find_body_by_content_type("text/plain", self._flat_parts)
        self.html_body = find_body_by_content_type("text/html", self._flat_parts)
        self.body = self.html_body or self.text_body

        self.attachments: List[MessageAttachment] = find_attachments(
            self._flat_parts, message_id=self.id, client=client
        )

    def __repr__(self) -> str:
        return f"GmailMessage(id={self.id!r}, subject={self.subject!r})"

    def get_header(self, name: str) -> Optional[str]:
        """Value of a header of the message, case-insensitive."""
        return find_header(name, self._headers)

    def _messages(self):
        return self.client.service.users().messages()

    def modify_labels(self, add=None, remove=None) -> "GmailMessage":
        """
        Add and remove labels.

        Args:
            add: Label id or ids to add
            remove: Label id or ids to remove

        Returns:
            self, with ``labels`` refreshed
        """
        add_ids = as_id_list(add)
        remove_ids = as_id_list(remove)
        if not add_ids and not remove_ids:
            return self

        body = {}
        if add_ids:
            body["addLabelIds"] = add_ids
        if remove_ids:
            body["removeLabelIds"] = remove_ids

        logger.debug(f"Modifying labels of message {self.id}: {body}")
        response = self.client.execute(
            self._messages().modify(userId=self.client.user_id, id=self.id, body=body)
        )
        self._set_labels(response)
        return self

    def add_labels(self, label_ids) -> "GmailMessage":
        return self.modify_labels(add=label_ids)

    def remove_labels(self, label_ids) -> "GmailMessage":
        return self.modify_labels(remove=label_ids)

    def trash(self) -> "GmailMessage":
        response = self.client.execute(
            self._messages().trash(userId=self.client.user_id, id=self.id)
        )
        self._set_labels(response)
        return self

    def untrash(self) -> "GmailMessage":
        response = self.client.execute(
            self._messages().untrash(userId=self.client.user_id, id=self.id)
        )
        self._set_labels(response)
        return self

    def delete(self) -> None:
        """Permanently delete the message, skipping the trash."""
        self.client.execute(
            self._messages().delete(userId=self.client.user_id, id=self.id)
        )
        logger.info(f"Deleted message {self.id}")

    def _set_labels(self, response: Optional[Dict[str, Any]]) -> None:
        label_ids = (response or {}).get("labelIds")
        if label_ids is not None:
            self.labels = list(label_ids)

    def create_reply(self):
        """Email replying to this message on its thread."""
        # Imported here, sendable imports this module
        from gfa.gmail.sendable import Email
        return Email(self.client, self).create_reply()

    def create_forward(self):
        """Email forwarding this message on its thread."""
        from gfa.gmail.sendable import Email
        return Email(self.client, self).create_forward()

    def create_draft(self):
        """Draft replying to this message on its thread."""
        from gfa.gmail.sendable import Draft
        return Draft(self.client, reply_to_message=self).with_reply_or_forward()

    def get_attachment(self, attachment_id: str) -> MessageAttachment:
        """
        Raises:
            AttachmentNotFoundError: If the message has no such attachment
        """
        for attachment in self.attachments:
            if attachment.id == attachment_id:
                return attachment
        raise AttachmentNotFoundError(attachment_id)

    def download_attachment(self, attachment_id: str) -> bytes:
        return self.get_attachment(attachment_id).download()

    def save_attachment(self, attachment_id: str, path: Union[str, Path] = "") -> Path:
        return self.get_attachment(attachment_id).save(path)

    def save_all_attachments(self, path: Union[str, Path] = "") -> List[Path]:
        return [attachment.save(path) for attachment in self.attachments]
