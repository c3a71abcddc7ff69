"""
Pydantic models for Gmail API entities.

This module defines the value objects built from Gmail API payloads:
recipients, attachments, labels and history records.
"""
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, PrivateAttr, TypeAdapter, ValidationError

from gfa.exceptions import PreconditionError
from gfa.utils.paths import resolve_storage_path

# Configure logger
logger = logging.getLogger(__name__)

_EMAIL_ADAPTER = TypeAdapter(EmailStr)


class LabelType(str, Enum):
    """Gmail label types."""
    SYSTEM = "system"
    USER = "user"


class LabelListVisibility(str, Enum):
    """Visibility of a label in the label list."""
    LABEL_SHOW = "labelShow"
    LABEL_SHOW_IF_UNREAD = "labelShowIfUnread"
    LABEL_HIDE = "labelHide"


class MessageListVisibility(str, Enum):
    """Visibility of messages with a label in the message list."""
    SHOW = "show"
    HIDE = "hide"


class HistoryAction(str, Enum):
    """Kind of change recorded by a history entry."""
    MESSAGE_ADDED = "message-added"
    MESSAGE_DELETED = "message-deleted"
    LABELS_ADDED = "labels-added"
    LABELS_REMOVED = "labels-removed"


class MessageRecipient(BaseModel):
    """Model for an email address with an optional display name."""
    email: Optional[str] = None
    name: Optional[str] = None

    def is_email_valid(self) -> bool:
        """Check the address with pydantic's email validation."""
        if not self.email:
            return False
        try:
            _EMAIL_ADAPTER.validate_python(self.email)
        except ValidationError:
            return False
        return True

    def __str__(self) -> str:
        """String representation of email address."""
        if self.name:
            return f"{self.name} <{self.email}>"
        return self.email or ""


class MessageAttachment(BaseModel):
    """
    Attachment of a fetched message.

    Content is either inline (``data``, base64url) or fetched on demand from
    the attachments endpoint using ``message_id`` and ``id``.
    """
    id: str
    filename: str
    mime_type: Optional[str] = None
    size: int = 0
    data: Optional[str] = None
    message_id: Optional[str] = None

    _client: Any = PrivateAttr(default=None)

    @classmethod
    def from_part(
        cls, part: Dict[str, Any], message_id: Optional[str] = None, client=None
    ) -> "MessageAttachment":
        """Build an attachment from a MIME part carrying an attachment id."""
        body = part.get("body") or {}
        attachment = cls(
            id=body["attachmentId"],
            filename=part.get("filename", ""),
            mime_type=part.get("mimeType"),
            size=body.get("size") or 0,
            data=body.get("data"),
            message_id=message_id,
        )
        attachment._client = client
        return attachment

    def download(self) -> bytes:
        """
        Get the attachment bytes.

        Returns:
            Decoded content

        Raises:
            PreconditionError: If the content is neither inline nor fetchable
        """
        # Imported here, extract imports this module
        from gfa.gmail.extract import decode_base64url

        if self.data:
            return decode_base64url(self.data)

        if self._client is None or not self.message_id:
            raise PreconditionError(
                f"Attachment {self.id} has no inline data and no message to fetch it from"
            )

        client = self._client
        logger.debug(f"Fetching attachment {self.id} of message {self.message_id}")
        response = client.execute(
            client.service.users().messages().attachments().get(
                userId=client.user_id, messageId=self.message_id, id=self.id
            )
        )
        self.data = response.get("data") or ""
        return decode_base64url(self.data)

    def save(self, path: Union[str, Path] = "") -> Path:
        """
        Write the attachment into a directory.

        Args:
            path: Directory, relative paths resolve against the storage dir

        Returns:
            Path of the written file
        """
        if self._client is None:
            raise PreconditionError("A client is required to resolve the storage directory")

        directory = resolve_storage_path(path, self._client.settings)
        directory.mkdir(parents=True, exist_ok=True)

        file_path = directory / Path(self.filename).name
        file_path.write_bytes(self.download())
        logger.info(f"Saved attachment {self.filename} to {file_path}")
        return file_path


class GmailLabel(BaseModel):
    """Model for Gmail label."""
    model_config = ConfigDict(use_enum_values=True)

    id: str
    name: str
    type: LabelType = LabelType.USER
    label_list_visibility: Optional[LabelListVisibility] = None
    message_list_visibility: Optional[MessageListVisibility] = None
    messages_total: Optional[int] = None
    messages_unread: Optional[int] = None
    threads_total: Optional[int] = None
    threads_unread: Optional[int] = None
    text_color: Optional[str] = None
    background_color: Optional[str] = None

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "GmailLabel":
        """Build a label from a ``users.labels`` resource."""
        color = payload.get("color") or {}
        return cls(
            id=payload["id"],
            name=payload["name"],
            type=payload.get("type", "user").lower(),
            label_list_visibility=payload.get("labelListVisibility"),
            message_list_visibility=payload.get("messageListVisibility"),
            messages_total=payload.get("messagesTotal"),
            messages_unread=payload.get("messagesUnread"),
            threads_total=payload.get("threadsTotal"),
            threads_unread=payload.get("threadsUnread"),
            text_color=color.get("textColor"),
            background_color=color.get("backgroundColor"),
        )


class GmailHistory(BaseModel):
    """One mailbox change from ``users.history.list``."""
    id: str
    action: Optional[HistoryAction] = None
    messages: List[Dict[str, Any]] = Field(default_factory=list)
    messages_added: List[Dict[str, Any]] = Field(default_factory=list)
    messages_deleted: List[Dict[str, Any]] = Field(default_factory=list)
    labels_added: List[Dict[str, Any]] = Field(default_factory=list)
    labels_removed: List[Dict[str, Any]] = Field(default_factory=list)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "GmailHistory":
        """Build a history record; the last non-empty change kind sets the action."""
        changes = {
            HistoryAction.MESSAGE_ADDED: payload.get("messagesAdded") or [],
            HistoryAction.MESSAGE_DELETED: payload.get("messagesDeleted") or [],
            HistoryAction.LABELS_ADDED: payload.get("labelsAdded") or [],
            HistoryAction.LABELS_REMOVED: payload.get("labelsRemoved") or [],
        }
        action = None
        for kind, entries in changes.items():
            if entries:
                action = kind

        return cls(
            id=str(payload["id"]),
            action=action,
            messages=payload.get("messages") or [],
            messages_added=changes[HistoryAction.MESSAGE_ADDED],
            messages_deleted=changes[HistoryAction.MESSAGE_DELETED],
            labels_added=changes[HistoryAction.LABELS_ADDED],
            labels_removed=changes[HistoryAction.LABELS_REMOVED],
        )
