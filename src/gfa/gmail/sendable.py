"""
Outgoing mail for the Gmail Fluent API.

Emails and drafts are built with fluent setters, assembled into a MIME
message with :mod:`email.message` and handed to the API as base64url
``raw`` bodies. Replies and forwards stay on the source message's thread.
"""
import logging
import mimetypes
from email.message import EmailMessage
from email.utils import formataddr
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from gfa.exceptions import InvalidEmbedError, InvalidRecipientError, PreconditionError
from gfa.gmail.draft import GmailDraft
from gfa.gmail.extract import encode_base64url
from gfa.gmail.message import GmailMessage
from gfa.gmail.models import MessageRecipient
from gfa.utils.paths import resolve_storage_path

# Configure logger
logger = logging.getLogger(__name__)

# X-Priority header values, 1 is the most urgent
PRIORITY_LABELS = {
    1: "1 (Highest)",
    2: "2 (High)",
    3: "3 (Normal)",
    4: "4 (Low)",
    5: "5 (Lowest)",
}
DEFAULT_PRIORITY = 3

Address = Union[str, Sequence[str], MessageRecipient]
PathLike = Union[str, Path]


class SendableAttachment:
    """
    A file to attach to an outgoing message.

    Relative paths resolve against the storage directory.

    Raises:
        FileNotFoundError: If the file does not exist
    """

    def __init__(self, path: PathLike, settings=None, filename: Optional[str] = None):
        self.storage_path = path
        self.full_path = resolve_storage_path(path, settings) if settings else Path(path).resolve()
        if not self.full_path.is_file():
            raise FileNotFoundError(f"Attachment file not found: {self.full_path}")
        self.filename = filename or self.full_path.name

    @property
    def mime_type(self) -> str:
        mime_type, _ = mimetypes.guess_type(str(self.full_path))
        return mime_type or "application/octet-stream"

    def read(self) -> bytes:
        return self.full_path.read_bytes()


class SendableEmbed(SendableAttachment):
    """
    An inline file referenced from the HTML body.

    The body refers to it as ``cid:{name}``, e.g. ``<img src="cid:logo">``.
    """

    def __init__(self, path: PathLike, name: str, settings=None):
        super().__init__(path, settings=settings)
        self.name = name


class Sendable:
    """Shared builder for emails and drafts."""

    def __init__(self, client, reply_to_message: Optional[GmailMessage] = None):
        """
        Initialize the builder.

        Args:
            client: Authenticated GmailClient
            reply_to_message: Source message for replies and forwards
        """
        client.throw_if_not_authenticated()
        self.client = client
        self.reply_to_message = reply_to_message

        self.from_email: Optional[str] = client.email
        self.from_name: Optional[str] = None
        self.to_recipients: List[MessageRecipient] = []
        self.cc_recipients: List[MessageRecipient] = []
        self.bcc_recipients: List[MessageRecipient] = []
        self.email_subject = ""
        self.email_priority = DEFAULT_PRIORITY
        self.email_body = ""
        self.thread_id: Optional[str] = None
        self.headers: Dict[str, str] = {}
        self.attachments: List[SendableAttachment] = []
        self.embeds: List[SendableEmbed] = []

        self.set_my_name()

    def set_my_name(self, name: Optional[str] = None):
        """
        Sender display name; defaults to ``settings.gmail.from_name``.

        The Gmail profile carries no display name, so without either the From
        header holds the bare address.
        """
        self.from_name = name or self.client.settings.gmail.from_name
        return self

    def to(self, *addresses: Address):
        """Replace the To recipients."""
        self.to_recipients = self._recipients(addresses, "to")
        return self

    def add_to(self, *addresses: Address):
        self.to_recipients = self.to_recipients + self._recipients(addresses, "to")
        return self

    def cc(self, *addresses: Address):
        """Replace the Cc recipients."""
        self.cc_recipients = self._recipients(addresses, "cc")
        return self

    def add_cc(self, *addresses: Address):
        self.cc_recipients = self.cc_recipients + self._recipients(addresses, "cc")
        return self

    def bcc(self, *addresses: Address):
        """Replace the Bcc recipients."""
        self.bcc_recipients = self._recipients(addresses, "bcc")
        return self

    def add_bcc(self, *addresses: Address):
        self.bcc_recipients = self.bcc_recipients + self._recipients(addresses, "bcc")
        return self

    def subject(self, subject: str):
        self.email_subject = subject or ""
        return self

    def priority(self, priority: int):
        """X-Priority from 1 (highest) to 5 (lowest); out of range values are clamped."""
        self.email_priority = min(max(int(priority), 1), 5)
        return self

    def body(self, html: str):
        """HTML body of the message."""
        self.email_body = html or ""
        return self

    def set_header(self, header: str, value: str):
        self.headers[header] = value
        return self

    def attach(self, *paths: Union[PathLike, SendableAttachment]):
        """Replace the attachments; relative paths resolve against the storage dir."""
        self.attachments = [self._attachment(path) for path in paths]
        return self

    def add_attachment(self, *paths: Union[PathLike, SendableAttachment]):
        self.attachments = self.attachments + [self._attachment(path) for path in paths]
        return self

    def embed(self, *embeds: Union[SendableEmbed, Sequence]):
        """
        Replace the inline embeds.

        Args:
            embeds: SendableEmbed objects or ``(path, name)`` pairs

        Raises:
            InvalidEmbedError: If an embed is neither
        """
        self.embeds = [self._embed(embed) for embed in embeds]
        return self

    def add_embed(self, *embeds: Union[SendableEmbed, Sequence]):
        self.embeds = self.embeds + [self._embed(embed) for embed in embeds]
        return self

    def _attachment(self, path: Union[PathLike, SendableAttachment]) -> SendableAttachment:
        if isinstance(path, SendableAttachment):
            return path
        return SendableAttachment(path, settings=self.client.settings)

    def _embed(self, embed: Union[SendableEmbed, Sequence]) -> SendableEmbed:
        if isinstance(embed, SendableEmbed):
            return embed
        if not isinstance(embed, (tuple, list)) or len(embed) != 2:
            raise InvalidEmbedError(
                "Embeds must be given as a (path, name) pair or a SendableEmbed"
            )
        path, name = embed
        return SendableEmbed(path, name, settings=self.client.settings)

    def _recipients(self, addresses: Sequence[Address], field: str) -> List[MessageRecipient]:
        recipients = [self._recipient(address) for address in addresses]
        invalid = [str(r) for r in recipients if not r.is_email_valid()]
        if invalid:
            raise InvalidRecipientError(
                f"Invalid email addresses on {field} recipients: {', '.join(invalid)}"
            )
        return recipients

    @staticmethod
    def _recipient(address: Address) -> MessageRecipient:
        if isinstance(address, MessageRecipient):
            return address
        if isinstance(address, (tuple, list)):
            if not address:
                return MessageRecipient()
            name = address[1] if len(address) > 1 else None
            return MessageRecipient(email=address[0], name=name)
        return MessageRecipient(email=address)

    def _add_message_to_same_thread(self):
        """
        Put this message on the source message's thread.

        Raises:
            PreconditionError: If there is no source message
        """
        source = self.reply_to_message
        if source is None or not source.from_.email:
            raise PreconditionError(
                "A source message is required to create a reply or forward"
            )

        self.thread_id = source.thread_id
        self.subject(source.subject)

        references = " ".join(
            value for value in (source.references, source.header_message_id) if value
        )
        self.headers = {
            "In-Reply-To": source.header_message_id,
            "References": references,
        }
        return self

    def to_mime_message(self) -> EmailMessage:
        """Assemble the MIME message."""
        message = EmailMessage()
        message["From"] = formataddr((self.from_name or "", self.from_email or ""))
        for header, recipients in (
            ("To", self.to_recipients),
            ("Cc", self.cc_recipients),
            ("Bcc", self.bcc_recipients),
        ):
            if recipients:
                message[header] = ", ".join(
                    formataddr((r.name or "", r.email)) for r in recipients
                )
        message["Subject"] = self.email_subject
        message["X-Priority"] = PRIORITY_LABELS[self.email_priority]

        for header, value in self.headers.items():
            if value:
                message[header] = value

        message.set_content(self.email_body, subtype="html")

        for embed in self.embeds:
            maintype, subtype = embed.mime_type.split("/", 1)
            message.add_related(
                embed.read(),
                maintype=maintype,
                subtype=subtype,
                cid=f"<{embed.name}>",
                filename=embed.filename,
            )

        for attachment in self.attachments:
            maintype, subtype = attachment.mime_type.split("/", 1)
            message.add_attachment(
                attachment.read(),
                maintype=maintype,
                subtype=subtype,
                filename=attachment.filename,
            )

        return message

    def to_message_body(self) -> Dict[str, Any]:
        """``users.messages`` body carrying the raw MIME message."""
        body: Dict[str, Any] = {"raw": encode_base64url(self.to_mime_message().as_bytes())}
        if self.thread_id:
            body["threadId"] = self.thread_id
        return body

    def _fetch_message(self, message_id: str) -> GmailMessage:
        return GmailMessage(
            self.client.execute(
                self.client.service.users().messages().get(
                    userId=self.client.user_id, id=message_id, format="full"
                )
            ),
            self.client,
        )

    def _fetch_draft(self, draft_id: str) -> GmailDraft:
        return GmailDraft(
            self.client.execute(
                self.client.service.users().drafts().get(
                    userId=self.client.user_id, id=draft_id, format="full"
                )
            ),
            self.client,
        )


class Email(Sendable):
    """An email sent immediately."""

    def send(self) -> GmailMessage:
        """
        Send the email.

        Returns:
            The sent message, fetched again
        """
        sent = self.client.execute(
            self.client.service.users().messages().send(
                userId=self.client.user_id, body=self.to_message_body()
            )
        )
        logger.info(f"Sent message {sent.get('id')}")
        return self._fetch_message(sent["id"])

    def create_reply(self) -> "Email":
        return self._add_message_to_same_thread()

    def create_forward(self) -> "Email":
        return self._add_message_to_same_thread()


class Draft(Sendable):
    """A draft, new or backed by an existing one."""

    def __init__(
        self,
        client,
        draft: Optional[GmailDraft] = None,
        reply_to_message: Optional[GmailMessage] = None,
    ):
        self.draft = draft
        super().__init__(client, reply_to_message)

    def with_reply_or_forward(self) -> "Draft":
        return self._add_message_to_same_thread()

    def store(self) -> GmailDraft:
        """Create a new draft."""
        created = self.client.execute(
            self.client.service.users().drafts().create(
                userId=self.client.user_id, body={"message": self.to_message_body()}
            )
        )
        logger.info(f"Created draft {created.get('id')}")
        return self._fetch_draft(created["id"])

    def update(self) -> GmailDraft:
        """
        Replace the content of the existing draft.

        Raises:
            PreconditionError: If this builder is not backed by a draft
        """
        if self.draft is None:
            raise PreconditionError("An existing draft is required to update it")

        updated = self.client.execute(
            self.client.service.users().drafts().update(
                userId=self.client.user_id,
                id=self.draft.id,
                body={"id": self.draft.id, "message": self.to_message_body()},
            )
        )
        return self._fetch_draft(updated["id"])

    def save(self) -> GmailDraft:
        """Update the existing draft, or store a new one."""
        if self.draft is not None:
            return self.update()
        return self.store()

    def send(self) -> GmailMessage:
        """Send the draft with the current content."""
        body: Dict[str, Any] = {"message": self.to_message_body()}
        if self.draft is not None:
            body["id"] = self.draft.id

        sent = self.client.execute(
            self.client.service.users().drafts().send(userId=self.client.user_id, body=body)
        )
        logger.info(f"Sent draft as message {sent.get('id')}")
        return self._fetch_message(sent["id"])

    def hydrate(self) -> "Draft":
        """Copy recipients, subject, body and thread headers from the backing draft."""
        if self.draft is None or not self.draft.message.id:
            return self

        message = self.draft.message
        self.set_my_name(message.from_.name)
        self.to(*message.to).cc(*message.cc).bcc(*message.bcc)
        self.subject(message.subject).body(message.body)

        if message.reply_to:
            self.set_header("In-Reply-To", message.reply_to)
        if message.references:
            self.set_header("References", message.references)
        if message.thread_id:
            self.thread_id = message.thread_id

        return self
