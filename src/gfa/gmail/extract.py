"""
Extraction helpers for Gmail message payloads.

A full message payload is a tree of MIME parts. These helpers flatten the
tree, look up headers, decode bodies, pick out attachments and parse the
address and date headers.
"""
import base64
import re
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Any, Dict, Iterable, List, Optional

from gfa.exceptions import DateParseError
from gfa.gmail.models import MessageAttachment, MessageRecipient
from gfa.utils.dates import ensure_aware, parse_datetime

Part = Dict[str, Any]
Header = Dict[str, str]

# Optional display name (quoted or not) followed by a bare or <angled> address
RECIPIENT_PATTERN = re.compile(r'(?:"?([^"]*)"?\s)?(?:<?(.+@[^>]+)>?)')
_TZ_COMMENT_PATTERN = re.compile(r"\([^)]+\)")
_WHITESPACE_PATTERN = re.compile(r"\s+")


def flatten_parts(parts: Optional[Iterable[Optional[Part]]], acc: Optional[List[Part]] = None) -> List[Part]:
    """
    Flatten nested MIME parts in pre-order.

    Each part is followed by its own descendants before its next sibling.
    Missing entries are skipped.

    Args:
        parts: Child parts of a payload
        acc: List to append to

    Returns:
        The flat list of parts
    """
    flat = [] if acc is None else acc
    for part in parts or []:
        if not part:
            continue
        flat.append(part)
        children = part.get("parts") or []
        if children:
            flatten_parts(children, flat)
    return flat


def find_header(name: str, headers: Optional[Iterable[Header]]) -> Optional[str]:
    """Value of the first header called ``name`` (case-insensitive), or None."""
    name = name.lower()
    for header in headers or []:
        if (header.get("name") or "").lower() == name:
            return header.get("value")
    return None


def decode_base64url(data: str) -> bytes:
    """Decode URL-safe base64, tolerating stripped padding."""
    if not data:
        return b""
    padded = data + "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(padded)


def encode_base64url(raw: bytes) -> str:
    """Encode bytes as URL-safe base64 without padding."""
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def find_body_by_content_type(content_type: str, flat_parts: Iterable[Optional[Part]]) -> str:
    """
    Decoded body of the first part whose Content-Type header contains ``content_type``.

    Args:
        content_type: e.g. "text/plain" or "text/html"
        flat_parts: Parts as returned by :func:`flatten_parts`

    Returns:
        The body text, or an empty string if no part matches or it has no data
    """
    for part in flat_parts:
        if not part:
            continue
        header = find_header("content-type", part.get("headers"))
        if not header or content_type not in header:
            continue
        data = (part.get("body") or {}).get("data")
        if not data:
            return ""
        return decode_base64url(data).decode("utf-8", errors="replace")
    return ""


def find_attachment_parts(flat_parts: Iterable[Optional[Part]]) -> List[Part]:
    """Parts that carry both a filename and an attachment id."""
    return [
        part for part in flat_parts
        if part and part.get("filename") and (part.get("body") or {}).get("attachmentId")
    ]


def find_attachments(
    flat_parts: Iterable[Optional[Part]], message_id: Optional[str] = None, client=None
) -> List[MessageAttachment]:
    """Attachment descriptors for the attachment parts of a message."""
    return [
        MessageAttachment.from_part(part, message_id=message_id, client=client)
        for part in find_attachment_parts(flat_parts)
    ]


def _split_addresses(value: str) -> List[str]:
    """Split on commas that are not inside double quotes."""
    segments = []
    current = []
    quoted = False
    for char in value:
        if char == '"':
            quoted = not quoted
        if char == "," and not quoted:
            segments.append("".join(current))
            current = []
            continue
        current.append(char)
    segments.append("".join(current))
    return segments


def parse_recipients(value: Optional[str]) -> List[MessageRecipient]:
    """
    Parse an address header such as From, To, Cc or Bcc.

    Segments without an email address are dropped.
    """
    recipients = []
    if not value:
        return recipients

    for segment in _split_addresses(value):
        segment = segment.strip()
        for match in RECIPIENT_PATTERN.finditer(segment):
            name = match.group(1) or None
            recipients.append(MessageRecipient(email=match.group(2), name=name))

    return recipients


def parse_date_header(value: str) -> datetime:
    """
    Parse a Date header.

    Parenthesised zone comments such as "(UTC)" are removed and whitespace
    runs collapsed before parsing.

    Raises:
        DateParseError: If the header cannot be parsed
    """
    if not value:
        raise DateParseError(value)

    cleaned = _TZ_COMMENT_PATTERN.sub("", value)
    cleaned = _WHITESPACE_PATTERN.sub(" ", cleaned).strip()

    try:
        return ensure_aware(parsedate_to_datetime(cleaned))
    except (TypeError, ValueError, IndexError):
        pass

    # Not RFC 2822, fall back to the lenient parser
    return parse_datetime(cleaned)
