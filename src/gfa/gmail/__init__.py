"""
Gmail module for the Gmail Fluent API.

This module provides the client, the wrappers around message, thread, draft,
label and history payloads, the resources that list and modify them, and the
builders for outgoing mail.
"""
from gfa.gmail.client import GmailClient
from gfa.gmail.draft import GmailDraft
from gfa.gmail.drafts import DraftResource
from gfa.gmail.history import HistoryList, HistoryResource
from gfa.gmail.labels import LabelResource
from gfa.gmail.message import GmailMessage
from gfa.gmail.messages import MessageResource
from gfa.gmail.models import (
    GmailHistory,
    GmailLabel,
    HistoryAction,
    LabelListVisibility,
    LabelType,
    MessageAttachment,
    MessageListVisibility,
    MessageRecipient,
)
from gfa.gmail.resource import PaginatedList, PaginatedResource
from gfa.gmail.sendable import Draft, Email, Sendable, SendableAttachment, SendableEmbed
from gfa.gmail.thread import GmailThread
from gfa.gmail.threads import ThreadResource
from gfa.gmail.watch import WatchResource

__all__ = [
    # Client and resources
    "GmailClient",
    "DraftResource",
    "HistoryResource",
    "LabelResource",
    "MessageResource",
    "PaginatedResource",
    "ThreadResource",
    "WatchResource",

    # Wrappers
    "GmailDraft",
    "GmailHistory",
    "GmailLabel",
    "GmailMessage",
    "GmailThread",
    "HistoryList",
    "MessageAttachment",
    "MessageRecipient",
    "PaginatedList",

    # Enums
    "HistoryAction",
    "LabelListVisibility",
    "LabelType",
    "MessageListVisibility",

    # Outgoing mail
    "Draft",
    "Email",
    "Sendable",
    "SendableAttachment",
    "SendableEmbed",
]
