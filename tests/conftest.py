"""
Shared fixtures for the unit tests.

The Gmail discovery service is replaced by a MagicMock: resource chains such
as ``service.users().messages().list(...)`` return request mocks whose
``execute()`` yields plain dict payloads.
"""
import base64
import os
import sys
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from gfa.config import AppSettings, GmailSettings, Settings  # noqa: E402
from gfa.gmail.client import GmailClient  # noqa: E402


class FakeBatch:
    """Stand-in for BatchHttpRequest that executes requests one by one."""

    def __init__(self, callback):
        self.callback = callback
        self.requests = []

    def add(self, request, request_id=None):
        self.requests.append((request_id, request))

    def execute(self):
        for request_id, request in self.requests:
            try:
                response = request.execute()
            except Exception as e:
                self.callback(request_id, None, e)
            else:
                self.callback(request_id, response, None)


def make_request(payload=None, error=None):
    """Request mock whose execute() returns ``payload`` or raises ``error``."""
    request = MagicMock()
    if error is not None:
        request.execute.side_effect = error
    else:
        request.execute.return_value = payload
    return request


def b64(text):
    """URL-safe base64 without padding, as the Gmail API returns bodies."""
    if isinstance(text, str):
        text = text.encode("utf-8")
    return base64.urlsafe_b64encode(text).decode("ascii").rstrip("=")


def make_message_payload(
    message_id="msg1",
    thread_id="thread1",
    headers=None,
    parts=None,
    body=None,
    label_ids=None,
    snippet="",
):
    """Full-format message resource."""
    default_headers = {
        "From": "Alice <alice@example.com>",
        "To": "bob@example.com",
        "Subject": "Hello",
        "Date": "Mon, 01 Jan 2024 12:00:00 +0000",
        "Message-ID": f"<{message_id}@mail.example.com>",
    }
    default_headers.update(headers or {})
    payload = {
        "mimeType": "multipart/alternative" if parts else "text/plain",
        "headers": [
            {"name": name, "value": value}
            for name, value in default_headers.items()
            if value is not None
        ],
        "body": body or {"size": 0},
    }
    if parts:
        payload["parts"] = parts
    return {
        "id": message_id,
        "threadId": thread_id,
        "historyId": "1000",
        "labelIds": label_ids if label_ids is not None else ["INBOX", "UNREAD"],
        "snippet": snippet,
        "payload": payload,
    }


def make_text_part(content_type, text, part_id="0"):
    return {
        "partId": part_id,
        "mimeType": content_type.split(";")[0],
        "filename": "",
        "headers": [{"name": "Content-Type", "value": content_type}],
        "body": {"size": len(text), "data": b64(text)},
    }


@pytest.fixture
def settings(tmp_path):
    """Settings with a temporary storage directory."""
    return Settings(
        app=AppSettings(storage_dir=tmp_path / "storage"),
        gmail=GmailSettings(from_name="Me Myself"),
    )


@pytest.fixture
def service():
    """Mock Gmail discovery service."""
    service = MagicMock()
    service.new_batch_http_request.side_effect = lambda callback: FakeBatch(callback)
    service.users.return_value.getProfile.return_value = make_request(
        {"emailAddress": "me@example.com", "messagesTotal": 10}
    )
    return service


@pytest.fixture
def client(settings, service):
    """Client bound to the mock service."""
    return GmailClient(settings=settings, service=service)


@pytest.fixture
def helpers():
    """Payload builders for tests."""
    return SimpleNamespace(
        make_request=make_request,
        b64=b64,
        message=make_message_payload,
        text_part=make_text_part,
    )
