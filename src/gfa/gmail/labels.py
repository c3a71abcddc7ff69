"""
Label listing and management.
"""
import logging
from typing import Any, Dict, List

from gfa.gmail.models import GmailLabel

# Configure logger
logger = logging.getLogger(__name__)

# Accepted parameter names and their Label resource fields
_LABEL_FIELDS = {
    "name": "name",
    "message_list_visibility": "messageListVisibility",
    "label_list_visibility": "labelListVisibility",
}
_COLOR_FIELDS = {
    "text_color": "textColor",
    "background_color": "backgroundColor",
}


def label_body(params: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build a ``users.labels`` request body.

    Args:
        params: Any of name, message_list_visibility, label_list_visibility,
            text_color and background_color

    Returns:
        Label resource body
    """
    body = {}
    for key, field in _LABEL_FIELDS.items():
        if key in params:
            value = params[key]
            body[field] = getattr(value, "value", value)

    color = {field: params[key] for key, field in _COLOR_FIELDS.items() if key in params}
    if color:
        body["color"] = color

    return body


class LabelResource:
    """List, create, update and delete labels."""

    def __init__(self, client):
        client.throw_if_not_authenticated()
        self.client = client

    def _labels(self):
        return self.client.service.users().labels()

    def list(self) -> List[GmailLabel]:
        """
        All labels of the mailbox with their counters.

        The list endpoint omits message and thread counts, so every label is
        fetched again in one batch.
        """
        response = self.client.execute(self._labels().list(userId=self.client.user_id))
        stubs = response.get("labels") or []
        if not stubs:
            return []

        payloads = self.client.execute_batch(
            [self._labels().get(userId=self.client.user_id, id=stub["id"]) for stub in stubs]
        )
        return [GmailLabel.from_api(payload) for payload in payloads]

    def get(self, label_id: str) -> GmailLabel:
        return GmailLabel.from_api(
            self.client.execute(self._labels().get(userId=self.client.user_id, id=label_id))
        )

    def create(self, params: Dict[str, Any]) -> GmailLabel:
        """Create a label and return it fetched again."""
        created = self.client.execute(
            self._labels().create(userId=self.client.user_id, body=label_body(params))
        )
        logger.info(f"Created label {created.get('id')}")
        return self.get(created["id"])

    def update(self, label_id: str, params: Dict[str, Any]) -> GmailLabel:
        """Update a label and return it fetched again."""
        body = label_body(params)
        body["id"] = label_id
        updated = self.client.execute(
            self._labels().update(userId=self.client.user_id, id=label_id, body=body)
        )
        return self.get(updated["id"])

    def delete(self, label_id: str) -> None:
        self.client.execute(self._labels().delete(userId=self.client.user_id, id=label_id))
        logger.info(f"Deleted label {label_id}")
