"""
Draft listing and operations.
"""
import logging
from typing import Any, Dict, Union

from gfa.gmail.draft import GmailDraft
from gfa.gmail.resource import PaginatedResource

# Configure logger
logger = logging.getLogger(__name__)

DraftOrId = Union[GmailDraft, str]


class DraftResource(PaginatedResource):
    """Search, fetch, create and edit drafts."""

    items_key = "drafts"

    def default_page_size(self) -> int:
        return self.client.settings.gmail.drafts_per_page

    def _drafts(self):
        return self.client.service.users().drafts()

    def list_request(self, params: Dict[str, Any]):
        return self._drafts().list(userId=self.client.user_id, **params)

    def get_request(self, item_id: str):
        return self._drafts().get(userId=self.client.user_id, id=item_id, format="full")

    def wrap(self, payload: Dict[str, Any]) -> GmailDraft:
        return GmailDraft(payload, self.client)

    def _resolve(self, draft: DraftOrId) -> GmailDraft:
        if isinstance(draft, GmailDraft):
            return draft
        return self.get(draft)

    def create(self):
        """New empty draft sendable."""
        # Imported here, sendable imports the draft wrapper
        from gfa.gmail.sendable import Draft
        return Draft(self.client)

    def edit(self, draft: DraftOrId):
        return self._resolve(draft).edit()

    def delete(self, draft: DraftOrId) -> None:
        draft_id = draft.id if isinstance(draft, GmailDraft) else draft
        self.client.execute(self._drafts().delete(userId=self.client.user_id, id=draft_id))
        logger.info(f"Deleted draft {draft_id}")
