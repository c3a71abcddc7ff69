"""
Push notifications through Cloud Pub/Sub.
"""
import logging
from typing import Any, Dict, List, Optional

from gfa.exceptions import PreconditionError

# Configure logger
logger = logging.getLogger(__name__)


class WatchResource:
    """Start and stop mailbox watches on the configured Pub/Sub topic."""

    def __init__(self, client):
        client.throw_if_not_authenticated()
        self.client = client

    def start(
        self,
        label_ids: Optional[List[str]] = None,
        label_filter_behavior: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Start or renew the watch.

        Args:
            label_ids: Only notify for changes on these labels
            label_filter_behavior: "include" or "exclude", used with label_ids

        Returns:
            Watch response with historyId and expiration

        Raises:
            PreconditionError: If no Pub/Sub topic is configured
        """
        topic = self.client.settings.gmail.pub_sub_topic
        if not topic:
            raise PreconditionError("A Pub/Sub topic must be configured to start a watch")

        body: Dict[str, Any] = {"topicName": topic}
        if label_ids:
            body["labelIds"] = list(label_ids)
            if label_filter_behavior:
                body["labelFilterBehavior"] = label_filter_behavior

        response = self.client.execute(
            self.client.service.users().watch(userId=self.client.user_id, body=body)
        )
        logger.info(f"Watching mailbox on {topic} until {response.get('expiration')}")
        return response

    def stop(self) -> None:
        self.client.execute(self.client.service.users().stop(userId=self.client.user_id))
        logger.info("Stopped mailbox watch")
