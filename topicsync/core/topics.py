"""Topic and topic log operations for TopicSync.

Every call goes to the repo matching the current mode: local repos while
unauthenticated, remote repos once authenticated.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from topicsync.protocols import NotFoundError
from topicsync.types import Topic, TopicLog, TopicLogListItem, TopicType

logger = logging.getLogger(__name__)


class TopicsMixin:
    """Topic CRUD for TopicSync."""

    def load_topics(self) -> List[Topic]:
        """Fetch all topics from the active repo and cache them on ``self.topics``."""
        self.topics = self.topic_repo.get_all()
        logger.debug(f"Loaded {len(self.topics)} topics ({self.mode} mode)")
        return self.topics

    def get_topic(self, topic_id: int) -> Optional[Topic]:
        return self.topic_repo.get_by_id(topic_id)

    def create_topic(
        self, name: str, description: Optional[str] = None, pin_weight: int = 0
    ) -> Topic:
        return self.topic_repo.create(
            {"name": name, "description": description, "pin_weight": pin_weight}
        )

    def update_topic(self, topic_id: int, **fields) -> Topic:
        return self.topic_repo.update(topic_id, fields)

    def delete_topic(self, topic_id: int) -> None:
        """Delete a topic; in local mode its logs are deleted with it."""
        self.topic_repo.delete(topic_id)
        if not self.is_remote:
            removed = self.local_logs.delete_by_topic_id(topic_id)
            logger.debug(f"Cascaded delete of topic {topic_id} removed {removed} logs")


class LogsMixin:
    """Topic log CRUD for TopicSync."""

    def list_logs(
        self,
        topic_id: int,
        topic_types: Sequence[int] = (TopicType.TOPIC,),
        offset: int = 0,
        size: int = 100,
    ) -> List[TopicLogListItem]:
        return self.log_repo.get_list_items_by_topic_ids_and_types(
            [topic_id], topic_types, offset=offset, size=size
        )

    def get_log(self, log_id: int) -> Optional[TopicLog]:
        return self.log_repo.get_by_id(log_id)

    def create_log(
        self,
        topic_id: int,
        content: str,
        topic_type: int = TopicType.TOPIC,
        extra_data: Optional[Dict[str, Any]] = None,
        mark: Optional[int] = None,
    ) -> TopicLog:
        """Create a log under ``topic_id``.

        In local mode the parent topic must exist in the local store.
        """
        if not self.is_remote and self.local_topics.get_by_id(topic_id) is None:
            raise NotFoundError("topic", topic_id)
        return self.log_repo.create(
            {
                "topic_id": topic_id,
                "topic_type": int(topic_type),
                "content": content,
                "extra_data": extra_data,
                "mark": mark,
            }
        )

    def update_log(self, log_id: int, **fields) -> TopicLog:
        return self.log_repo.update(log_id, fields)

    def delete_log(self, log_id: int) -> None:
        self.log_repo.delete(log_id)
