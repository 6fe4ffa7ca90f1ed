"""Local topic repository, used while the user is not authenticated."""

import logging
from typing import Any, Dict

from topicsync.protocols import NotFoundError, ValidationError
from topicsync.types import Topic, now_ts
from topicsync.validation import TOPIC_FIELDS, editable_fields, validate_topic

from .kv import LOCAL_TOPICS_KEY
from .local_base import LocalCollection

logger = logging.getLogger(__name__)


class LocalTopicRepo(LocalCollection[Topic]):
    """CRUD for topics stored in the local key-value store.

    Mirrors the RemoteTopicRepo contract so callers need not care which
    mode they are in. Ids are temporary and meaningless to the backend.
    """

    key = LOCAL_TOPICS_KEY
    entity = "topic"
    record_cls = Topic

    def create(self, data: Dict[str, Any]) -> Topic:
        errors = validate_topic(data)
        if errors:
            raise ValidationError(errors)

        topics = self._read(strict=True)
        now = now_ts()
        topic = Topic(
            id=self._mint_id({t.id for t in topics}),
            name=data["name"],
            description=data.get("description"),
            pin_weight=data.get("pin_weight") or 0,
            create_time=now,
            update_time=now,
        )
        topics.append(topic)
        self._write(topics)

        logger.info(f"Created local topic {topic.id} ({topic.name!r})")
        return topic

    def update(self, topic_id: int, data: Dict[str, Any]) -> Topic:
        errors = validate_topic(data, partial=True)
        if errors:
            raise ValidationError(errors)

        topics = self._read(strict=True)
        index = self._find_index(topics, topic_id)
        if index == -1:
            raise NotFoundError(self.entity, topic_id)

        topic = topics[index]
        for name, value in editable_fields(data, TOPIC_FIELDS).items():
            setattr(topic, name, value)
        topic.update_time = max(now_ts(), topic.create_time)
        self._write(topics)

        logger.info(f"Updated local topic {topic_id}")
        return topic

    def delete(self, topic_id: int) -> None:
        """Delete one topic. Its logs are left for the caller to cascade."""
        topics = self._read(strict=True)
        index = self._find_index(topics, topic_id)
        if index == -1:
            raise NotFoundError(self.entity, topic_id)

        del topics[index]
        self._write(topics)
        logger.info(f"Deleted local topic {topic_id}")
