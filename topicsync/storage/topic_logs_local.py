"""Local topic log repository, used while the user is not authenticated."""

import logging
from typing import Any, Dict, List, Sequence

from topicsync.protocols import NotFoundError, ValidationError
from topicsync.types import DEFAULT_LOG_MARK, TopicLog, TopicLogListItem, TopicType, now_ts
from topicsync.validation import TOPIC_LOG_FIELDS, editable_fields, validate_topic_log

from .kv import LOCAL_TOPIC_LOGS_KEY
from .local_base import LocalCollection

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 1000


class LocalTopicLogRepo(LocalCollection[TopicLog]):
    """CRUD for topic logs stored in the local key-value store.

    A local log's ``topic_id`` always refers to a local topic id.
    """

    key = LOCAL_TOPIC_LOGS_KEY
    entity = "topic_log"
    record_cls = TopicLog

    def get_by_topic_ids_and_types(
        self, topic_ids: Sequence[int], topic_types: Sequence[int]
    ) -> List[TopicLog]:
        """Logs whose topic is in ``topic_ids`` and type is in ``topic_types``.

        Result order is storage order; display ordering is the caller's job.
        """
        wanted_topics = set(topic_ids)
        wanted_types = {int(t) for t in topic_types}
        logs = [
            log
            for log in self._read()
            if log.topic_id in wanted_topics and log.topic_type in wanted_types
        ]
        logger.debug(f"Found {len(logs)} local logs for {len(wanted_topics)} topics")
        return logs

    def get_by_topic_id(
        self, topic_id: int, topic_types: Sequence[int] = (TopicType.TOPIC,)
    ) -> List[TopicLog]:
        return self.get_by_topic_ids_and_types([topic_id], topic_types)

    def get_list_items_by_topic_ids_and_types(
        self,
        topic_ids: Sequence[int],
        topic_types: Sequence[int],
        offset: int = 0,
        size: int = DEFAULT_PAGE_SIZE,
    ) -> List[TopicLogListItem]:
        """Paginated list items; pagination is a plain slice of the filtered result."""
        offset = max(offset, 0)
        size = max(size, 0)
        logs = self.get_by_topic_ids_and_types(topic_ids, topic_types)
        return [TopicLogListItem.from_log(log) for log in logs[offset : offset + size]]

    def create(self, data: Dict[str, Any]) -> TopicLog:
        errors = validate_topic_log(data)
        if errors:
            raise ValidationError(errors)

        logs = self._read(strict=True)
        now = now_ts()
        mark = data.get("mark")
        log = TopicLog(
            id=self._mint_id({existing.id for existing in logs}),
            topic_id=data["topic_id"],
            topic_type=int(data["topic_type"]),
            content=data["content"],
            extra_data=data.get("extra_data"),
            mark=DEFAULT_LOG_MARK if mark is None else mark,
            create_time=now,
            update_time=now,
        )
        logs.append(log)
        self._write(logs)

        logger.info(f"Created local topic log {log.id} for topic {log.topic_id}")
        return log

    def update(self, log_id: int, data: Dict[str, Any]) -> TopicLog:
        errors = validate_topic_log(data, partial=True)
        if errors:
            raise ValidationError(errors)

        logs = self._read(strict=True)
        index = self._find_index(logs, log_id)
        if index == -1:
            raise NotFoundError(self.entity, log_id)

        log = logs[index]
        for name, value in editable_fields(data, TOPIC_LOG_FIELDS).items():
            setattr(log, name, int(value) if name == "topic_type" else value)
        log.update_time = max(now_ts(), log.create_time)
        self._write(logs)

        logger.info(f"Updated local topic log {log_id}")
        return log

    def delete(self, log_id: int) -> None:
        logs = self._read(strict=True)
        index = self._find_index(logs, log_id)
        if index == -1:
            raise NotFoundError(self.entity, log_id)

        del logs[index]
        self._write(logs)
        logger.info(f"Deleted local topic log {log_id}")

    def delete_by_topic_id(self, topic_id: int) -> int:
        """Remove every log of one topic. Matching nothing is not an error.

        Returns:
            Number of logs removed.
        """
        logs = self._read(strict=True)
        kept = [log for log in logs if log.topic_id != topic_id]
        removed = len(logs) - len(kept)
        if removed:
            self._write(kept)
        logger.info(f"Deleted {removed} local logs of topic {topic_id}")
        return removed
