"""Remote topic log repository backed by the backend HTTP API."""

import logging
from typing import Any, Dict, List, Optional, Sequence

from topicsync.protocols import ApiError, ValidationError
from topicsync.types import DEFAULT_LOG_MARK, TopicLog, TopicLogListItem, TopicType
from topicsync.validation import TOPIC_LOG_FIELDS, editable_fields, validate_topic_log

from .client import ApiClient

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 1000


def topic_log_from_wire(item: Dict[str, Any]) -> TopicLog:
    """Convert a backend topic log payload into a TopicLog."""
    mark = item.get("mark")
    return TopicLog(
        id=int(item["id"]),
        topic_id=int(item["topic_id"]),
        topic_type=int(item.get("topic_type") or TopicType.TOPIC),
        content=item.get("content") or "",
        extra_data=item.get("extra_data"),
        mark=DEFAULT_LOG_MARK if mark is None else int(mark),
        create_time=int(item.get("create_time") or 0),
        update_time=int(item.get("update_time") or 0),
        openid=item.get("openid") or "",
    )


class RemoteTopicLogRepo:
    """CRUD for topic logs in the authoritative backend."""

    def __init__(self, client: ApiClient):
        self._client = client

    def _list(self, topic_ids, topic_types, offset: int, size: int) -> List[Dict[str, Any]]:
        data = self._client.post(
            "/api/so/topic/log/list",
            {
                "topic_ids": list(topic_ids),
                "topic_types": [int(t) for t in topic_types],
                "offset": offset,
                "size": size,
            },
        )
        return (data or {}).get("list") or []

    def get_by_topic_ids_and_types(
        self, topic_ids: Sequence[int], topic_types: Sequence[int]
    ) -> List[TopicLog]:
        items = self._list(topic_ids, topic_types, 0, DEFAULT_PAGE_SIZE)
        logs = [topic_log_from_wire(item) for item in items]
        logger.debug(f"Fetched {len(logs)} remote logs for {len(topic_ids)} topics")
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
        items = self._list(topic_ids, topic_types, offset, size)
        return [TopicLogListItem.from_log(topic_log_from_wire(item)) for item in items]

    def get_by_id(self, log_id: int) -> Optional[TopicLog]:
        try:
            data = self._client.get("/api/so/topic/log/detail", {"id": log_id})
        except ApiError as e:
            if e.err_code is None:
                raise
            logger.debug(f"Remote topic log {log_id} not found: {e}")
            return None
        return topic_log_from_wire(data) if data else None

    def create(self, data: Dict[str, Any]) -> TopicLog:
        errors = validate_topic_log(data)
        if errors:
            raise ValidationError(errors)

        mark = data.get("mark")
        payload = {
            "topic_type": int(data["topic_type"]),
            "topic_id": data["topic_id"],
            "content": data["content"],
            "extra_data": data.get("extra_data"),
            "mark": DEFAULT_LOG_MARK if mark is None else mark,
        }
        created = self._client.post("/api/so/topic/log/create", payload)
        if not created:
            raise ApiError("Backend returned no topic log for create")
        log = topic_log_from_wire(created)
        logger.info(f"Created remote topic log {log.id} for topic {log.topic_id}")
        return log

    def update(self, log_id: int, data: Dict[str, Any]) -> TopicLog:
        errors = validate_topic_log(data, partial=True)
        if errors:
            raise ValidationError(errors)

        payload = editable_fields(data, TOPIC_LOG_FIELDS)
        payload["id"] = log_id
        log = topic_log_from_wire(self._client.post("/api/so/topic/log/update", payload))
        logger.info(f"Updated remote topic log {log_id}")
        return log

    def delete(self, log_id: int) -> None:
        self._client.post("/api/so/topic/log/delete", {"id": log_id})
        logger.info(f"Deleted remote topic log {log_id}")
