"""Remote topic repository backed by the backend HTTP API."""

import logging
from typing import Any, Dict, List, Optional

from topicsync.protocols import ApiError, ValidationError
from topicsync.types import Topic
from topicsync.validation import TOPIC_FIELDS, editable_fields, validate_topic

from .client import ApiClient

logger = logging.getLogger(__name__)

LIST_PAGE_SIZE = 1000


def topic_from_wire(item: Dict[str, Any]) -> Topic:
    """Convert a backend topic payload into a Topic."""
    return Topic(
        id=int(item["id"]),
        name=item.get("topic_name") or "",
        description=item.get("description"),
        pin_weight=int(item.get("top") or 0),
        create_time=int(item.get("create_time") or 0),
        update_time=int(item.get("update_time") or 0),
        openid=item.get("openid") or "",
    )


def topic_to_wire(data: Dict[str, Any]) -> Dict[str, Any]:
    """Map Topic field names onto the backend's request fields."""
    wire = {}
    if "name" in data:
        wire["topic_name"] = data["name"]
    if "description" in data:
        wire["description"] = data["description"]
    if "pin_weight" in data:
        wire["top"] = data["pin_weight"]
    return wire


class RemoteTopicRepo:
    """CRUD for topics in the authoritative backend; ids are server-assigned."""

    def __init__(self, client: ApiClient):
        self._client = client

    def get_all(self) -> List[Topic]:
        data = self._client.post("/api/so/topic/list", {"offset": 0, "size": LIST_PAGE_SIZE})
        topics = [topic_from_wire(item) for item in (data or {}).get("list") or []]
        logger.debug(f"Fetched {len(topics)} remote topics")
        return topics

    def get_by_id(self, topic_id: int) -> Optional[Topic]:
        """Fetch one topic, or None when the backend reports a business failure."""
        try:
            data = self._client.get("/api/so/topic/detail", {"id": topic_id})
        except ApiError as e:
            if e.err_code is None:
                raise
            logger.debug(f"Remote topic {topic_id} not found: {e}")
            return None
        return topic_from_wire(data) if data else None

    def create(self, data: Dict[str, Any]) -> Topic:
        errors = validate_topic(data)
        if errors:
            raise ValidationError(errors)

        payload = topic_to_wire(
            {
                "name": data["name"],
                "description": data.get("description"),
                "pin_weight": data.get("pin_weight") or 0,
            }
        )
        created = self._client.post("/api/so/topic/create", payload)
        if not created:
            raise ApiError("Backend returned no topic for create")
        topic = topic_from_wire(created)
        logger.info(f"Created remote topic {topic.id}")
        return topic

    def update(self, topic_id: int, data: Dict[str, Any]) -> Topic:
        errors = validate_topic(data, partial=True)
        if errors:
            raise ValidationError(errors)

        payload = topic_to_wire(editable_fields(data, TOPIC_FIELDS))
        payload["id"] = topic_id
        topic = topic_from_wire(self._client.post("/api/so/topic/update", payload))
        logger.info(f"Updated remote topic {topic_id}")
        return topic

    def delete(self, topic_id: int) -> None:
        self._client.post("/api/so/topic/delete", {"id": topic_id})
        logger.info(f"Deleted remote topic {topic_id}")
