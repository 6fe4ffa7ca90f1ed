"""
Shared types for topicsync.

Topic and TopicLog are the vocabulary shared by the local repos, the remote
repos and the migration. Local and remote records use the same dataclasses;
only the id space differs, and ids from the two spaces are never compared.
"""

import time
from dataclasses import asdict, dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional

# === Shared Utility Functions ===


def now_ts() -> int:
    """Current unix timestamp in whole seconds."""
    return int(time.time())


# === Enums ===


class TopicType(IntEnum):
    """Type tag carried by every topic log."""

    TOPIC = 1  # Plain topic
    STOCK = 2  # Stock thinking
    ITEM = 3  # Item log
    FEEDBACK = 4  # User feedback


class TopicLogMark(IntEnum):
    """Bit flags stored in TopicLog.mark."""

    NORMAL = 1  # 1 << 0


DEFAULT_LOG_MARK = int(TopicLogMark.NORMAL)

# Characters kept in TopicLogListItem.preview before truncation
PREVIEW_LENGTH = 100


# === Records ===


@dataclass
class Topic:
    """A topic: the container that logs attach to."""

    id: int
    name: str
    description: Optional[str] = None
    pin_weight: int = 0
    create_time: int = 0
    update_time: int = 0
    openid: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Topic":
        return cls(
            id=int(data["id"]),
            name=data.get("name", ""),
            description=data.get("description"),
            pin_weight=int(data.get("pin_weight") or 0),
            create_time=int(data.get("create_time") or 0),
            update_time=int(data.get("update_time") or 0),
            openid=data.get("openid") or "",
        )


@dataclass
class TopicLog:
    """A log entry attached to exactly one topic of the same store."""

    id: int
    topic_id: int
    content: str
    topic_type: int = int(TopicType.TOPIC)
    extra_data: Optional[Dict[str, Any]] = None
    mark: int = DEFAULT_LOG_MARK
    create_time: int = 0
    update_time: int = 0
    openid: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TopicLog":
        mark = data.get("mark")
        return cls(
            id=int(data["id"]),
            topic_id=int(data["topic_id"]),
            content=data.get("content", ""),
            topic_type=int(data.get("topic_type") or TopicType.TOPIC),
            extra_data=data.get("extra_data"),
            mark=DEFAULT_LOG_MARK if mark is None else int(mark),
            create_time=int(data.get("create_time") or 0),
            update_time=int(data.get("update_time") or 0),
            openid=data.get("openid") or "",
        )


@dataclass
class TopicLogListItem:
    """List projection of a TopicLog with a short preview of its content."""

    id: int
    topic_id: int
    topic_type: int
    content: str
    preview: str
    create_time: int = 0
    update_time: int = 0
    extra_data: Optional[Dict[str, Any]] = None
    mark: int = DEFAULT_LOG_MARK
    openid: str = ""

    @classmethod
    def from_log(cls, log: TopicLog) -> "TopicLogListItem":
        if len(log.content) > PREVIEW_LENGTH:
            preview = log.content[:PREVIEW_LENGTH] + "..."
        else:
            preview = log.content
        return cls(
            id=log.id,
            topic_id=log.topic_id,
            topic_type=log.topic_type,
            content=log.content,
            preview=preview,
            create_time=log.create_time,
            update_time=log.update_time,
            extra_data=log.extra_data,
            mark=log.mark,
            openid=log.openid,
        )


# === Sync Types ===


@dataclass
class MigrationResult:
    """Outcome of one local-to-remote migration pass."""

    topics_migrated: int = 0
    topics_failed: int = 0
    logs_migrated: int = 0
    logs_failed: int = 0
    logs_skipped: int = 0  # Logs whose parent topic failed to migrate
    local_cleared: bool = False
    errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return len(self.errors) == 0

    @property
    def attempted(self) -> bool:
        """False when there was nothing to migrate."""
        return bool(
            self.topics_migrated
            or self.topics_failed
            or self.logs_migrated
            or self.logs_failed
            or self.logs_skipped
            or self.local_cleared
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["success"] = self.success
        return data
