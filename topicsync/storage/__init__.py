"""topicsync local storage.

Local-mode persistence: a key-value store plus the two repos that keep
topics and topic logs in it.
"""

from .kv import (
    DEFAULT_NAMESPACE,
    LOCAL_TOPIC_LOGS_KEY,
    LOCAL_TOPICS_KEY,
    MemoryKeyValueStore,
    SQLiteKeyValueStore,
)
from .local_base import generate_temp_id
from .topic_logs_local import LocalTopicLogRepo
from .topics_local import LocalTopicRepo

__all__ = [
    "DEFAULT_NAMESPACE",
    "LOCAL_TOPICS_KEY",
    "LOCAL_TOPIC_LOGS_KEY",
    "LocalTopicLogRepo",
    "LocalTopicRepo",
    "MemoryKeyValueStore",
    "SQLiteKeyValueStore",
    "generate_temp_id",
]
