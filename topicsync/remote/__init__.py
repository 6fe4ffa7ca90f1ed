"""topicsync remote repos: the authoritative backend store over HTTP."""

from .client import ERR_CODE_LOGIN_EXPIRED, ApiClient
from .topic_logs import RemoteTopicLogRepo, topic_log_from_wire
from .topics import RemoteTopicRepo, topic_from_wire, topic_to_wire

__all__ = [
    "ApiClient",
    "ERR_CODE_LOGIN_EXPIRED",
    "RemoteTopicLogRepo",
    "RemoteTopicRepo",
    "topic_from_wire",
    "topic_log_from_wire",
    "topic_to_wire",
]
