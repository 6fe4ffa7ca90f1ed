"""
topicsync - local-first topics and logs that migrate to the backend on login.
"""

from .core import TopicSync
from .types import MigrationResult, Topic, TopicLog, TopicType

try:
    from importlib.metadata import version

    __version__ = version("topicsync")
except Exception:
    __version__ = "0.0.0"

__all__ = ["TopicSync", "MigrationResult", "Topic", "TopicLog", "TopicType"]
