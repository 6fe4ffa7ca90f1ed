"""topicsync sync: auth signals, the migration pass and its trigger."""

from .auth import AuthState, Observable
from .coordinator import SyncCoordinator, group_by_topic
from .trigger import SyncTrigger

__all__ = [
    "AuthState",
    "Observable",
    "SyncCoordinator",
    "SyncTrigger",
    "group_by_topic",
]
