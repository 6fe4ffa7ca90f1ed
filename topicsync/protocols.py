"""
Protocols and errors for topicsync.

The local and remote repos share one CRUD contract so calling code can be
agnostic to the current mode. The key-value store is the only persistence
primitive the local repos depend on.
"""

from typing import Any, Dict, List, Optional, Protocol, Sequence, runtime_checkable

from topicsync.types import Topic, TopicLog, TopicLogListItem

# =============================================================================
# ERRORS
# =============================================================================


class TopicSyncError(Exception):
    """Base for all topicsync errors."""

    pass


class ValidationError(TopicSyncError):
    """Raised when create/update input violates one or more constraints.

    ``errors`` lists every violated constraint, not just the first.
    """

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__(f"Validation failed: {', '.join(self.errors)}")


class NotFoundError(TopicSyncError):
    """Raised when an update or delete references an id absent from the store."""

    def __init__(self, entity: str, record_id: int):
        self.entity = entity
        self.record_id = record_id
        super().__init__(f"{entity} {record_id} not found")


class StorageError(TopicSyncError):
    """Raised by key-value stores on storage failures."""

    pass


class StoreReadError(StorageError):
    """Raised when a local collection cannot be read.

    Fatal to a migration pass: the pass aborts before clearing anything.
    """

    def __init__(self, key: str, cause: Exception):
        self.key = key
        self.cause = cause
        super().__init__(f"Could not read local collection {key!r}: {cause}")


class RecordMigrationError(TopicSyncError):
    """A single remote create failed during a migration pass.

    Logged and counted by the coordinator; never propagated past it.
    """

    def __init__(self, entity: str, local_id: int, cause: Exception):
        self.entity = entity
        self.local_id = local_id
        self.cause = cause
        super().__init__(f"Failed to migrate {entity} {local_id}: {cause}")


class ApiError(TopicSyncError):
    """Raised when the backend rejects a request or cannot be reached.

    ``err_code`` is the business error code from the response envelope, or
    None for transport and HTTP status failures.
    """

    def __init__(
        self, message: str, err_code: Optional[int] = None, status_code: Optional[int] = None
    ):
        self.err_code = err_code
        self.status_code = status_code
        super().__init__(message)


class AuthExpiredError(ApiError):
    """Raised when the backend reports the login as expired."""

    pass


# =============================================================================
# PROTOCOLS
# =============================================================================


@runtime_checkable
class KeyValueStore(Protocol):
    """Namespaced get/set/remove primitive with single-key atomicity.

    Implementations raise StorageError when the underlying storage fails.
    """

    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> bool: ...

    def remove(self, key: str) -> bool: ...


@runtime_checkable
class TopicRepository(Protocol):
    """CRUD contract shared by LocalTopicRepo and RemoteTopicRepo."""

    def get_all(self) -> List[Topic]: ...

    def get_by_id(self, topic_id: int) -> Optional[Topic]: ...

    def create(self, data: Dict[str, Any]) -> Topic: ...

    def update(self, topic_id: int, data: Dict[str, Any]) -> Topic: ...

    def delete(self, topic_id: int) -> None: ...


@runtime_checkable
class TopicLogRepository(Protocol):
    """CRUD contract shared by LocalTopicLogRepo and RemoteTopicLogRepo."""

    def get_by_topic_ids_and_types(
        self, topic_ids: Sequence[int], topic_types: Sequence[int]
    ) -> List[TopicLog]: ...

    def get_list_items_by_topic_ids_and_types(
        self,
        topic_ids: Sequence[int],
        topic_types: Sequence[int],
        offset: int = 0,
        size: int = 1000,
    ) -> List[TopicLogListItem]: ...

    def get_by_id(self, log_id: int) -> Optional[TopicLog]: ...

    def create(self, data: Dict[str, Any]) -> TopicLog: ...

    def update(self, log_id: int, data: Dict[str, Any]) -> TopicLog: ...

    def delete(self, log_id: int) -> None: ...
