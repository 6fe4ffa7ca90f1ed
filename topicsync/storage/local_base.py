"""Shared collection handling for the local repos.

Each local repo keeps its whole collection as one JSON list under a single
key. Every mutation is a read-modify-write of that list, which is safe only
because the local store has a single writer process.
"""

import logging
import random
from typing import Callable, Generic, List, Optional, Set, Type, TypeVar

from topicsync.protocols import KeyValueStore, StorageError, StoreReadError
from topicsync.types import now_ts

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")

# Random suffix range appended to the second-granularity timestamp
TEMP_ID_SPREAD = 1000

# Bound on id regeneration attempts when a freshly minted id collides
MAX_ID_ATTEMPTS = 100


def generate_temp_id() -> int:
    """Mint a temporary local id: unix seconds * 1000 + random suffix.

    Temporary ids are only unique within one local store and mean nothing
    to the backend.
    """
    return now_ts() * TEMP_ID_SPREAD + random.randrange(TEMP_ID_SPREAD)


class LocalCollection(Generic[RecordT]):
    """Base for repos storing one record type as a list under one key.

    Args:
        store: The key-value store holding the collection.
        id_factory: Callable minting candidate ids; defaults to
            :func:`generate_temp_id`.
    """

    key: str = ""
    entity: str = ""
    record_cls: Type = None

    def __init__(
        self,
        store: KeyValueStore,
        id_factory: Optional[Callable[[], int]] = None,
    ):
        self._store = store
        self._id_factory = id_factory or generate_temp_id

    def _read(self, strict: bool = False) -> List[RecordT]:
        """Load the whole collection.

        Unreadable or malformed storage is logged and treated as empty,
        unless ``strict`` is set, in which case StoreReadError is raised.
        """
        try:
            raw = self._store.get(self.key, [])
            if raw is None:
                return []
            if not isinstance(raw, list):
                raise StorageError(f"expected a list, found {type(raw).__name__}")
            return [self.record_cls.from_dict(item) for item in raw]
        except (StorageError, KeyError, TypeError, ValueError) as e:
            if strict:
                raise StoreReadError(self.key, e) from e
            logger.error(f"Failed to read local {self.entity} collection: {e}")
            return []

    def _write(self, records: List[RecordT]) -> None:
        self._store.set(self.key, [record.to_dict() for record in records])

    def _mint_id(self, taken: Set[int]) -> int:
        for _ in range(MAX_ID_ATTEMPTS):
            candidate = self._id_factory()
            if candidate not in taken:
                return candidate
        raise StorageError(
            f"Could not mint a unique local {self.entity} id after {MAX_ID_ATTEMPTS} attempts"
        )

    @staticmethod
    def _find_index(records: List[RecordT], record_id: int) -> int:
        for index, record in enumerate(records):
            if record.id == record_id:
                return index
        return -1

    def get_all(self, strict: bool = False) -> List[RecordT]:
        """Return every stored record; ``[]`` when empty or unreadable.

        With ``strict=True`` a read failure raises StoreReadError instead of
        being swallowed.
        """
        records = self._read(strict=strict)
        logger.debug(f"Loaded {len(records)} local {self.entity} records")
        return records

    def get_by_id(self, record_id: int) -> Optional[RecordT]:
        for record in self._read():
            if record.id == record_id:
                return record
        return None

    def count(self) -> int:
        return len(self._read())

    def clear_all(self) -> None:
        """Remove the whole collection."""
        self._store.remove(self.key)
        logger.info(f"Cleared local {self.entity} collection")
