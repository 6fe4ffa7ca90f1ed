"""Key-value stores backing the local repos.

Both stores hold JSON-serializable values under namespaced string keys and
guarantee atomicity per key only. Storage failures surface as StorageError;
a missing key is not a failure and returns the caller's default.
"""

import contextlib
import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Dict, Optional, Union

from topicsync.protocols import StorageError
from topicsync.utils import get_default_db_path

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "topicsync"

# Collection keys used by the local repos
LOCAL_TOPICS_KEY = "local_topics"
LOCAL_TOPIC_LOGS_KEY = "local_topic_logs"


class MemoryKeyValueStore:
    """In-process key-value store.

    Values are JSON round-tripped on the way in and out so a caller never
    holds a reference to the stored object.
    """

    def __init__(self, namespace: str = DEFAULT_NAMESPACE):
        self.namespace = namespace
        self._data: Dict[str, str] = {}

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    def get(self, key: str, default: Any = None) -> Any:
        raw = self._data.get(self._key(key))
        if raw is None:
            return default
        return json.loads(raw)

    def set(self, key: str, value: Any) -> bool:
        try:
            self._data[self._key(key)] = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value for {key!r} is not serializable: {e}") from e
        return True

    def remove(self, key: str) -> bool:
        self._data.pop(self._key(key), None)
        return True

    def keys(self):
        prefix = f"{self.namespace}:"
        return [k[len(prefix) :] for k in self._data if k.startswith(prefix)]


class SQLiteKeyValueStore:
    """Durable key-value store in a single SQLite table.

    Args:
        db_path: Database file. Defaults to ``<data dir>/topicsync.db``.
        namespace: Prefix applied to every key so several stores can share
            one database file.
    """

    def __init__(
        self,
        db_path: Optional[Union[str, Path]] = None,
        namespace: str = DEFAULT_NAMESPACE,
    ):
        self.db_path = Path(db_path) if db_path else get_default_db_path()
        self.namespace = namespace
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA busy_timeout=5000")
        return conn

    @contextlib.contextmanager
    def _connect(self):
        """Context manager that commits on success, rolls back on error, always closes."""
        conn = self._get_conn()
        try:
            yield conn
            conn.commit()
        except Exception as e:
            logger.debug(f"Transaction failed, rolling back: {e}")
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_db(self):
        try:
            with self._connect() as conn:
                conn.execute(
                    """CREATE TABLE IF NOT EXISTS kv (
                           key TEXT PRIMARY KEY,
                           value TEXT NOT NULL,
                           updated_at INTEGER NOT NULL DEFAULT (strftime('%s', 'now'))
                       )"""
                )
        except sqlite3.Error as e:
            raise StorageError(f"Could not initialize key-value store at {self.db_path}: {e}") from e

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    def get(self, key: str, default: Any = None) -> Any:
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT value FROM kv WHERE key = ?", (self._key(key),)
                ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to read {key!r}: {e}") from e

        if row is None:
            return default
        try:
            return json.loads(row["value"])
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt value stored under {key!r}: {e}") from e

    def set(self, key: str, value: Any) -> bool:
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value for {key!r} is not serializable: {e}") from e

        try:
            with self._connect() as conn:
                conn.execute(
                    """INSERT INTO kv (key, value, updated_at)
                       VALUES (?, ?, strftime('%s', 'now'))
                       ON CONFLICT(key) DO UPDATE SET
                           value = excluded.value,
                           updated_at = excluded.updated_at""",
                    (self._key(key), payload),
                )
        except sqlite3.Error as e:
            raise StorageError(f"Failed to write {key!r}: {e}") from e
        return True

    def remove(self, key: str) -> bool:
        try:
            with self._connect() as conn:
                conn.execute("DELETE FROM kv WHERE key = ?", (self._key(key),))
        except sqlite3.Error as e:
            raise StorageError(f"Failed to remove {key!r}: {e}") from e
        return True

    def keys(self):
        prefix = f"{self.namespace}:"
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    "SELECT key FROM kv WHERE key LIKE ? ESCAPE '\\' ORDER BY key",
                    (_escape_like(prefix) + "%",),
                ).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to list keys: {e}") from e
        return [row["key"][len(prefix) :] for row in rows]


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
