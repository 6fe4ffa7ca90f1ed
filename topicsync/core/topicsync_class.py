"""TopicSync class: the main interface for topic and log operations.

Mode selection is a pure function of the auth state: local repos while
unauthenticated, remote repos once authenticated. The sync trigger is
attached at construction so the first login migrates local data.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

import httpx

from topicsync.config import resolve_backend_config
from topicsync.core.sync import SyncMixin
from topicsync.core.topics import LogsMixin, TopicsMixin
from topicsync.protocols import KeyValueStore, TopicSyncError
from topicsync.remote import ApiClient, RemoteTopicLogRepo, RemoteTopicRepo
from topicsync.storage import LocalTopicLogRepo, LocalTopicRepo, SQLiteKeyValueStore
from topicsync.sync import AuthState, SyncTrigger
from topicsync.types import MigrationResult, Topic

logger = logging.getLogger(__name__)

MODE_LOCAL = "local"
MODE_REMOTE = "remote"


class TopicSync(TopicsMixin, LogsMixin, SyncMixin):
    """Local-first topic store that migrates to the backend on login.

    Args:
        store: Key-value store for local mode. Defaults to a
            SQLiteKeyValueStore at ``db_path``.
        db_path: Path of the local database when ``store`` is not given.
        auth: Auth state to observe. Defaults to an unauthenticated state.
        backend_url: Backend base URL used in authenticated mode.
        transport: Optional httpx transport for the API client.
        remote_topics: Override for the remote topic repo.
        remote_logs: Override for the remote topic log repo.
    """

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        db_path: Optional[Union[str, Path]] = None,
        auth: Optional[AuthState] = None,
        backend_url: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
        remote_topics=None,
        remote_logs=None,
    ):
        self.store = store if store is not None else SQLiteKeyValueStore(db_path)
        self.local_topics = LocalTopicRepo(self.store)
        self.local_logs = LocalTopicLogRepo(self.store)
        self.auth = auth or AuthState()
        self.backend_url = backend_url.rstrip("/") if backend_url else None
        self._transport = transport
        self._client: Optional[ApiClient] = None
        self._remote_topics = remote_topics
        self._remote_logs = remote_logs

        self.topics: List[Topic] = []
        self.last_migration: Optional[MigrationResult] = None

        self.trigger = SyncTrigger(self.auth, self._migrate)
        self.auth.token.subscribe(self._on_token_changed)

    @classmethod
    def from_config(cls, db_path: Optional[Union[str, Path]] = None, **kwargs) -> "TopicSync":
        """Build an instance from saved credentials and environment variables.

        A stored token means the previous session is still logged in.
        """
        config = resolve_backend_config()
        token = config["auth_token"]
        auth = AuthState(is_authenticated=bool(token), token=token)
        return cls(db_path=db_path, auth=auth, backend_url=config["backend_url"], **kwargs)

    # === Mode selection ===

    @property
    def is_remote(self) -> bool:
        return bool(self.auth.is_authenticated.value)

    @property
    def mode(self) -> str:
        return MODE_REMOTE if self.is_remote else MODE_LOCAL

    @property
    def topic_repo(self):
        return self.remote_topics if self.is_remote else self.local_topics

    @property
    def log_repo(self):
        return self.remote_logs if self.is_remote else self.local_logs

    @property
    def remote_topics(self):
        if self._remote_topics is None:
            self._remote_topics = RemoteTopicRepo(self._get_client())
        return self._remote_topics

    @property
    def remote_logs(self):
        if self._remote_logs is None:
            self._remote_logs = RemoteTopicLogRepo(self._get_client())
        return self._remote_logs

    def _get_client(self) -> ApiClient:
        if self._client is None:
            if not self.backend_url:
                raise TopicSyncError("No backend URL configured")
            self._client = ApiClient(
                self.backend_url, self.auth.token.value, transport=self._transport
            )
        return self._client

    def _on_token_changed(self, old: Optional[str], new: Optional[str]) -> None:
        if self._client is not None:
            self._client.set_token(new)

    def _close_client(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            self._remote_topics = None
            self._remote_logs = None

    def close(self) -> None:
        self.trigger.detach()
        self._close_client()
