"""Login, logout and local-to-remote migration for TopicSync."""

import logging
from typing import Any, Dict, Optional

from topicsync.logging_config import log_migration, log_sync
from topicsync.sync import SyncCoordinator
from topicsync.types import MigrationResult

logger = logging.getLogger(__name__)


class SyncMixin:
    """Auth transitions and the one-time migration."""

    def login(self, token: str, backend_url: Optional[str] = None) -> Optional[MigrationResult]:
        """Switch to authenticated mode.

        The sync trigger observes the transition and migrates local data.
        A failed migration is logged and never fails the login.

        Returns:
            The migration result when a pass ran, else None.
        """
        if backend_url and backend_url.rstrip("/") != self.backend_url:
            self._close_client()
            self.backend_url = backend_url.rstrip("/")
        self.last_migration = None
        self.auth.login(token)
        fields: Dict[str, Any] = {"migrated": self.last_migration is not None}
        if self.trigger.last_error is not None:
            fields["error"] = type(self.trigger.last_error).__name__
        log_sync("login", **fields)
        return self.last_migration

    def logout(self) -> None:
        """Switch back to local mode; the next login migrates again."""
        self.auth.logout()
        self._close_client()
        log_sync("logout")

    def sync_local_data_to_remote(self) -> MigrationResult:
        """Migrate local-mode data to the remote store.

        Safe to call repeatedly: with nothing left locally it returns an
        empty result without contacting the backend. Without an
        authenticated session nothing is migrated.
        """
        if not self.is_remote:
            logger.warning("Not authenticated; local data stays local")
            return MigrationResult()
        return self._migrate()

    def _migrate(self) -> MigrationResult:
        coordinator = SyncCoordinator(
            local_topics=self.local_topics,
            local_logs=self.local_logs,
            remote_topics=self.remote_topics,
            remote_logs=self.remote_logs,
            on_complete=self._reload_after_migration,
        )
        result = coordinator.run()
        self.last_migration = result
        if result.attempted:
            log_migration(result)
        return result

    def _reload_after_migration(self, result: MigrationResult) -> None:
        try:
            self.load_topics()
        except Exception as e:
            # Migration already finished; keep the stale cache
            logger.warning(f"Reload after migration failed: {e}")

    def get_sync_status(self) -> Dict[str, Any]:
        """Current mode plus how much local data is waiting to migrate."""
        return {
            "mode": self.mode,
            "authenticated": self.auth.is_authenticated.value,
            "has_synced": self.trigger.has_synced,
            "pending_topics": self.local_topics.count(),
            "pending_logs": self.local_logs.count(),
            "backend_url": self.backend_url,
        }
