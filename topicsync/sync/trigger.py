"""Runs the migration once per local-to-authenticated transition.

The authenticated flag rising fires the migration. A token arriving while
already authenticated fires it too, since the two signals can update out
of lockstep. Both paths feed one guarded evaluation, so the migration runs at most
once per login.
"""

import logging
from typing import Callable, List, Optional

from topicsync.types import MigrationResult

from .auth import AuthState

logger = logging.getLogger(__name__)


class SyncTrigger:
    """Edge-triggered, guarded invoker of the migration.

    Args:
        auth: The auth state to observe.
        run_migration: Callable performing one migration pass.

    The guard (``has_synced``) starts False, is set just before the
    migration runs and is cleared when the session becomes unauthenticated,
    so logging out, writing more local data and logging back in migrates
    again. The trigger does not fire on attach, only on transitions.
    """

    def __init__(
        self,
        auth: AuthState,
        run_migration: Callable[[], Optional[MigrationResult]],
    ):
        self._auth = auth
        self._run_migration = run_migration
        self.has_synced = False
        self.last_error: Optional[Exception] = None
        self._unsubscribers: List[Callable[[], None]] = [
            auth.is_authenticated.subscribe(self._on_authenticated_changed),
            auth.token.subscribe(self._on_token_changed),
        ]

    def _on_authenticated_changed(self, old: bool, new: bool) -> None:
        if old and not new:
            self.reset()
            return
        if new and not old:
            self._evaluate()

    def _on_token_changed(self, old: Optional[str], new: Optional[str]) -> None:
        if new and not old:
            self._evaluate()

    def _evaluate(self) -> None:
        """Fire the migration when authenticated and not yet synced."""
        if not self._auth.is_authenticated.value or self.has_synced:
            return

        self.has_synced = True
        logger.info("Session became authenticated, migrating local data")
        try:
            self._run_migration()
            self.last_error = None
        except Exception as e:
            # Login must succeed even when the migration fails
            self.last_error = e
            logger.error(
                f"Local data migration failed: {e}",
                extra={"error_type": type(e).__name__},
            )

    def reset(self) -> None:
        """Clear the guard so the next login migrates again."""
        if self.has_synced:
            logger.debug("Sync guard reset")
        self.has_synced = False

    def detach(self) -> None:
        """Stop observing the auth signals."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
