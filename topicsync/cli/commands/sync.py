"""Sync commands for the topicsync CLI."""

import json
import logging
import sys
from typing import TYPE_CHECKING

from topicsync.protocols import TopicSyncError

if TYPE_CHECKING:
    from topicsync import TopicSync

logger = logging.getLogger(__name__)


def cmd_sync(args, ts: "TopicSync"):
    """Handle ``sync`` (run the migration) and ``sync status``."""
    if getattr(args, "sync_action", None) == "status":
        status = ts.get_sync_status()
        if args.json:
            print(json.dumps(status, indent=2))
            return
        print(f"Mode:            {status['mode']}")
        print(f"Pending topics:  {status['pending_topics']}")
        print(f"Pending logs:    {status['pending_logs']}")
        return

    if not ts.is_remote:
        print("✗ Not authenticated. Run `topicsync auth login --token TOKEN` first.")
        sys.exit(1)

    try:
        result = ts.sync_local_data_to_remote()
    except TopicSyncError as e:
        logger.debug(f"Migration aborted: {e}")
        print(f"✗ Migration aborted, local data left intact: {e}")
        sys.exit(1)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return

    if not result.attempted:
        print("Nothing to migrate.")
        return
    print(f"✓ Migrated {result.topics_migrated} topics and {result.logs_migrated} logs")
    if result.topics_failed or result.logs_failed or result.logs_skipped:
        print(
            f"⚠  {result.topics_failed} topics and "
            f"{result.logs_failed + result.logs_skipped} logs were not migrated"
        )
    if not result.local_cleared:
        print("   Local data was kept; run `topicsync sync` to retry.")
