"""
topicsync CLI - local-first topics and logs.

Usage:
    topicsync topic add NAME [--description D] [--pin N]
    topicsync topic list [--json]
    topicsync topic update ID [--name N] [--description D] [--pin N]
    topicsync topic rm ID
    topicsync log add TOPIC_ID CONTENT [--type TYPE]
    topicsync log list TOPIC_ID [--offset O] [--size S] [--json]
    topicsync log rm ID
    topicsync auth login --token TOKEN [--backend-url URL] [--json]
    topicsync auth logout
    topicsync auth status [--json]
    topicsync sync [--json]
    topicsync sync status [--json]
"""

import argparse
import logging
import sys

from topicsync import TopicSync
from topicsync.cli.commands import cmd_auth, cmd_log, cmd_sync, cmd_topic
from topicsync.cli.commands.log import TOPIC_TYPE_CHOICES
from topicsync.logging_config import setup_topicsync_logging
from topicsync.protocols import TopicSyncError

logging.basicConfig(level=logging.WARNING)
logger = logging.getLogger(__name__)

COMMANDS = {
    "topic": cmd_topic,
    "log": cmd_log,
    "auth": cmd_auth,
    "sync": cmd_sync,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="topicsync",
        description="Local-first topics and logs that migrate to the backend on login",
    )
    parser.add_argument("--db", help="Path of the local database", default=None)
    parser.add_argument("--verbose", "-v", action="store_true", help="Log to the data dir")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # topic
    p_topic = subparsers.add_parser("topic", help="Topic operations")
    topic_sub = p_topic.add_subparsers(dest="topic_action", required=True)

    topic_add = topic_sub.add_parser("add", help="Create a topic")
    topic_add.add_argument("name", help="Topic name")
    topic_add.add_argument("--description", "-d", default=None)
    topic_add.add_argument("--pin", type=int, default=0, help="Pin weight (0 = not pinned)")

    topic_list = topic_sub.add_parser("list", help="List topics")
    topic_list.add_argument("--json", "-j", action="store_true")

    topic_update = topic_sub.add_parser("update", help="Update a topic")
    topic_update.add_argument("id", type=int)
    topic_update.add_argument("--name", default=None)
    topic_update.add_argument("--description", "-d", default=None)
    topic_update.add_argument("--pin", type=int, default=None)

    topic_rm = topic_sub.add_parser("rm", help="Delete a topic and its logs")
    topic_rm.add_argument("id", type=int)

    # log
    p_log = subparsers.add_parser("log", help="Topic log operations")
    log_sub = p_log.add_subparsers(dest="log_action", required=True)

    log_add = log_sub.add_parser("add", help="Add a log to a topic")
    log_add.add_argument("topic_id", type=int)
    log_add.add_argument("content")
    log_add.add_argument("--type", choices=TOPIC_TYPE_CHOICES, default="topic")

    log_list = log_sub.add_parser("list", help="List logs of a topic")
    log_list.add_argument("topic_id", type=int)
    log_list.add_argument("--type", choices=TOPIC_TYPE_CHOICES, default="topic")
    log_list.add_argument("--offset", type=int, default=0)
    log_list.add_argument("--size", type=int, default=100)
    log_list.add_argument("--json", "-j", action="store_true")

    log_rm = log_sub.add_parser("rm", help="Delete a log")
    log_rm.add_argument("id", type=int)

    # auth
    p_auth = subparsers.add_parser("auth", help="Authentication")
    auth_sub = p_auth.add_subparsers(dest="auth_action", required=True)

    auth_login = auth_sub.add_parser("login", help="Log in and migrate local data")
    auth_login.add_argument("--token", required=True, help="Credential token")
    auth_login.add_argument("--backend-url", dest="backend_url", default=None)
    auth_login.add_argument("--json", "-j", action="store_true")

    auth_sub.add_parser("logout", help="Log out and return to local mode")

    auth_status = auth_sub.add_parser("status", help="Show authentication status")
    auth_status.add_argument("--json", "-j", action="store_true")

    # sync
    p_sync = subparsers.add_parser("sync", help="Migrate local data to the backend")
    p_sync.add_argument("--json", "-j", action="store_true")
    sync_sub = p_sync.add_subparsers(dest="sync_action")
    sync_status = sync_sub.add_parser("status", help="Show pending local data")
    sync_status.add_argument("--json", "-j", action="store_true")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        setup_topicsync_logging()

    try:
        ts = TopicSync.from_config(db_path=args.db)
    except TopicSyncError as e:
        print(f"✗ Could not open local storage: {e}")
        sys.exit(1)

    try:
        COMMANDS[args.command](args, ts)
    except ValueError as e:
        print(f"✗ {e}")
        sys.exit(1)
    except TopicSyncError as e:
        logger.debug(f"Command {args.command} failed: {e}")
        print(f"✗ {e}")
        sys.exit(1)
    finally:
        ts.close()


if __name__ == "__main__":
    main()
