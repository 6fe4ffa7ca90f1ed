"""CLI command handlers."""

from topicsync.cli.commands.auth import cmd_auth
from topicsync.cli.commands.log import cmd_log
from topicsync.cli.commands.sync import cmd_sync
from topicsync.cli.commands.topic import cmd_topic

__all__ = ["cmd_auth", "cmd_log", "cmd_sync", "cmd_topic"]
