"""Filesystem helpers for topicsync."""

import os
from pathlib import Path


def get_topicsync_home() -> Path:
    """Return the topicsync data directory.

    ``TOPICSYNC_DATA_DIR`` overrides the default ``~/.topicsync``.
    """
    override = os.environ.get("TOPICSYNC_DATA_DIR")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".topicsync"


def get_default_db_path() -> Path:
    """Path of the local SQLite key-value store."""
    return get_topicsync_home() / "topicsync.db"
