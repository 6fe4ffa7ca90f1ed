"""Logging setup for topicsync.

All modules log through ``logging.getLogger(__name__)`` under the
``topicsync`` hierarchy. ``setup_topicsync_logging`` adds a daily file
handler in ``<data dir>/logs``; the ``log_*`` helpers emit one structured
line per notable event.
"""

import logging
import os
from datetime import date
from pathlib import Path
from typing import Optional, Union

from topicsync.types import MigrationResult
from topicsync.utils import get_topicsync_home

LOGGER_NAME = "topicsync"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_topicsync_logging(
    level: int = logging.INFO, log_dir: Optional[Union[str, Path]] = None
) -> logging.Logger:
    """Attach a file handler writing ``local-YYYY-MM-DD.log``.

    Calling this more than once does not add duplicate file handlers.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    target_dir = get_topicsync_home() / "logs" if log_dir is None else Path(log_dir).expanduser()
    target_dir.mkdir(parents=True, exist_ok=True)
    log_file = target_dir / f"local-{date.today().isoformat()}.log"

    wanted = os.path.abspath(log_file)
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == wanted:
            return logger

    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger


def log_migration(result: MigrationResult) -> None:
    """Log a one-line summary of a migration pass."""
    logger = logging.getLogger(f"{LOGGER_NAME}.migration")
    level = logging.INFO if result.success else logging.WARNING
    logger.log(
        level,
        f"migration topics_ok={result.topics_migrated} topics_failed={result.topics_failed} "
        f"logs_ok={result.logs_migrated} logs_failed={result.logs_failed} "
        f"logs_skipped={result.logs_skipped} cleared={result.local_cleared}",
    )


def log_sync(event: str, **fields) -> None:
    """Log a sync lifecycle event (login, logout, manual sync) with key=value fields."""
    logger = logging.getLogger(f"{LOGGER_NAME}.sync")
    details = " ".join(f"{key}={value}" for key, value in sorted(fields.items()))
    logger.info(f"{event} {details}".rstrip())
