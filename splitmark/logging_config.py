"""splitmark logging configuration.

The editor owns the whole screen, so nothing is ever logged to the terminal.
Logging stays off unless ``SPLITMARK_LOG_LEVEL`` is set, in which case
records go to ``splitmark.log`` in the OS-appropriate log directory.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

import platformdirs

LOG_LEVEL_ENV = "SPLITMARK_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: Optional[str] = None, log_dir: Optional[Path] = None) -> Optional[Path]:
    """Configure the ``splitmark`` logger.

    Args:
        level: Optional override for ``SPLITMARK_LOG_LEVEL``.
        log_dir: Directory for the log file; defaults to the user log dir.

    Returns:
        Path of the log file, or None when logging is disabled.
    """
    logger = logging.getLogger("splitmark")
    level = level or os.environ.get(LOG_LEVEL_ENV)
    if not level:
        logger.addHandler(logging.NullHandler())
        return None

    log_dir = Path(log_dir or platformdirs.user_log_dir("splitmark"))
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_dir / "splitmark.log", encoding="utf-8")
    except OSError:
        logger.addHandler(logging.NullHandler())
        return None
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    try:
        logger.setLevel(level.upper())
    except ValueError:
        logger.setLevel(logging.INFO)
        logger.warning(f"Unknown log level {level!r}, using INFO")
    return log_dir / "splitmark.log"
