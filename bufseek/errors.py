"""
Error logging utilities for the bufseek CLI.

The CLI prints a one-line message for a failed command; the traceback
goes to an append-only file in the data directory.
"""

import logging
import os
import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .config import get_default_data_dir

logger = logging.getLogger(__name__)

ERROR_LOG_FILENAME = "bufseek-errors.log"
_SEPARATOR = "=" * 60


def error_log_path(data_dir: Optional[Path] = None) -> Path:
    """Resolve error log path, respecting BUFSEEK_DATA_DIR."""
    base = Path(data_dir) if data_dir is not None else get_default_data_dir()
    return base / ERROR_LOG_FILENAME


def format_error_entry(exc: BaseException, context: str = "") -> str:
    """One log entry: separator, UTC timestamp with command, traceback."""
    heading = f"[{datetime.now(timezone.utc).isoformat()}]"
    if context:
        heading = f"{heading} {context}"
    trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return f"\n{_SEPARATOR}\n{heading}\n{trace}"


def log_exception(exc: Exception, context: str = "", data_dir: Optional[Path] = None) -> Path:
    """
    Append an exception's traceback to the error log.

    A failure to write the log is reported on the bufseek logger and
    otherwise ignored; the path is returned either way so the caller can
    point the user at it.
    """
    log_path = error_log_path(data_dir)
    entry = format_error_entry(exc, context)
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(log_path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, 0o600)
        with os.fdopen(fd, "a", encoding="utf-8") as f:
            f.write(entry)
    except OSError as e:
        logger.warning("Could not write error log %s: %s", log_path, e)
    return log_path
