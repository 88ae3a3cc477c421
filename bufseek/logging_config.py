"""
Logging configuration for bufseek.

The library stays quiet by default; the CLI turns on debug output with
--verbose (or BUFSEEK_VERBOSE=1), and a data directory can carry a
persistent operations log.
"""

import logging
import os
import sys
import warnings
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOGGER_NAME = "bufseek"
OPS_LOG_FILENAME = "bufseek-ops.log"


def configure_quiet_mode(quiet: bool = True):
    """
    Keep bufseek output to warnings and above.

    Args:
        quiet: If True, suppress informational output. If False, leave
            logger levels alone.
    """
    if quiet:
        warnings.filterwarnings("ignore", category=DeprecationWarning)
        logger = logging.getLogger(LOGGER_NAME)
        if logger.level == logging.NOTSET:
            logger.setLevel(logging.WARNING)


def enable_debug_mode():
    """Enable debug-level logging to stderr."""
    warnings.filterwarnings("default")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Add stderr handler if not already present
    if not any(isinstance(h, logging.StreamHandler) and h.stream == sys.stderr
               for h in root_logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%H:%M:%S"
        ))
        root_logger.addHandler(handler)

    logging.getLogger(LOGGER_NAME).setLevel(logging.DEBUG)


def configure_ops_log(data_dir):
    """Configure a persistent operations log for a data directory.

    Writes to {data_dir}/bufseek-ops.log using a rotating file handler
    (1MB max, 3 backups). Returns the handler so it can be removed when
    the session ends.
    """
    log_path = Path(data_dir) / OPS_LOG_FILENAME
    logger = logging.getLogger(LOGGER_NAME)
    for existing in logger.handlers:
        if (isinstance(existing, RotatingFileHandler)
                and existing.baseFilename == os.path.abspath(log_path)):
            return existing

    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        str(log_path),
        maxBytes=1_000_000,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s %(levelname)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))

    logger.addHandler(handler)
    # Ensure the bufseek logger lets INFO through even in quiet mode
    if logger.level == logging.NOTSET or logger.level > logging.INFO:
        logger.setLevel(logging.INFO)

    return handler
