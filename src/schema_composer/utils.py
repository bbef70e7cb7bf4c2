"""Utility functions for Schema Composer."""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[Path] = None,
    console: bool = True,
) -> None:
    """Configure loguru sinks.

    Args:
        log_level: Minimum level for every sink (TRACE shows per-feature decisions)
        log_file: Optional file receiving the same records, rotated at 10 MB
        console: Whether to log to stderr
    """
    # Remove default handler and any previously added ones
    logger.remove()

    if console:
        logger.add(sys.stderr, level=log_level, backtrace=True, diagnose=False, colorize=True)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_file),
            level=log_level,
            rotation="10 MB",
            retention="10 days",
            backtrace=True,
            diagnose=False,
            enqueue=True,
        )

    logger.debug(f"Logging configured: level={log_level}, file={log_file}")
