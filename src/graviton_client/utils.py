"""Utility functions for graviton-client."""

import os
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

LOG_FILE_NAME = "graviton.log"


def setup_logging(
    log_level: str = "INFO",
    log_to_file: bool = False,
    log_to_stdout: bool = False,
    log_dir: Optional[Path] = None,
) -> None:  # pragma: no cover
    """Configure loguru sinks for the current entry point.

    Args:
        log_level: Minimum level emitted by every sink
        log_to_file: Write a rotating log file under log_dir (default ~/.graviton)
        log_to_stdout: Emit to stderr, used by interactive sessions and tests
        log_dir: Directory for the log file
    """
    logger.remove()

    if log_to_file:
        directory = log_dir or Path(os.getenv("HOME", Path.home())) / ".graviton"
        directory.mkdir(parents=True, exist_ok=True)
        logger.add(
            directory / LOG_FILE_NAME,
            level=log_level,
            rotation="10 MB",
            retention="10 days",
            backtrace=True,
            diagnose=False,
            enqueue=True,
        )

    if log_to_stdout:
        logger.add(sys.stderr, level=log_level, backtrace=True, diagnose=True, colorize=True)

    logger.debug(f"Logging configured at level {log_level}")


def to_camel_case(name: str) -> str:
    """Convert a snake_case parameter name to the camelCase form used by host bridges.

    >>> to_camel_case("filesystem_name")
    'filesystemName'
    """
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)
