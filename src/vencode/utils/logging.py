"""Logging configuration and utilities."""

import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger
from tqdm import tqdm

from vencode import default_config as defaults

LOG_FORMAT = (
    "<level>{level}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:"
    "<cyan>{line}</cyan> - <level>{message}</level>"
)


def _tqdm_sink(message: str) -> None:
    # Keep log lines from tearing through an active progress bar
    tqdm.write(message, file=sys.stderr, end="")


def setup_logging(level: Optional[str] = None,
                  log_file: Optional[Union[str, Path]] = None) -> None:
    """Configure loguru for a command-line run.

    Args:
        level: Log level name, defaults to VENCODE_LOG_LEVEL or INFO
        log_file: Optional path that receives a rotated copy of the log
    """
    level = (level or defaults.LOG_LEVEL).upper()
    logger.remove()  # Remove default handler

    logger.add(sink=_tqdm_sink, level=level, format=LOG_FORMAT)

    if log_file:
        logger.add(
            sink=str(log_file),
            level=level,
            rotation="100 MB",
            retention="1 week"
        )
