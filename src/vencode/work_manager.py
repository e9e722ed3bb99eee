"""Scoped temporary files for encodes."""

import os
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from loguru import logger


@contextmanager
def work_space(prefix: str = "vencode-") -> Iterator[Path]:
    """Context manager for a scratch directory removed on exit.

    Yields:
        Path of the scratch directory
    """
    work_dir = Path(tempfile.mkdtemp(prefix=prefix))
    logger.debug(f"Created work directory: {work_dir}")
    try:
        yield work_dir
    finally:
        try:
            shutil.rmtree(work_dir)
            logger.debug(f"Cleaned up work directory: {work_dir}")
        except OSError as e:
            logger.error(f"Failed to clean up work directory {work_dir}: {e}")


def partial_path(output_file: Path) -> Path:
    """Hidden sibling that receives output until it is complete."""
    return output_file.with_name(f".{output_file.name}.partial")


@contextmanager
def atomic_output(output_file: Path) -> Iterator[Path]:
    """Write to a temporary sibling and rename it into place on success.

    The temporary file is removed if the block raises (including
    KeyboardInterrupt), so an interrupted run never leaves a truncated file
    at ``output_file``.

    Yields:
        Path to write to
    """
    output_file.parent.mkdir(parents=True, exist_ok=True)
    temp_file = partial_path(output_file)
    try:
        yield temp_file
    except BaseException:
        if temp_file.exists():
            temp_file.unlink()
            logger.debug(f"Removed partial output: {temp_file}")
        raise
    os.replace(temp_file, output_file)
