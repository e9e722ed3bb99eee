"""Validation module."""

from pathlib import Path
from typing import Union

from loguru import logger

from .core.video.errors import ProbeError


def is_valid_media(path: Union[str, Path], backend) -> bool:
    """Check that a file holds at least one video and one audio stream.

    Missing, unreadable and corrupt files are invalid rather than errors.

    Args:
        path: File to check
        backend: Media backend used to probe the file

    Returns:
        True if the file has both a video and an audio stream
    """
    path = Path(path)
    if not path.is_file():
        logger.debug(f"Not a regular file: {path}")
        return False

    try:
        media = backend.probe_streams(path)
    except ProbeError as e:
        logger.debug(f"Probe failed for {path}: {e.details or e.message}")
        return False

    if not media.is_valid:
        logger.debug(f"{path} is missing streams (video={media.has_video}, audio={media.has_audio})")
    return media.is_valid
