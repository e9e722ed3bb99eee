"""Checks that a source file can be encoded."""

import os
from pathlib import Path
from typing import Union

from vencode.core.video.errors import FatalInputError
from vencode.core.video.types import SourceMedia


def check_readable(path: Path) -> None:
    """Raise FatalInputError unless ``path`` is an existing readable file."""
    if not path.exists():
        problem = "File does not exist"
    elif not path.is_file():
        problem = "Path is not a file"
    elif not os.access(path, os.R_OK):
        problem = "File is not readable"
    else:
        return
    raise FatalInputError(f"{problem}: {path}")


def load_source(path: Union[str, Path], backend) -> SourceMedia:
    """Probe an input file and make sure it has a picture to encode.

    Args:
        path: Input file
        backend: Media backend used for the probe

    Returns:
        Probed stream information

    Raises:
        FatalInputError: If the file is unreadable, has no video stream or
            reports a zero-sized frame
        ProbeError: If the file cannot be probed
    """
    path = Path(path)
    check_readable(path)
    media = backend.probe_streams(path)
    if not media.has_video:
        raise FatalInputError(f"No video stream found in {path}")
    if media.width <= 0 or media.height <= 0:
        raise FatalInputError(f"Unusable video dimensions {media.width}x{media.height} in {path}")
    return media
