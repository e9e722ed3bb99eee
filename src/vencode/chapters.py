"""Chapter metadata for concatenated clips."""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from loguru import logger

from .core.video.errors import FatalInputError

FFMETADATA_HEADER = ";FFMETADATA1"
MILLISECONDS = 1000
_SPECIAL_CHARS = ('\\', '=', ';', '#', '\n')


@dataclass(frozen=True)
class Chapter:
    """Chapter span in seconds."""
    start: float
    end: float
    title: str


def escape_metadata(value: str) -> str:
    """Backslash-escape characters that are special in FFMETADATA files."""
    for char in _SPECIAL_CHARS:
        value = value.replace(char, '\\' + char)
    return value


def chapter_timebase(chapters: List[Chapter]) -> int:
    """Ticks per second for the chapter boundaries.

    FFmpeg reads ``START``/``END`` as integers, so whole seconds use a 1/1
    timebase and anything finer switches to milliseconds.
    """
    whole = all(float(c.start).is_integer() and float(c.end).is_integer() for c in chapters)
    return 1 if whole else MILLISECONDS


def to_ticks(seconds: float, timebase: int) -> int:
    """Seconds as an integer count of ``1/timebase`` ticks."""
    return int(round(seconds * timebase))


def read_clip_list(lines: Iterable[str]) -> List[Path]:
    """Read newline-delimited clip paths, ignoring blank lines."""
    return [Path(line.strip()) for line in lines if line.strip()]


def build_chapters(clips: List[Path], backend) -> List[Chapter]:
    """Lay the clips end to end as chapters.

    Args:
        clips: Clip paths in playback order
        backend: Media backend used to probe durations

    Returns:
        One chapter per clip

    Raises:
        FatalInputError: If no clips are given
        ProbeError: If a clip duration cannot be determined
    """
    if not clips:
        raise FatalInputError("No clips given")

    chapters = []
    total = 0.0
    for clip in clips:
        duration = backend.probe_duration(clip)
        chapters.append(Chapter(start=total, end=total + duration, title=clip.stem))
        logger.debug(f"Chapter {clip.stem}: {total:.3f}s +{duration:.3f}s")
        total += duration
    return chapters


def render_metadata(chapters: List[Chapter], tags: Optional[Dict[str, str]] = None) -> str:
    """Render global tags and chapters as an FFMETADATA document."""
    lines = [FFMETADATA_HEADER]
    for key, value in (tags or {}).items():
        lines.append(f"{escape_metadata(key)}={escape_metadata(value)}")
    timebase = chapter_timebase(chapters)
    for chapter in chapters:
        lines.extend([
            "",
            "[CHAPTER]",
            f"TIMEBASE=1/{timebase}",
            f"START={to_ticks(chapter.start, timebase)}",
            f"END={to_ticks(chapter.end, timebase)}",
            f"title={escape_metadata(chapter.title)}",
        ])
    return "\n".join(lines) + "\n"


def build_chapter_metadata(clips: List[Path], backend) -> str:
    """Chapter metadata for the clips, based on the first clip's global tags."""
    if not clips:
        raise FatalInputError("No clips given")
    base = backend.probe_streams(clips[0])
    chapters = build_chapters(clips, backend)
    logger.info(f"Built {len(chapters)} chapters from {len(clips)} clips")
    return render_metadata(chapters, base.tags)


def render_concat_list(clips: List[Path]) -> str:
    """ffconcat list for joining the clips in order."""
    lines = ["ffconcat version 1.0"]
    for clip in clips:
        quoted = str(clip).replace("'", "'\\''")
        lines.append(f"file '{quoted}'")
    return "\n".join(lines) + "\n"
