"""Media backend interface and the FFmpeg implementation.

This module provides the seam between pipeline logic and the external tools:
- MediaBackend: Protocol for probing, filter passes and running commands
- FFmpegBackend: Implementation that shells out to ffprobe/ffmpeg
"""

import os
import shutil
import subprocess
from fractions import Fraction
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Set, Union

import ffmpeg
from loguru import logger

from vencode import default_config as defaults
from vencode.core.video.errors import FatalConfigError, ProbeError
from vencode.core.video.types import SourceMedia


class MediaBackend(Protocol):
    """Protocol for media probing and encoding backends."""

    ffmpeg: str

    def ensure_available(self) -> None:
        """Raise FatalConfigError if the tools cannot be run."""
        ...

    def probe_streams(self, path: Path) -> SourceMedia:
        """Probe stream layout, geometry and container metadata."""
        ...

    def probe_duration(self, path: Path) -> float:
        """Probe container duration in seconds."""
        ...

    def run_filter_pass(self, path: Path, filters: str, start: float = 0.0,
                        frames: Optional[int] = None) -> str:
        """Decode through a filter graph and return the diagnostic log."""
        ...

    def has_encoder(self, name: str) -> bool:
        """Whether the encoder binary was built with ``name``."""
        ...

    def run(self, cmd: List[str]) -> int:
        """Run an encoder command and return its exit status."""
        ...


def _parse_ratio(value: Optional[str]) -> Optional[float]:
    """Parse an ffprobe ratio such as ``16:9``; zero or missing gives None."""
    if not value:
        return None
    try:
        ratio = Fraction(value.replace(':', '/'))
    except (ValueError, ZeroDivisionError):
        return None
    return float(ratio) if ratio > 0 else None


def _parse_duration(probe: Dict[str, Any]) -> Optional[float]:
    candidates = [probe.get('format', {}).get('duration')]
    candidates += [s.get('duration') for s in probe.get('streams', [])]
    for value in candidates:
        try:
            duration = float(value)
        except (TypeError, ValueError):
            continue
        if duration > 0:
            return duration
    return None


class FFmpegBackend:
    """Media backend built on ffmpeg-python."""

    def __init__(self, ffmpeg_path: Union[str, Path, None] = None,
                 ffprobe_path: Union[str, Path, None] = None):
        self.ffmpeg = str(ffmpeg_path or defaults.FFMPEG)
        self.ffprobe = str(ffprobe_path or defaults.FFPROBE)
        self._encoders: Optional[Set[str]] = None

    def ensure_available(self) -> None:
        for name, binary in (("FFmpeg", self.ffmpeg), ("FFprobe", self.ffprobe)):
            path = Path(binary)
            if path.is_file() and os.access(path, os.X_OK):
                continue
            if shutil.which(binary):
                continue
            raise FatalConfigError(f"{name} not found: {binary}")
        logger.debug(f"Using ffmpeg={self.ffmpeg}, ffprobe={self.ffprobe}")

    def _probe(self, path: Path) -> Dict[str, Any]:
        try:
            return ffmpeg.probe(str(path), cmd=self.ffprobe)
        except ffmpeg.Error as e:
            stderr = e.stderr.decode(errors='replace') if e.stderr else None
            raise ProbeError(f"Failed to probe {path}", stderr) from e

    def probe_streams(self, path: Path) -> SourceMedia:
        probe = self._probe(path)
        streams = probe.get('streams', [])
        video = next((s for s in streams if s.get('codec_type') == 'video'), None)
        has_audio = any(s.get('codec_type') == 'audio' for s in streams)
        tags = {str(k): str(v) for k, v in probe.get('format', {}).get('tags', {}).items()}

        if video is None:
            return SourceMedia(path=path, has_audio=has_audio,
                               duration=_parse_duration(probe), tags=tags)
        return SourceMedia(
            path=path,
            has_video=True,
            has_audio=has_audio,
            width=int(video.get('width') or 0),
            height=int(video.get('height') or 0),
            display_aspect_ratio=_parse_ratio(video.get('display_aspect_ratio')),
            duration=_parse_duration(probe),
            tags=tags,
        )

    def probe_duration(self, path: Path) -> float:
        duration = _parse_duration(self._probe(path))
        if duration is None:
            raise ProbeError(f"Could not determine duration of {path}")
        return duration

    def run_filter_pass(self, path: Path, filters: str, start: float = 0.0,
                        frames: Optional[int] = None) -> str:
        input_args = {'ss': start} if start else {}
        output_args: Dict[str, Any] = {'format': 'null', 'vf': filters, 'an': None}
        if frames:
            output_args['vframes'] = frames
        stream = ffmpeg.input(str(path), **input_args)
        logger.debug(f"Running filter pass on {path}: {filters}")
        try:
            _, err = (
                ffmpeg.output(stream, 'pipe:', **output_args)
                .global_args('-hide_banner')
                .run(cmd=self.ffmpeg, capture_stdout=True, capture_stderr=True)
            )
        except ffmpeg.Error as e:
            stderr = e.stderr.decode(errors='replace') if e.stderr else None
            raise ProbeError(f"Filter pass failed for {path}", stderr) from e
        return err.decode(errors='replace')

    def has_encoder(self, name: str) -> bool:
        if self._encoders is None:
            self._encoders = self._list_encoders()
        return name in self._encoders

    def _list_encoders(self) -> Set[str]:
        try:
            result = subprocess.run(
                [self.ffmpeg, '-hide_banner', '-encoders'],
                capture_output=True,
                text=True,
                check=True
            )
        except (OSError, subprocess.CalledProcessError) as e:
            logger.warning(f"Could not list encoders: {e}")
            return set()

        # Encoder rows follow the " ------" separator: " A....D aac_at  AAC (AudioToolbox)"
        encoders = set()
        in_table = False
        for line in result.stdout.splitlines():
            if line.strip().startswith('---'):
                in_table = True
                continue
            parts = line.split()
            if in_table and len(parts) >= 2:
                encoders.add(parts[1])
        return encoders

    def run(self, cmd: List[str]) -> int:
        logger.debug(f"Running command: {' '.join(cmd)}")
        return subprocess.run(cmd).returncode
