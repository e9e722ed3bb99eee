"""Common test fixtures and utilities."""
import os
from pathlib import Path

import pytest

from vencode.config import EncodeOptions
from vencode.core.video.errors import FatalConfigError, ProbeError
from vencode.core.video.types import SourceMedia


class FakeBackend:
    """Media backend serving canned probe data, filter logs and exit codes.

    ``run`` records every command and writes a small file at the command's
    output path, unless the output is the null device.
    """

    def __init__(self):
        self.ffmpeg = "ffmpeg"
        self.available = True
        self.media = {}
        self.durations = {}
        self.filter_log = ""
        self.filter_passes = []
        self.encoders = {"aac"}
        self.returncodes = []
        self.commands = []

    def add_media(self, path, **kwargs) -> SourceMedia:
        path = Path(path)
        media = SourceMedia(path=path, **kwargs)
        self.media[path.resolve()] = media
        return media

    def ensure_available(self):
        if not self.available:
            raise FatalConfigError("FFmpeg not found: ffmpeg")

    def probe_streams(self, path):
        try:
            return self.media[Path(path).resolve()]
        except KeyError:
            raise ProbeError(f"Failed to probe {path}") from None

    def probe_duration(self, path):
        key = Path(path).resolve()
        if key in self.durations:
            return self.durations[key]
        media = self.media.get(key)
        if media is None or media.duration is None:
            raise ProbeError(f"Could not determine duration of {path}")
        return media.duration

    def run_filter_pass(self, path, filters, start=0.0, frames=None):
        self.filter_passes.append((Path(path), filters, start, frames))
        return self.filter_log

    def has_encoder(self, name):
        return name in self.encoders

    def run(self, cmd):
        self.commands.append(list(cmd))
        output = next(arg for arg in reversed(cmd) if not arg.startswith('-'))
        if output != os.devnull:
            Path(output).write_bytes(b"encoded")
        return self.returncodes.pop(0) if self.returncodes else 0


@pytest.fixture
def backend():
    """Fake media backend."""
    return FakeBackend()


@pytest.fixture
def make_video(backend):
    """Create a file on disk and register it with the fake backend as video."""
    def _make(path, width=1920, height=1080, audio=True, **kwargs) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"source video")
        backend.add_media(path, has_video=True, has_audio=audio, width=width,
                          height=height, **kwargs)
        return path
    return _make


@pytest.fixture
def options():
    """Default encode options."""
    return EncodeOptions()


@pytest.fixture
def source_video(tmp_path, make_video):
    """A 1080p source with audio, ten minutes long."""
    return make_video(tmp_path / "movie.mkv", duration=600.0)
