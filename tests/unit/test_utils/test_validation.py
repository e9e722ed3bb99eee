"""Tests for source file checks."""

import pytest
from pathlib import Path

from vencode.core.video.errors import FatalInputError, ProbeError
from vencode.utils.validation import check_readable, load_source


@pytest.fixture
def test_file(tmp_path):
    """Create a temporary test file."""
    file_path = tmp_path / "test.mkv"
    file_path.touch()
    return file_path


def test_check_readable(test_file):
    check_readable(test_file)


def test_check_readable_not_found():
    with pytest.raises(FatalInputError) as exc_info:
        check_readable(Path("/nonexistent/file.mkv"))
    assert "does not exist" in str(exc_info.value)
    assert "/nonexistent/file.mkv" in str(exc_info.value)


def test_check_readable_is_dir(tmp_path):
    with pytest.raises(FatalInputError) as exc_info:
        check_readable(tmp_path)
    assert "not a file" in str(exc_info.value)


def test_check_readable_not_readable(test_file, mocker):
    mocker.patch('vencode.utils.validation.os.access', return_value=False)
    with pytest.raises(FatalInputError) as exc_info:
        check_readable(test_file)
    assert "not readable" in str(exc_info.value)


def test_load_source(backend, make_video, tmp_path):
    """String paths are accepted and the probed media returned."""
    path = make_video(tmp_path / "movie.mkv")
    media = load_source(str(path), backend)
    assert media.path == path
    assert (media.width, media.height) == (1920, 1080)


def test_load_source_missing_file(backend, tmp_path):
    with pytest.raises(FatalInputError) as exc_info:
        load_source(tmp_path / "missing.mkv", backend)
    assert "does not exist" in str(exc_info.value)


def test_load_source_without_video(backend, tmp_path):
    song = tmp_path / "song.m4a"
    song.write_bytes(b"audio")
    backend.add_media(song, has_audio=True)
    with pytest.raises(FatalInputError) as exc_info:
        load_source(song, backend)
    assert "No video stream" in str(exc_info.value)


@pytest.mark.parametrize("width,height", [(0, 0), (1920, 0), (0, 1080)])
def test_load_source_zero_sized_frame(backend, make_video, tmp_path, width, height):
    path = make_video(tmp_path / "broken.mkv", width=width, height=height)
    with pytest.raises(FatalInputError) as exc_info:
        load_source(path, backend)
    assert f"Unusable video dimensions {width}x{height}" in str(exc_info.value)


def test_load_source_unknown_format(backend, tmp_path):
    """Files the backend cannot read raise the backend's error."""
    junk = tmp_path / "junk.mkv"
    junk.write_bytes(b"junk")
    with pytest.raises(ProbeError):
        load_source(junk, backend)
