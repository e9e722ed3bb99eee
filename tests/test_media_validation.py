"""Tests for media validation."""

from vencode.validation import is_valid_media


def test_valid_media(backend, source_video):
    """Video plus audio is valid."""
    assert is_valid_media(source_video, backend)


def test_audio_only(tmp_path, backend):
    song = tmp_path / "song.m4a"
    song.write_bytes(b"audio")
    backend.add_media(song, has_audio=True)
    assert not is_valid_media(song, backend)


def test_video_without_audio(tmp_path, backend, make_video):
    silent = make_video(tmp_path / "silent.mkv", audio=False)
    assert not is_valid_media(silent, backend)


def test_unprobeable_file(tmp_path, backend):
    """Files ffprobe cannot read are invalid, not errors."""
    notes = tmp_path / "notes.txt"
    notes.write_text("hello")
    assert not is_valid_media(notes, backend)


def test_missing_and_directories(tmp_path, backend):
    assert not is_valid_media(tmp_path / "missing.mkv", backend)
    assert not is_valid_media(tmp_path, backend)


def test_validation_is_idempotent(tmp_path, backend, source_video):
    """Repeated checks give the same answer."""
    notes = tmp_path / "notes.txt"
    notes.write_text("hello")
    for path in (source_video, notes):
        assert is_valid_media(path, backend) == is_valid_media(path, backend)
