"""Tests for video analysis types."""

from pathlib import Path

import pytest

from vencode.core.video.errors import CropValidationError
from vencode.core.video.types import CropBox, ScaleTarget, SourceMedia


def test_source_media_validity():
    """Valid media needs both video and audio."""
    path = Path("clip.mkv")
    assert SourceMedia(path, has_video=True, has_audio=True).is_valid
    assert not SourceMedia(path, has_video=True).is_valid
    assert not SourceMedia(path, has_audio=True).is_valid


def test_pixel_aspect():
    """Pixel aspect compares display and storage ratios."""
    square = SourceMedia(Path("a.mkv"), has_video=True, width=1920, height=1080,
                         display_aspect_ratio=16 / 9)
    assert square.pixel_aspect == pytest.approx(1.0)

    dvd = SourceMedia(Path("b.mkv"), has_video=True, width=720, height=480,
                      display_aspect_ratio=16 / 9)
    assert dvd.pixel_aspect == pytest.approx(32 / 27)

    undeclared = SourceMedia(Path("c.mkv"), has_video=True, width=720, height=480)
    assert undeclared.pixel_aspect == 1.0


def test_scale_target_without_padding():
    """Unpadded targets use the box size for the picture."""
    target = ScaleTarget(1280, 720)
    assert (target.picture_width, target.picture_height) == (1280, 720)
    assert not target.padded
    assert target.to_filter() == "scale=1280:720,setsar=1"
    assert str(target) == "1280:720:0:0"


def test_crop_box_valid():
    """A crop inside the frame passes validation."""
    crop = CropBox(1920, 800, 0, 136)
    crop.validate(1920, 1072)
    assert not crop.covers(1920, 1072)
    assert CropBox(1920, 1072).covers(1920, 1072)


@pytest.mark.parametrize("crop, message", [
    (CropBox(0, 800), "must be positive"),
    (CropBox(1920, 800, -2, 0), "must be non-negative"),
    (CropBox(3840, 800), "past the frame width"),
    (CropBox(1920, 1000, 0, 136), "past the frame height"),
])
def test_crop_box_invalid(crop, message):
    """Crops outside the frame are rejected."""
    with pytest.raises(CropValidationError) as exc_info:
        crop.validate(1920, 1072)
    assert message in str(exc_info.value)
