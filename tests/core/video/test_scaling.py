"""Tests for scale box computation."""

import pytest

from vencode.core.video.errors import FatalConfigError
from vencode.core.video.scaling import detect_scale, validate_modulus


def test_downscale_to_max_width():
    """1080p limited to 1280 wide at modulus 8."""
    target = detect_scale(1920, 1080, 1.0, max_width=1280, modulus=8)
    assert str(target) == "1280:720:0:0"
    assert not target.padded


def test_no_limits_floors_to_modulus():
    """Without limits the display size is only aligned."""
    target = detect_scale(1920, 1080, modulus=16)
    assert (target.width, target.height) == (1920, 1072)


def test_max_height_only():
    """Width follows the display ratio."""
    target = detect_scale(1920, 1080, max_height=720, modulus=16)
    assert str(target) == "1280:720:0:0"


def test_both_limits_pad_the_picture():
    """The requested box is a floor, the difference becomes padding."""
    target = detect_scale(1920, 1080, max_width=1280, max_height=960, modulus=16)
    assert str(target) == "1280:960:0:120"
    assert (target.picture_width, target.picture_height) == (1280, 720)
    assert target.padded
    assert target.to_filter() == "scale=1280:720,setsar=1,pad=1280:960:0:120"


def test_anamorphic_source_is_widened():
    """Wide pixels stretch the width."""
    aspect = (16 / 9) / (720 / 480)
    target = detect_scale(720, 480, aspect, modulus=16)
    assert (target.width, target.height) == (848, 480)


def test_tall_pixels_stretch_the_height():
    """Pixel aspect below one stretches the height."""
    target = detect_scale(1000, 1000, 0.5, modulus=16)
    assert (target.width, target.height) == (992, 2000)


def test_tiny_source_never_below_modulus():
    """Dimensions never floor to zero."""
    target = detect_scale(10, 10, modulus=16)
    assert (target.width, target.height) == (16, 16)


@pytest.mark.parametrize("modulus", [2, 4, 8, 16])
@pytest.mark.parametrize("size", [(1920, 1080), (1440, 1080), (720, 576), (853, 481)])
def test_dimensions_are_multiples_of_modulus(modulus, size):
    """Every output dimension is aligned and never larger than the display size."""
    width, height = size
    for limits in ({}, {'max_width': 1001}, {'max_height': 333},
                   {'max_width': 1280, 'max_height': 1000}):
        target = detect_scale(width, height, modulus=modulus, **limits)
        for value in (target.width, target.height,
                      target.picture_width, target.picture_height):
            assert value % modulus == 0
            assert value >= modulus
        if not limits:
            assert target.width <= max(modulus, width)
            assert target.height <= max(modulus, height)


@pytest.mark.parametrize("modulus", [0, 1, 3, 32])
def test_invalid_modulus(modulus):
    """Only 2, 4, 8 and 16 are accepted."""
    with pytest.raises(FatalConfigError) as exc_info:
        validate_modulus(modulus)
    assert f"Invalid modulus: {modulus}" in str(exc_info.value)

    with pytest.raises(FatalConfigError):
        detect_scale(1920, 1080, modulus=modulus)


def test_invalid_dimensions():
    """Zero sized sources are rejected."""
    with pytest.raises(ValueError):
        detect_scale(0, 1080)
