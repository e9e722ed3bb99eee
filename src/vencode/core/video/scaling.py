"""Scale box computation."""

from typing import Optional

from loguru import logger

from vencode import default_config as defaults
from .errors import FatalConfigError
from .types import ScaleTarget


def validate_modulus(modulus: int) -> int:
    """Check that a modulus is one the encoder can align to.

    Raises:
        FatalConfigError: If the modulus is not 2, 4, 8 or 16
    """
    if modulus not in defaults.VALID_MODULI:
        raise FatalConfigError(
            f"Invalid modulus: {modulus}",
            "expected one of " + ", ".join(str(m) for m in defaults.VALID_MODULI)
        )
    return modulus


def _floor(value: float, modulus: int) -> int:
    return max(modulus, int(value) // modulus * modulus)


def detect_scale(width: int, height: int, aspect: float = 1.0,
                 max_width: Optional[int] = None, max_height: Optional[int] = None,
                 modulus: int = defaults.MODULUS) -> ScaleTarget:
    """Compute the scale box for a source.

    The display size is the stored size with the pixel aspect applied to
    one axis. With a single maximum the other side follows the display
    ratio. With both, the picture follows ``max_width`` and the requested
    box is a floor: the result is never smaller than either, and the
    difference becomes padding.

    Args:
        width: Stored source width
        height: Stored source height
        aspect: Pixel aspect (display ratio / storage ratio)
        max_width: Optional requested width
        max_height: Optional requested height
        modulus: Alignment for every output dimension

    Returns:
        Scale target with dimensions floored to the modulus

    Raises:
        FatalConfigError: If the modulus is invalid
        ValueError: If the source dimensions are not positive
    """
    validate_modulus(modulus)
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid source dimensions: {width}x{height}")
    if not aspect or aspect <= 0:
        aspect = 1.0

    if aspect >= 1:
        display_w, display_h = width * aspect, float(height)
    else:
        display_w, display_h = float(width), height / aspect
    ratio = display_w / display_h
    logger.debug(f"Display size {display_w:.1f}x{display_h:.1f} (aspect {aspect:.4f})")

    if max_width and max_height:
        pic_w, pic_h = float(max_width), max_width / ratio
        box_w, box_h = max(pic_w, max_width), max(pic_h, max_height)
    elif max_width:
        pic_w, pic_h = float(max_width), max_width / ratio
        box_w, box_h = pic_w, pic_h
    elif max_height:
        pic_w, pic_h = max_height * ratio, float(max_height)
        box_w, box_h = pic_w, pic_h
    else:
        pic_w, pic_h = display_w, display_h
        box_w, box_h = pic_w, pic_h

    pic_w, pic_h = _floor(pic_w, modulus), _floor(pic_h, modulus)
    box_w, box_h = _floor(box_w, modulus), _floor(box_h, modulus)
    target = ScaleTarget(
        width=box_w,
        height=box_h,
        x=(box_w - pic_w) // 2,
        y=(box_h - pic_h) // 2,
        picture_width=pic_w,
        picture_height=pic_h,
    )
    logger.debug(f"Scale target {target} (picture {pic_w}x{pic_h}, modulus {modulus})")
    return target
