"""Black bar detection utilities."""

import re
from typing import Optional

from loguru import logger

from vencode import default_config as defaults
from vencode.core.video.errors import CropValidationError, ProbeError
from vencode.core.video.types import CropBox, ScaleTarget, SourceMedia

CROP_PATTERN = re.compile(r"crop=(-?\d+):(-?\d+):(-?\d+):(-?\d+)")


def parse_crop_log(log: str) -> Optional[CropBox]:
    """Pick the crop rectangle out of a cropdetect log.

    cropdetect settles after the first frames, so the last ``crop=`` token
    is the one used.

    Args:
        log: FFmpeg diagnostic output

    Returns:
        The last crop found, or None
    """
    matches = CROP_PATTERN.findall(log)
    if not matches:
        return None
    w, h, x, y = (int(v) for v in matches[-1])
    logger.debug(f"Parsed {len(matches)} crop samples, using crop={w}:{h}:{x}:{y}")
    return CropBox(width=w, height=h, x=x, y=y)


def get_sample_offset(duration: Optional[float],
                      offset: float = defaults.CROP_SAMPLE_OFFSET) -> float:
    """Seek position for the crop sample; 0 when the file is too short."""
    if duration is None or duration <= offset:
        return 0.0
    return offset


def detect_crop(backend, media: SourceMedia, scale: ScaleTarget,
                frames: int = defaults.CROP_SAMPLE_FRAMES) -> Optional[CropBox]:
    """Detect black bars in the scaled frame.

    Args:
        backend: Media backend used to run the sample pass
        media: Probed source
        scale: Scale target applied before detection

    Returns:
        Crop to append to the filter chain, or None when nothing should be
        cropped
    """
    start = get_sample_offset(media.duration)
    filters = (
        f"{scale.to_filter()},"
        f"cropdetect=limit={defaults.CROP_LIMIT}:round={defaults.CROP_ROUND}:reset=0"
    )
    logger.info(f"Analyzing {media.path.name} for black bars at {start:.0f}s")
    try:
        log = backend.run_filter_pass(media.path, filters, start=start, frames=frames)
    except ProbeError as e:
        logger.warning(f"Crop detection failed for {media.path.name}: {e.message}")
        return None

    crop = parse_crop_log(log)
    if crop is None:
        logger.info("No crop detected")
        return None

    try:
        crop.validate(scale.width, scale.height)
    except CropValidationError as e:
        logger.warning(f"Ignoring crop {crop.to_ffmpeg_filter()}: {e.message} ({e.details})")
        return None

    if crop.covers(scale.width, scale.height):
        logger.info("No cropping needed - picture fills the frame")
        return None

    logger.info(f"Detected black bars - {crop.to_ffmpeg_filter()}")
    return crop
