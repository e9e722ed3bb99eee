"""Default configuration values."""

import os
import shutil
from pathlib import Path


# Try $VENCODE_FFMPEG, then $HOME/ffmpeg, then the system binaries
HOME_FFMPEG_DIR = Path.home() / "ffmpeg"


def _find_binary(name: str) -> Path:
    override = os.getenv(f"VENCODE_{name.upper()}")
    if override:
        return Path(override)
    local = HOME_FFMPEG_DIR / name
    if local.exists():
        return local
    return Path(shutil.which(name) or name)


FFMPEG = _find_binary("ffmpeg")
FFPROBE = _find_binary("ffprobe")

# x264 video settings
VIDEO_CODEC = "libx264"
CRF = 19
PRESET = "slow"
PROFILE = "high"
LEVEL = "4.1"

# Audio settings, bitrate in kbit/s (0 copies the source stream)
AUDIO_BITRATE = 256
AAC_ENCODERS = ("aac_at", "libfdk_aac")  # preferred, in order
FALLBACK_AAC_ENCODER = "aac"

# Geometry
MODULUS = 16
VALID_MODULI = (2, 4, 8, 16)

# Crop detection
CROP_SAMPLE_OFFSET = 60.0  # seconds into the file
CROP_SAMPLE_FRAMES = 10
CROP_LIMIT = 24  # luma threshold
CROP_ROUND = 8

# hqdn3d parameters: luma_spatial:chroma_spatial:luma_tmp:chroma_tmp
DENOISE_PRESETS = {
    "weakest": (1, 1, 2, 2),
    "weak": (2, 1, 2, 3),
    "medium": (3, 2, 2, 3),
    "strong": (7, 7, 5, 5),
}

# Output
OUTPUT_SUFFIX = "-encoded"
OUTPUT_EXTENSION = ".mp4"
OUTPUT_FORMAT = "mp4"

# Logging
LOG_LEVEL = os.getenv("VENCODE_LOG_LEVEL", "INFO")
