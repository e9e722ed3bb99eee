"""Audio encoder selection."""

from dataclasses import dataclass, field
from typing import Dict

from loguru import logger

from . import default_config as defaults


@dataclass(frozen=True)
class AudioStrategy:
    """How the audio track is written.

    Attributes:
        codec: Audio encoder name, or ``copy``
        options: FFmpeg output options for the audio stream
    """
    codec: str
    options: Dict[str, str] = field(default_factory=dict)

    @property
    def is_copy(self) -> bool:
        return self.codec == "copy"


def select_audio_options(backend, bitrate: int) -> AudioStrategy:
    """Pick the audio encoder for an encode.

    A bitrate of 0 copies the source stream. Otherwise the first available
    AAC encoder from ``AAC_ENCODERS`` is used, falling back to FFmpeg's
    built-in ``aac`` with the experimental compliance flag.

    Args:
        backend: Media backend that knows which encoders are compiled in
        bitrate: Audio bitrate in kbit/s

    Returns:
        Selected audio strategy
    """
    if bitrate == 0:
        logger.info("Audio: copying source stream")
        return AudioStrategy("copy", {'c:a': 'copy'})

    for codec in defaults.AAC_ENCODERS:
        if backend.has_encoder(codec):
            logger.info(f"Audio: {codec} at {bitrate}k")
            return AudioStrategy(codec, {'c:a': codec, 'b:a': f"{bitrate}k"})

    codec = defaults.FALLBACK_AAC_ENCODER
    logger.info(f"Audio: {codec} at {bitrate}k (no preferred AAC encoder available)")
    return AudioStrategy(codec, {'c:a': codec, 'b:a': f"{bitrate}k", 'strict': 'experimental'})
