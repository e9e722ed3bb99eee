"""H.264/AAC MP4 encoding, batch mirroring and chapter tools."""

from .config import EncodeOptions, load_options
from .encoder import VideoEncoder
from .batch import BatchWalker

__version__ = "0.1.0"

__all__ = [
    "EncodeOptions",
    "load_options",
    "VideoEncoder",
    "BatchWalker",
]
