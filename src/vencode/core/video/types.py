"""Common video analysis types."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from .errors import CropValidationError


@dataclass(frozen=True)
class SourceMedia:
    """Probed properties of a source file.

    Attributes:
        path: Probed file
        has_video: Whether a video stream is present
        has_audio: Whether an audio stream is present
        width: Stored width of the first video stream
        height: Stored height of the first video stream
        display_aspect_ratio: Display aspect ratio, if the file declares one
        duration: Container duration in seconds
        tags: Global container metadata
    """
    path: Path
    has_video: bool = False
    has_audio: bool = False
    width: int = 0
    height: int = 0
    display_aspect_ratio: Optional[float] = None
    duration: Optional[float] = None
    tags: Dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return self.has_video and self.has_audio

    @property
    def pixel_aspect(self) -> float:
        """Ratio between display and storage aspect, 1.0 for square pixels."""
        if not self.display_aspect_ratio or not self.width or not self.height:
            return 1.0
        return self.display_aspect_ratio / (self.width / self.height)


@dataclass(frozen=True)
class ScaleTarget:
    """Scale box computed for a source.

    The picture is scaled to ``picture_width`` x ``picture_height`` and
    padded into a ``width`` x ``height`` box at (``x``, ``y``).
    """
    width: int
    height: int
    x: int = 0
    y: int = 0
    picture_width: int = 0
    picture_height: int = 0

    def __post_init__(self):
        # Unpadded targets carry the box size as the picture size
        if not self.picture_width:
            object.__setattr__(self, 'picture_width', self.width)
        if not self.picture_height:
            object.__setattr__(self, 'picture_height', self.height)

    @property
    def padded(self) -> bool:
        return (self.picture_width, self.picture_height) != (self.width, self.height)

    def to_filter(self) -> str:
        """Convert to an FFmpeg scale (and pad) filter string."""
        expr = f"scale={self.picture_width}:{self.picture_height},setsar=1"
        if self.padded:
            expr += f",pad={self.width}:{self.height}:{self.x}:{self.y}"
        return expr

    def __str__(self) -> str:
        return f"{self.width}:{self.height}:{self.x}:{self.y}"


@dataclass(frozen=True)
class CropBox:
    """Crop rectangle retained from a scaled frame.

    Attributes:
        width: Width after cropping
        height: Height after cropping
        x: X offset for cropping
        y: Y offset for cropping
    """
    width: int
    height: int
    x: int = 0
    y: int = 0

    def validate(self, frame_width: int, frame_height: int) -> None:
        """Validate crop values against the scaled frame.

        Args:
            frame_width: Width of the frame the crop applies to
            frame_height: Height of the frame the crop applies to

        Raises:
            CropValidationError: If the crop does not fit inside the frame
        """
        args = (frame_width, frame_height, self.width, self.height, self.x, self.y)
        if self.width <= 0 or self.height <= 0:
            raise CropValidationError("Crop dimensions must be positive", *args)
        if self.x < 0 or self.y < 0:
            raise CropValidationError("Crop offsets must be non-negative", *args)
        if self.x + self.width > frame_width:
            raise CropValidationError("Crop extends past the frame width", *args)
        if self.y + self.height > frame_height:
            raise CropValidationError("Crop extends past the frame height", *args)

    def covers(self, frame_width: int, frame_height: int) -> bool:
        """Whether the crop keeps the whole frame."""
        return (self.width, self.height, self.x, self.y) == (frame_width, frame_height, 0, 0)

    def to_ffmpeg_filter(self) -> str:
        return f"crop={self.width}:{self.height}:{self.x}:{self.y}"
