"""Transcoding error types."""

from typing import List, Optional, Sequence


class TranscodeError(Exception):
    """Base class for transcoding errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        """Initialize error.

        Args:
            message: Error message
            details: Optional technical details
        """
        self.message = message
        self.details = details
        super().__init__(message)


class FatalConfigError(TranscodeError):
    """Invalid option values or a missing encoder binary."""
    pass


class FatalInputError(TranscodeError):
    """Unusable source or destination paths."""
    pass


class MediaBackendError(TranscodeError):
    """Error talking to ffmpeg or ffprobe."""
    pass


class ProbeError(MediaBackendError):
    """Error probing a media file."""

    def __init__(self, message: str, stderr: Optional[str] = None):
        super().__init__(message, stderr)
        self.stderr = stderr


class EncodeError(MediaBackendError):
    """Encoder exited with a non-zero status."""

    def __init__(self, message: str, cmd: Optional[Sequence[str]] = None,
                 returncode: Optional[int] = None, stderr: Optional[str] = None):
        """Initialize error.

        Args:
            message: Error message
            cmd: Encoder command that failed
            returncode: Exit status of the encoder
            stderr: Encoder error output
        """
        details = f"Command: {' '.join(cmd)}\nError: {stderr}" if cmd else stderr
        super().__init__(message, details)
        self.cmd: Optional[List[str]] = list(cmd) if cmd else None
        self.returncode = returncode
        self.stderr = stderr


class CropValidationError(TranscodeError):
    """Error validating crop values."""

    def __init__(self, message: str, frame_width: int, frame_height: int,
                 crop_width: int, crop_height: int, x_offset: int, y_offset: int):
        """Initialize error.

        Args:
            message: Error message
            frame_width: Scaled frame width
            frame_height: Scaled frame height
            crop_width: Proposed crop width
            crop_height: Proposed crop height
            x_offset: Proposed X offset
            y_offset: Proposed Y offset
        """
        details = (
            f"Frame: {frame_width}x{frame_height}, "
            f"Crop: {crop_width}x{crop_height}, "
            f"Offset: ({x_offset}, {y_offset})"
        )
        super().__init__(message, details)
        self.frame_width = frame_width
        self.frame_height = frame_height
        self.crop_width = crop_width
        self.crop_height = crop_height
        self.x_offset = x_offset
        self.y_offset = y_offset
