"""Video geometry, crop detection and filter chains."""

from .cropping import detect_crop, parse_crop_log
from .errors import (
    CropValidationError,
    EncodeError,
    FatalConfigError,
    FatalInputError,
    MediaBackendError,
    ProbeError,
    TranscodeError,
)
from .filters import FilterChain, FilterStage, parse_denoise
from .scaling import detect_scale, validate_modulus
from .types import CropBox, ScaleTarget, SourceMedia

__all__ = [
    'CropBox',
    'CropValidationError',
    'EncodeError',
    'FatalConfigError',
    'FatalInputError',
    'FilterChain',
    'FilterStage',
    'MediaBackendError',
    'ProbeError',
    'ScaleTarget',
    'SourceMedia',
    'TranscodeError',
    'detect_crop',
    'detect_scale',
    'parse_crop_log',
    'parse_denoise',
    'validate_modulus',
]
