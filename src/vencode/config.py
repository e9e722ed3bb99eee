"""Configuration module for encoding settings."""

from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from . import default_config as defaults
from .core.video.errors import FatalConfigError
from .core.video.filters import CustomDenoise, PresetDenoise, parse_denoise
from .core.video.scaling import validate_modulus


class EncodeOptions(BaseModel):
    """Constraints applied to every encode."""

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        validate_default=True,
        str_strip_whitespace=True,
        frozen=True
    )

    # Geometry
    max_width: Optional[int] = Field(default=None, gt=0, description="Maximum output width")
    max_height: Optional[int] = Field(default=None, gt=0, description="Maximum output height")
    modulus: int = Field(default=defaults.MODULUS, description="Output dimension alignment")
    force_original_ar: bool = Field(
        default=False,
        description="Display with the stored aspect ratio, ignoring the DAR flag"
    )
    crop: bool = Field(default=False, description="Detect and crop black bars")
    denoise: Optional[Union[PresetDenoise, CustomDenoise]] = Field(
        default=None,
        description="hqdn3d preset name or a:b:c:d strengths"
    )

    # Video settings
    crf: int = Field(default=defaults.CRF, ge=0, le=51, description="x264 constant rate factor")
    video_bitrate: Optional[int] = Field(
        default=None,
        gt=0,
        description="Video bitrate in kbit/s (overrides crf)"
    )
    preset: str = Field(default=defaults.PRESET, min_length=1, description="x264 preset")
    profile: str = Field(default=defaults.PROFILE, min_length=1, description="H.264 profile")
    tune: Optional[str] = Field(default=None, description="x264 tune")
    level: str = Field(default=defaults.LEVEL, min_length=1, description="H.264 level")
    two_pass: bool = Field(default=False, description="Two-pass encode (needs video_bitrate)")
    threads: Optional[int] = Field(default=None, ge=0, description="Encoder threads")
    opencl: bool = Field(default=False, description="Enable x264 OpenCL lookahead")

    # Audio settings
    audio_bitrate: int = Field(
        default=defaults.AUDIO_BITRATE,
        ge=0,
        description="AAC bitrate in kbit/s, 0 copies the source audio"
    )

    print_command: bool = Field(default=False, description="Print commands instead of running them")

    @field_validator('modulus')
    @classmethod
    def _check_modulus(cls, value: int) -> int:
        try:
            return validate_modulus(value)
        except FatalConfigError as e:
            raise ValueError(e.message) from e

    @field_validator('denoise', mode='before')
    @classmethod
    def _parse_denoise(cls, value: Any) -> Any:
        try:
            return parse_denoise(value)
        except FatalConfigError as e:
            raise ValueError(e.message) from e

    @field_validator('tune')
    @classmethod
    def _empty_tune(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    @property
    def uses_two_pass(self) -> bool:
        """Two passes only make sense against a fixed bitrate."""
        return self.two_pass and self.video_bitrate is not None


class EncodeJob(BaseModel):
    """One input/output pair and the options to encode it with."""

    model_config = ConfigDict(frozen=True)

    input_path: Path
    output_path: Path
    options: EncodeOptions


def load_options(**raw: Any) -> EncodeOptions:
    """Build options from raw values, dropping unset (None) entries.

    Raises:
        FatalConfigError: If any value is invalid
    """
    values = {k: v for k, v in raw.items() if v is not None}
    try:
        return EncodeOptions(**values)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise FatalConfigError(f"Invalid encode options: {problems}", str(e)) from e
