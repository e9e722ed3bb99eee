"""Video filter chain and denoise settings."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, Optional, Tuple, Union

from vencode import default_config as defaults
from .errors import FatalConfigError


class DenoisePreset(str, Enum):
    """Named hqdn3d strengths."""
    WEAKEST = "weakest"
    WEAK = "weak"
    MEDIUM = "medium"
    STRONG = "strong"


@dataclass(frozen=True)
class PresetDenoise:
    """Denoise with one of the fixed presets."""
    preset: DenoisePreset

    @property
    def params(self) -> Tuple[int, int, int, int]:
        return defaults.DENOISE_PRESETS[self.preset.value]

    def to_filter(self) -> str:
        return "hqdn3d=" + ":".join(str(p) for p in self.params)


@dataclass(frozen=True)
class CustomDenoise:
    """Denoise with explicit hqdn3d strengths."""
    luma_spatial: int
    chroma_spatial: int
    luma_tmp: int
    chroma_tmp: int

    @property
    def params(self) -> Tuple[int, int, int, int]:
        return (self.luma_spatial, self.chroma_spatial, self.luma_tmp, self.chroma_tmp)

    def to_filter(self) -> str:
        return "hqdn3d=" + ":".join(str(p) for p in self.params)


Denoise = Union[PresetDenoise, CustomDenoise]

_CUSTOM_DENOISE = re.compile(r"^(\d+):(\d+):(\d+):(\d+)$")


def parse_denoise(value: Optional[str]) -> Optional[Denoise]:
    """Parse a denoise option.

    Args:
        value: A preset name, an ``a:b:c:d`` tuple of unsigned integers,
            or None for no denoising

    Returns:
        Parsed denoise setting, or None

    Raises:
        FatalConfigError: If the value is neither a preset nor a tuple
    """
    if value is None or isinstance(value, (PresetDenoise, CustomDenoise)):
        return value
    text = str(value).strip().lower()
    if not text:
        return None
    try:
        return PresetDenoise(DenoisePreset(text))
    except ValueError:
        pass
    match = _CUSTOM_DENOISE.match(text)
    if match:
        return CustomDenoise(*(int(g) for g in match.groups()))
    raise FatalConfigError(
        f"Invalid denoise setting: {value!r}",
        "expected one of {} or a:b:c:d".format(", ".join(p.value for p in DenoisePreset))
    )


class FilterStage(Enum):
    """Filter stages, declared in the order they are applied."""
    DEINTERLACE = "deinterlace"
    FORCED_DAR = "forced_dar"
    SCALE = "scale"
    CROP = "crop"
    DENOISE = "denoise"


class FilterChain:
    """Video filters keyed by stage.

    Stages can be set in any order; ``render`` always emits them in
    ``FilterStage`` declaration order.
    """

    def __init__(self):
        self._stages: Dict[FilterStage, str] = {}

    def set(self, stage: FilterStage, expr: Optional[str]) -> "FilterChain":
        if expr:
            self._stages[stage] = expr
        else:
            self._stages.pop(stage, None)
        return self

    def get(self, stage: FilterStage) -> Optional[str]:
        return self._stages.get(stage)

    def __iter__(self) -> Iterator[Tuple[FilterStage, str]]:
        for stage in FilterStage:
            if stage in self._stages:
                yield stage, self._stages[stage]

    def __bool__(self) -> bool:
        return bool(self._stages)

    def render(self) -> str:
        """Render the chain as an FFmpeg ``-vf`` argument."""
        return ",".join(expr for _, expr in self)
