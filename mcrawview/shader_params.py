"""Per-frame parameters for the raw-image fragment shader."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence, Tuple

from mcrawview.debuglog import log_to_file

Matrix3 = Tuple[Tuple[float, float, float], ...]

IDENTITY3: Matrix3 = ((1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0))

DEFAULT_SATURATION = 1.50

# Uniform-buffer layout: three int32, seven float32, padding to a 16-byte
# boundary, a column-major 4x4 float matrix, one float, then tail padding.
_UBO_FORMAT = "<3i7f8x16ff12x"
SHADER_PARAMS_SIZE = struct.calcsize(_UBO_FORMAT)

_CFA_TYPES = {"BGGR": 0, "RGGB": 1, "GBRG": 2, "GRBG": 3}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def cfa_type(pattern: str) -> int:
    """Shader code of a Bayer pattern name; unknown patterns map to BGGR (0)."""
    code = _CFA_TYPES.get(pattern.upper())
    if code is None:
        log_to_file(
            f"[Renderer_VK::getCfaType] Unknown CFA pattern: {pattern}. Defaulting to BGGR (0)."
        )
        return 0
    return code


@dataclass(frozen=True)
class ShaderParams:
    """Values written to the fragment shader's uniform buffer for one frame."""

    width: int
    height: int
    cfa: int
    exposure: float = 1.0
    black_level: float = 0.0
    white_level: float = 1.0
    inv_black_white_range: float = 1.0
    gain_r: float = 1.0
    gain_g: float = 1.0
    gain_b: float = 1.0
    ccm: Matrix3 = field(default=IDENTITY3)
    saturation_adjustment: float = DEFAULT_SATURATION

    def _ccm_columns(self) -> list:
        """The colour matrix widened to 4x4 and flattened column by column."""
        values = []
        for col in range(4):
            for row in range(4):
                if row < 3 and col < 3:
                    values.append(float(self.ccm[row][col]))
                else:
                    values.append(1.0 if row == col else 0.0)
        return values

    def pack(self) -> bytes:
        """Serialise to the uniform-buffer byte layout."""
        return struct.pack(
            _UBO_FORMAT,
            self.width,
            self.height,
            self.cfa,
            self.exposure,
            self.black_level,
            self.white_level,
            self.inv_black_white_range,
            self.gain_r,
            self.gain_g,
            self.gain_b,
            *self._ccm_columns(),
            self.saturation_adjustment,
        )


def _black_level(metadata: Mapping[str, Any], static_black: float) -> float:
    if "dynamicBlackLevel" not in metadata:
        return float(static_black)
    value = metadata["dynamicBlackLevel"]
    if isinstance(value, (list, tuple)):
        numbers = [float(v) for v in value if _is_number(v)]
        if numbers:
            return sum(numbers) / len(numbers)
        return float(static_black)
    if _is_number(value):
        return float(value)
    return float(static_black)


def _white_level(metadata: Mapping[str, Any], static_white: float) -> float:
    value = metadata.get("dynamicWhiteLevel")
    if _is_number(value):
        return float(value)
    return float(static_white)


def _as_shot_neutral(metadata: Mapping[str, Any]) -> Sequence[float]:
    value = metadata.get("asShotNeutral", [1.0, 1.0, 1.0])
    if isinstance(value, (list, tuple)) and len(value) >= 3 and all(_is_number(v) for v in value):
        return [float(v) for v in value]
    return [1.0, 1.0, 1.0]


def _color_matrix(metadata: Mapping[str, Any]) -> Matrix3:
    chosen: Optional[Sequence[Any]] = None
    for key in ("ColorMatrix2", "ColorMatrix"):
        candidate = metadata.get(key)
        if isinstance(candidate, (list, tuple)) and len(candidate) == 9:
            chosen = candidate
            break
    if chosen is None or not all(_is_number(v) for v in chosen):
        return IDENTITY3
    values = [float(v) for v in chosen]
    return tuple(tuple(values[row * 3:row * 3 + 3]) for row in range(3))


def build_shader_params(
    width: int,
    height: int,
    frame_metadata: Mapping[str, Any],
    static_black: float,
    static_white: float,
    cfa_type_override: int,
) -> ShaderParams:
    """Derive shader parameters from a frame's size and metadata."""
    if width <= 0 or height <= 0:
        log_to_file(
            f"[Renderer_VK::prepareAndUploadFrameData] Invalid dimensions {width}x{height}."
        )
        width = max(1, width)
        height = max(1, height)

    black = _black_level(frame_metadata, static_black)
    white = _white_level(frame_metadata, static_white)
    span = white - black
    inv_range = 1.0 if span <= 1e-5 else 1.0 / span

    asn = _as_shot_neutral(frame_metadata)
    gain_r = asn[1] / asn[0] if asn[0] > 1e-6 and asn[1] > 1e-6 else 1.0
    gain_b = asn[1] / asn[2] if asn[2] > 1e-6 and asn[1] > 1e-6 else 1.0

    return ShaderParams(
        width=width,
        height=height,
        cfa=cfa_type_override,
        exposure=1.0,
        black_level=black,
        white_level=white,
        inv_black_white_range=inv_range,
        gain_r=gain_r,
        gain_g=1.0,
        gain_b=gain_b,
        ccm=_color_matrix(frame_metadata),
        saturation_adjustment=DEFAULT_SATURATION,
    )