"""Gamut-mapped swatch palette for the question card's gradient shader.

Every stop goes through :func:`to_gamut_hex`; clipping per pixel would band
at the gamut edge.  Dark questions get stronger offsets than light ones.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .gamut import Hex, OklchColor, to_gamut_hex

LOW_L_LIMIT = 0.05
HIGH_L_LIMIT = 0.88
DARKER_OFFSET = (0.0385, 0.014)  # at LOW_L_LIMIT, at HIGH_L_LIMIT
LIGHTER_OFFSET = (0.0375, 0.012)
L_CEILING = 0.9999


@dataclass(frozen=True)
class ShaderPalette:
    colors: List[Hex]  # lighter, base, darker, darkest
    background: Hex  # lightest

    def to_dict(self) -> dict:
        return {"shaderColors": list(self.colors), "shaderBack": self.background}


def map_range(
    value: float, in_min: float, in_max: float, out_min: float, out_max: float
) -> float:
    if value <= in_min:
        return out_min
    if value >= in_max:
        return out_max
    t = (value - in_min) / (in_max - in_min)
    return out_min + t * (out_max - out_min)


def _stop(color: OklchColor, dl: float, dc: float) -> Hex:
    l = max(0.0, min(L_CEILING, color.l + dl))
    c = max(0.0, color.c + dc)
    return to_gamut_hex(l, c, color.h)


def generate_shader_palette(color: OklchColor) -> ShaderPalette:
    darker = map_range(color.l, LOW_L_LIMIT, HIGH_L_LIMIT, *DARKER_OFFSET)
    lighter = map_range(color.l, LOW_L_LIMIT, HIGH_L_LIMIT, *LIGHTER_OFFSET)
    return ShaderPalette(
        colors=[
            _stop(color, lighter, -0.0012),
            to_gamut_hex(color.l, color.c, color.h),
            _stop(color, -darker, 0.0028),
            _stop(color, -2 * darker, 0.0056),
        ],
        background=_stop(color, 2 * lighter, -0.0032),
    )


__all__ = ["ShaderPalette", "generate_shader_palette", "map_range"]
