"""OKLCH ⇄ sRGB gamut engine.

All functions are total over finite real input and never clamp their
arguments.  Scalar paths use :mod:`math` (they sit inside tight sampling
loops); the ``*_array`` helpers use NumPy for whole boundary curves.

Conversion (Björn Ottosson, MIT licence)::

    (l, c, h) -> (L, a, b)          polar -> cartesian
    (L, a, b) -> (l', m', s')       _LAB_TO_LMS
    (l', m', s') ** 3               cube
    (l, m, s) -> linear sRGB        _LMS_TO_RGB
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Literal, Tuple

import numpy as np
from coloraide import Color

Hex = str
Lightness = float
Chroma = float
Degrees = float
HexMode = Literal["clip", "gamut"]

GAMUT_EPS = 1e-4
CHROMA_SEARCH_HI = 0.4
CHROMA_SEARCH_ITERS = 15
DEGENERATE_L = 0.001

_LAB_TO_LMS = np.array(
    [
        [1.0, 0.3963377774, 0.2158037573],
        [1.0, -0.1055613458, -0.0638541728],
        [1.0, -0.0894841775, -1.2914855480],
    ]
)
_LMS_TO_RGB = np.array(
    [
        [4.0767416621, -3.3077115913, 0.2309699292],
        [-1.2684380046, 2.6097574011, -0.3413193965],
        [-0.0041960863, -0.7034186147, 1.7076147010],
    ]
)


@dataclass(frozen=True)
class OklchColor:
    l: Lightness
    c: Chroma
    h: Degrees

    def to_dict(self) -> dict:
        return {"l": self.l, "c": self.c, "h": self.h}

    @classmethod
    def from_dict(cls, d) -> "OklchColor":
        """Parse and sanitise a colour arriving from outside the process."""
        try:
            l, c, h = float(d["l"]), float(d["c"]), float(d["h"])
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"invalid color: {d!r}") from e
        if not all(math.isfinite(v) for v in (l, c, h)):
            raise ValueError(f"color coordinates must be finite: {d!r}")
        if not 0.0 <= l <= 1.0:
            raise ValueError(f"lightness {l} outside [0, 1]")
        if c < 0.0:
            raise ValueError(f"chroma {c} must not be negative")
        return cls(l, c, h)


# --- scalar conversion ------------------------------------------------------


def to_linear_rgb(l: Lightness, c: Chroma, h: Degrees) -> Tuple[float, float, float]:
    h_rad = math.radians(h)
    a = c * math.cos(h_rad)
    b = c * math.sin(h_rad)

    l_ = l + 0.3963377774 * a + 0.2158037573 * b
    m_ = l - 0.1055613458 * a - 0.0638541728 * b
    s_ = l - 0.0894841775 * a - 1.2914855480 * b

    l3 = l_ * l_ * l_
    m3 = m_ * m_ * m_
    s3 = s_ * s_ * s_

    r = 4.0767416621 * l3 - 3.3077115913 * m3 + 0.2309699292 * s3
    g = -1.2684380046 * l3 + 2.6097574011 * m3 - 0.3413193965 * s3
    bl = -0.0041960863 * l3 - 0.7034186147 * m3 + 1.7076147010 * s3
    return r, g, bl


def is_displayable(l: Lightness, c: Chroma, h: Degrees) -> bool:
    lo, hi = -GAMUT_EPS, 1.0 + GAMUT_EPS
    return all(lo <= v <= hi for v in to_linear_rgb(l, c, h))


def max_chroma(l: Lightness, h: Degrees) -> Chroma:
    """Largest displayable chroma at (l, h), by bisection over [0, 0.4]."""
    if l <= DEGENERATE_L or l >= 1.0 - DEGENERATE_L:
        return 0.0
    lo, hi = 0.0, CHROMA_SEARCH_HI
    for _ in range(CHROMA_SEARCH_ITERS):
        mid = 0.5 * (lo + hi)
        if is_displayable(l, mid, h):
            lo = mid
        else:
            hi = mid
    return lo


# --- hex output -------------------------------------------------------------


def _compand(v: float) -> float:
    # IEC 61966-2-1, input clamped to [0, 1]
    x = max(0.0, min(1.0, v))
    return 12.92 * x if x <= 0.0031308 else 1.055 * x ** (1 / 2.4) - 0.055


def _to_u8(v: float) -> int:
    # round half up, like Math.round for non-negative input
    return int(math.floor(_compand(v) * 255.0 + 0.5))


def to_hex(l: Lightness, c: Chroma, h: Degrees) -> Hex:
    """Per-channel clipped hex.  Out-of-gamut input may shift hue."""
    r, g, b = (_to_u8(v) for v in to_linear_rgb(l, c, h))
    return f"#{r:02X}{g:02X}{b:02X}"


def to_gamut_hex(l: Lightness, c: Chroma, h: Degrees) -> Hex:
    """Hex with chroma reduced to the gamut edge; keeps l and h exactly."""
    if is_displayable(l, c, h):
        return to_hex(l, c, h)
    return to_hex(l, max_chroma(l, h), h)


def to_display_hex(l: Lightness, c: Chroma, h: Degrees, mode: HexMode = "gamut") -> Hex:
    if mode == "clip":
        return to_hex(l, c, h)
    if mode == "gamut":
        return to_gamut_hex(l, c, h)
    raise ValueError(f"unknown hex mode '{mode}'")


def to_css(color: OklchColor) -> str:
    return Color("oklch", [color.l, color.c, color.h]).to_string(
        percent=[True, False, False]
    )


# --- gamut shape ------------------------------------------------------------


def peak_lightness(h: Degrees) -> Tuple[Lightness, Chroma]:
    """Coarse (0.05 step) search for the lightness with the widest gamut."""
    peak_l, peak_c = 0.5, 0.0
    for i in range(18):
        l = round(0.10 + 0.05 * i, 2)
        c = max_chroma(l, h)
        if c > peak_c:
            peak_l, peak_c = l, c
    return peak_l, peak_c


def linear_rgb_array(l: np.ndarray, c: np.ndarray, h: Degrees) -> np.ndarray:
    """Vectorised :func:`to_linear_rgb`; returns shape ``(..., 3)``."""
    h_rad = math.radians(h)
    l = np.asarray(l, dtype=np.float64)
    c = np.asarray(c, dtype=np.float64)
    a, b = c * math.cos(h_rad), c * math.sin(h_rad)
    lab = np.stack(np.broadcast_arrays(l, a, b), axis=-1)
    lms = (lab @ _LAB_TO_LMS.T) ** 3
    return lms @ _LMS_TO_RGB.T


def max_chroma_array(l: np.ndarray, h: Degrees) -> np.ndarray:
    """Vectorised :func:`max_chroma` (same bisection and bounds)."""
    l = np.asarray(l, dtype=np.float64)
    lo = np.zeros_like(l)
    hi = np.full_like(l, CHROMA_SEARCH_HI)
    for _ in range(CHROMA_SEARCH_ITERS):
        mid = 0.5 * (lo + hi)
        rgb = linear_rgb_array(l, mid, h)
        ok = np.all((rgb >= -GAMUT_EPS) & (rgb <= 1.0 + GAMUT_EPS), axis=-1)
        lo = np.where(ok, mid, lo)
        hi = np.where(ok, hi, mid)
    degenerate = (l <= DEGENERATE_L) | (l >= 1.0 - DEGENERATE_L)
    return np.where(degenerate, 0.0, lo)


def gamut_boundary(h: Degrees) -> List[Tuple[Chroma, Lightness]]:
    """Closed ``(c, l)`` polyline outlining the displayable wedge.

    Starts at black and jumps straight to l=0.10, skipping the hook-shaped
    edge near black.
    """
    ls = np.round(np.arange(10, 101) / 100.0, 2)
    cs = max_chroma_array(ls, h)
    points = [(0.0, 0.0)]
    points.extend((float(c), float(l)) for c, l in zip(cs, ls))
    points.append((0.0, 1.0))
    points.append((0.0, 0.0))
    return points


__all__ = [
    "GAMUT_EPS",
    "OklchColor",
    "gamut_boundary",
    "is_displayable",
    "linear_rgb_array",
    "max_chroma",
    "max_chroma_array",
    "peak_lightness",
    "to_css",
    "to_display_hex",
    "to_gamut_hex",
    "to_hex",
    "to_linear_rgb",
]
