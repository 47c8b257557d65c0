"""Synthetic seed records so the semantic map is not empty on day one.

Clusters are placed relative to each hue's gamut tip, so the spread follows
the shape of the displayable wedge rather than fixed coordinates.
"""

from __future__ import annotations

from typing import List, Optional

import numpy as np

from .catalog import HUES, HueDefinition
from .gamut import OklchColor, max_chroma, peak_lightness
from .models import ColorEntry, now_ms

SEED_PER_ANCHOR = 2


def tip_prefix(peak_l: float, peak_c: float) -> str:
    if peak_l >= 0.88:
        return "螢光"
    if peak_l >= 0.80:
        return "亮"
    if peak_l <= 0.35:
        return "濃"
    if peak_c > 0.28:
        return "豔"
    if peak_c > 0.22:
        return "鮮"
    return "正"


def _jittered(
    rng: np.random.Generator,
    hue: HueDefinition,
    target_l: float,
    l_spread: float,
    chroma_factor: float,
    c_spread: float,
    prefix: str,
    timestamp: int,
) -> ColorEntry:
    l = target_l + (rng.random() - 0.5) * l_spread
    l = float(min(0.95, max(0.05, l)))
    edge = max_chroma(l, hue.angle)
    c = edge * chroma_factor + (rng.random() - 0.5) * edge * c_spread
    c = float(max(0.0, min(edge - 0.001, c)))
    return ColorEntry(
        color=OklchColor(l, c, hue.angle),
        name=f"{prefix}{hue.name_zh}",
        timestamp=timestamp,
        is_seed=True,
    )


def seed_hue(
    hue: HueDefinition, rng: np.random.Generator, timestamp: Optional[int] = None
) -> List[ColorEntry]:
    ts = now_ms() if timestamp is None else timestamp
    peak_l, peak_c = peak_lightness(hue.angle)
    anchors = (
        # target l, l spread, chroma factor, chroma spread, prefix
        (peak_l, 0.05, 0.9, 0.05, tip_prefix(peak_l, peak_c)),
        (peak_l + (0.98 - peak_l) * 0.5, 0.05, 0.4, 0.1, "淺"),
        (peak_l * 0.5, 0.05, 0.5, 0.1, "深"),
        (peak_l, 0.1, 0.20, 0.05, "霧"),
    )
    return [
        _jittered(rng, hue, tl, ls, cf, cs, prefix, ts)
        for tl, ls, cf, cs, prefix in anchors
        for _ in range(SEED_PER_ANCHOR)
    ]


def generate_seed_data(rng: Optional[np.random.Generator] = None) -> List[ColorEntry]:
    rng = rng or np.random.default_rng()
    ts = now_ms()
    out: List[ColorEntry] = []
    for hue in HUES:
        out.extend(seed_hue(hue, rng, ts))
    return out


__all__ = ["SEED_PER_ANCHOR", "generate_seed_data", "seed_hue", "tip_prefix"]
