"""Zoned rejection sampling of question colours for a fixed hue.

One uniform draw picks a zone by cumulative weight; inside the zone we throw
points uniformly at the (l, c) rectangle and keep the first one under the
gamut edge.  Accepted points are therefore uniform over the displayable part
of the rectangle instead of piling up on its boundary.

Zone constants have moved between design iterations, so they live in
:data:`ZONES` rather than inline.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .config import DEFAULT_CONFIG
from .gamut import Degrees, OklchColor, max_chroma

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Zone:
    name: str
    weight: float
    l_range: Tuple[float, float]
    c_range: Tuple[float, float]
    fallback: Tuple[float, float]  # (l, c) used once every retry is rejected


ZONES: Tuple[Zone, ...] = (
    Zone("pale", 0.14, (0.85, 0.99), (0.00, 0.27), (0.95, 0.02)),
    Zone("dark", 0.06, (0.05, 0.30), (0.00, 0.18), (0.15, 0.02)),
    Zone("gray", 0.35, (0.22, 0.92), (0.00, 0.15), (0.60, 0.06)),
    # upper l bound reaches 0.98 for the bright, saturated yellow-greens
    Zone("vivid", 0.45, (0.20, 0.98), (0.06, 0.32), (0.60, 0.10)),
)


@dataclass(frozen=True)
class Sample:
    color: OklchColor
    zone: Zone
    attempts: int
    fell_back: bool


def pick_zone(u: float, zones: Tuple[Zone, ...] = ZONES) -> Zone:
    acc = 0.0
    for zone in zones:
        acc += zone.weight
        if u < acc:
            return zone
    return zones[-1]


@dataclass
class ColorSampler:
    rng: Optional[np.random.Generator] = None
    zones: Tuple[Zone, ...] = ZONES
    max_tries: int = DEFAULT_CONFIG.sampler_max_tries

    def __post_init__(self) -> None:
        if self.rng is None:
            self.rng = np.random.default_rng()

    def sample(self, hue: Degrees) -> Sample:
        zone = pick_zone(float(self.rng.random()), self.zones)
        return self.sample_zone(zone, hue)

    def sample_zone(self, zone: Zone, hue: Degrees) -> Sample:
        l_lo, l_hi = zone.l_range
        c_lo, c_hi = zone.c_range
        for attempt in range(1, self.max_tries + 1):
            l = l_lo + float(self.rng.random()) * (l_hi - l_lo)
            c = c_lo + float(self.rng.random()) * (c_hi - c_lo)
            if c <= max_chroma(l, hue):
                return Sample(OklchColor(l, c, hue), zone, attempt, False)

        log.warning(
            "sampler exhausted %d tries in zone '%s' at hue %s; using fallback",
            self.max_tries,
            zone.name,
            hue,
        )
        l, c = zone.fallback
        return Sample(OklchColor(l, c, hue), zone, self.max_tries, True)


def generate_random_color(
    hue: Degrees, rng: Optional[np.random.Generator] = None
) -> OklchColor:
    return ColorSampler(rng=rng).sample(hue).color


__all__ = [
    "ZONES",
    "ColorSampler",
    "Sample",
    "Zone",
    "generate_random_color",
    "pick_zone",
]
