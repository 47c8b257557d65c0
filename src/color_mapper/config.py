"""Tunable defaults shared by the engines and the web app."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MapperConfig:
    # agglomerative merge: stop once the closest pair is this far apart
    cluster_threshold: float = 0.08
    # chroma is weighted against lightness in every (l, c) distance
    cluster_chroma_weight: float = 3.0
    prefix_chroma_weight: float = 2.5
    prefix_count: int = 6
    # rejection sampling attempts per question
    sampler_max_tries: int = 200
    # cleanup sweep only touches records older than this
    prune_max_age_days: float = 14.0
    # semantic map raster, in pixels
    chart_width: int = 240
    chart_height: int = 280


DEFAULT_CONFIG = MapperConfig()

__all__ = ["DEFAULT_CONFIG", "MapperConfig"]
