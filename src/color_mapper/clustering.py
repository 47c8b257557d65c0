"""Semantic map clustering.

Accepted names for one hue are grouped by exact name, then merged
agglomeratively in weighted (l, c) space until no two clusters are closer
than the threshold.  Each survivor is labelled by its most common name.

The territory partition that the chart draws is a nearest-centroid raster
in *projected screen* coordinates, not in the weighted clustering metric.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import numpy as np

from .catalog import MAX_CHROMA
from .config import DEFAULT_CONFIG
from .gamut import Degrees
from .models import ColorEntry


@dataclass(frozen=True)
class NameShare:
    name: str
    count: int
    percentage: int

    def to_dict(self) -> dict:
        return {"name": self.name, "count": self.count, "percentage": self.percentage}


@dataclass(frozen=True)
class SemanticCluster:
    display_label: str
    l: float
    c: float
    total_votes: int
    composition: Tuple[NameShare, ...]

    def to_dict(self) -> dict:
        return {
            "displayLabel": self.display_label,
            "l": self.l,
            "c": self.c,
            "totalVotes": self.total_votes,
            "composition": [s.to_dict() for s in self.composition],
        }


@dataclass
class _Group:
    names: List[Tuple[str, int]]
    l: float
    c: float
    votes: int


def _distance(a: _Group, b: _Group, chroma_weight: float) -> float:
    dl = a.l - b.l
    dc = (a.c - b.c) * chroma_weight
    return math.sqrt(dl * dl + dc * dc)


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def group_by_name(entries: Iterable[ColorEntry]) -> List[_Group]:
    buckets: dict[str, List[ColorEntry]] = {}
    for e in entries:
        buckets.setdefault(e.name, []).append(e)
    return [
        _Group(
            names=[(name, len(members))],
            l=sum(m.color.l for m in members) / len(members),
            c=sum(m.color.c for m in members) / len(members),
            votes=len(members),
        )
        for name, members in buckets.items()
    ]


def merge_groups(
    groups: List[_Group],
    threshold: float = DEFAULT_CONFIG.cluster_threshold,
    chroma_weight: float = DEFAULT_CONFIG.cluster_chroma_weight,
) -> List[_Group]:
    # O(n^2) pair scan per merge; n is distinct names for one hue
    groups = list(groups)
    while len(groups) > 1:
        best = math.inf
        pair = (-1, -1)
        for i in range(len(groups)):
            for j in range(i + 1, len(groups)):
                d = _distance(groups[i], groups[j], chroma_weight)
                if d < best:
                    best, pair = d, (i, j)
        if best >= threshold:
            break

        i, j = pair
        a, b = groups[i], groups[j]
        votes = a.votes + b.votes
        merged = _Group(
            names=a.names + b.names,
            l=(a.l * a.votes + b.l * b.votes) / votes,
            c=(a.c * a.votes + b.c * b.votes) / votes,
            votes=votes,
        )
        del groups[j]
        del groups[i]
        groups.append(merged)
    return groups


def _finalize(group: _Group) -> SemanticCluster:
    ranked = sorted(group.names, key=lambda nc: nc[1], reverse=True)
    composition = tuple(
        NameShare(name, count, _round_half_up(100.0 * count / group.votes))
        for name, count in ranked
    )
    return SemanticCluster(
        display_label=ranked[0][0],
        l=group.l,
        c=group.c,
        total_votes=group.votes,
        composition=composition,
    )


def compute_clusters(
    entries: Iterable[ColorEntry],
    hue: Optional[Degrees] = None,
    threshold: float = DEFAULT_CONFIG.cluster_threshold,
    chroma_weight: float = DEFAULT_CONFIG.cluster_chroma_weight,
) -> List[SemanticCluster]:
    """Cluster the accepted records (optionally only those at ``hue``).

    Suspicious records never take part.  Recomputed from scratch each call.
    """
    accepted = [
        e for e in entries if not e.is_suspicious and (hue is None or e.color.h == hue)
    ]
    if not accepted:
        return []
    groups = merge_groups(group_by_name(accepted), threshold, chroma_weight)
    return [_finalize(g) for g in groups]


# --- territory partition ----------------------------------------------------


def project_centroids(
    clusters: List[SemanticCluster],
    width: int,
    height: int,
    max_chroma: float = MAX_CHROMA,
) -> np.ndarray:
    """Chart pixel ``(x, y)`` per cluster; chroma runs right, lightness up."""
    if not clusters:
        return np.empty((0, 2))
    c = np.array([k.c for k in clusters], dtype=np.float64)
    l = np.array([k.l for k in clusters], dtype=np.float64)
    return np.column_stack([c / max_chroma * width, (1.0 - l) * height])


def territory_map(
    clusters: List[SemanticCluster],
    width: int = DEFAULT_CONFIG.chart_width,
    height: int = DEFAULT_CONFIG.chart_height,
    max_chroma: float = MAX_CHROMA,
) -> np.ndarray:
    """Index of the nearest projected centroid for every pixel centre.

    Returns an ``int`` array of shape ``(height, width)``; ``-1`` everywhere
    when there are no clusters.  Equidistant pixels go to the lower index.
    """
    if not clusters:
        return np.full((height, width), -1, dtype=int)
    sites = project_centroids(clusters, width, height, max_chroma)
    ys, xs = np.mgrid[0:height, 0:width] + 0.5
    dx = xs[..., None] - sites[:, 0]
    dy = ys[..., None] - sites[:, 1]
    return np.argmin(dx * dx + dy * dy, axis=-1)


__all__ = [
    "NameShare",
    "SemanticCluster",
    "compute_clusters",
    "group_by_name",
    "merge_groups",
    "project_centroids",
    "territory_map",
]
