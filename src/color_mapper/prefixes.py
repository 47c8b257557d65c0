from __future__ import annotations

import math
from typing import List, Sequence

from .catalog import SEMANTIC_SPECS, SemanticSpec
from .config import DEFAULT_CONFIG
from .gamut import OklchColor


def prefix_distance(
    spec: SemanticSpec,
    color: OklchColor,
    chroma_weight: float = DEFAULT_CONFIG.prefix_chroma_weight,
) -> float:
    # anchors span far less chroma than lightness, hence the weight
    dl = spec.l - color.l
    dc = (spec.c - color.c) * chroma_weight
    return math.sqrt(dl * dl + dc * dc)


def rank_prefixes(
    color: OklchColor,
    specs: Sequence[SemanticSpec] = SEMANTIC_SPECS,
    chroma_weight: float = DEFAULT_CONFIG.prefix_chroma_weight,
) -> List[SemanticSpec]:
    """All anchors, nearest first; ties keep catalog order."""
    return sorted(specs, key=lambda s: prefix_distance(s, color, chroma_weight))


def suggest_prefixes(
    color: OklchColor,
    k: int = DEFAULT_CONFIG.prefix_count,
    specs: Sequence[SemanticSpec] = SEMANTIC_SPECS,
    chroma_weight: float = DEFAULT_CONFIG.prefix_chroma_weight,
) -> List[str]:
    if k > len(specs):
        raise ValueError(f"k={k} exceeds the {len(specs)} available prefixes")
    return [s.prefix for s in rank_prefixes(color, specs, chroma_weight)[:k]]


__all__ = ["prefix_distance", "rank_prefixes", "suggest_prefixes"]
