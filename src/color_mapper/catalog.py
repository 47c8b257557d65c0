"""Fixed catalogs: the 18 question hues and the semantic prefix anchors.

Both tables are tuples of frozen dataclasses so nothing can mutate them at
runtime.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

Degrees = float

MAX_CHROMA = 0.32  # chart x-axis limit


@dataclass(frozen=True)
class HueDefinition:
    angle: Degrees
    id: str
    name_en: str
    name_zh: str

    def to_dict(self) -> dict:
        return {
            "angle": self.angle,
            "id": self.id,
            "nameEN": self.name_en,
            "nameZH": self.name_zh,
        }


HUES: Tuple[HueDefinition, ...] = (
    HueDefinition(5, "rose", "Rose", "玫瑰"),
    HueDefinition(25, "red", "Red", "紅"),
    HueDefinition(45, "pumpkin", "Pumpkin", "柿"),
    HueDefinition(65, "orange", "Orange", "橘"),
    HueDefinition(85, "gold", "Gold", "金"),
    HueDefinition(105, "yellow", "Yellow", "黃"),
    HueDefinition(125, "lime", "Lime", "檸"),
    HueDefinition(145, "green", "Green", "綠"),
    HueDefinition(165, "mint", "Mint", "薄荷"),
    HueDefinition(185, "teal", "Teal", "湖水"),
    HueDefinition(205, "cyan", "Cyan", "青"),
    HueDefinition(225, "sky", "Sky", "天藍"),
    HueDefinition(245, "blue", "Blue", "藍"),
    HueDefinition(265, "sapphire", "Sapphire", "寶藍"),
    HueDefinition(285, "indigo", "Indigo", "靛"),
    HueDefinition(305, "purple", "Purple", "紫"),
    HueDefinition(325, "magenta", "Magenta", "洋紅"),
    HueDefinition(345, "pink", "Pink", "桃"),
)


def hue_by_angle(angle: Degrees) -> HueDefinition:
    for hue in HUES:
        if hue.angle == angle:
            return hue
    raise ValueError(f"no catalog hue at {angle}°")


def hue_by_id(hue_id: str) -> HueDefinition:
    for hue in HUES:
        if hue.id == hue_id:
            return hue
    raise ValueError(f"unknown hue id '{hue_id}'")


@dataclass(frozen=True)
class SemanticSpec:
    """Idealised (l, c) centroid of a descriptive prefix word."""

    prefix: str
    l: float
    c: float
    desc: str


SEMANTIC_SPECS: Tuple[SemanticSpec, ...] = (
    # grayscale / neutral
    SemanticSpec("白", 0.96, 0.01, "White"),
    SemanticSpec("淺灰", 0.85, 0.015, "Light Gray"),
    SemanticSpec("灰", 0.60, 0.015, "Gray"),
    SemanticSpec("深灰", 0.35, 0.015, "Dark Gray"),
    SemanticSpec("暗灰", 0.22, 0.015, "Dim Gray"),
    SemanticSpec("黑", 0.10, 0.01, "Black"),
    # low saturation / foggy
    SemanticSpec("淺霧", 0.75, 0.04, "Pale Foggy"),
    SemanticSpec("霧", 0.55, 0.05, "Foggy/Muted"),
    SemanticSpec("深霧", 0.35, 0.05, "Deep Foggy"),
    SemanticSpec("墨", 0.15, 0.06, "Ink"),
    # high lightness
    SemanticSpec("淡", 0.90, 0.05, "Pale"),
    SemanticSpec("淺", 0.82, 0.10, "Light"),
    SemanticSpec("亮", 0.85, 0.16, "Bright"),
    SemanticSpec("螢光", 0.88, 0.26, "Fluorescent/Neon"),
    # mid lightness
    SemanticSpec("明", 0.65, 0.12, "Luminous/Clear"),
    SemanticSpec("鮮", 0.65, 0.22, "Strong"),
    SemanticSpec("豔", 0.60, 0.28, "Vivid"),
    SemanticSpec("純", 0.50, 0.30, "Pure"),
    SemanticSpec("正", 0.50, 0.28, "Standard/Base"),
    # low lightness
    SemanticSpec("濃", 0.45, 0.22, "Deep/Rich"),
    SemanticSpec("深", 0.35, 0.15, "Deep"),
    SemanticSpec("暗", 0.25, 0.10, "Dark"),
)

PREFIXES: Tuple[str, ...] = tuple(s.prefix for s in SEMANTIC_SPECS)


__all__ = [
    "HUES",
    "MAX_CHROMA",
    "PREFIXES",
    "SEMANTIC_SPECS",
    "HueDefinition",
    "SemanticSpec",
    "hue_by_angle",
    "hue_by_id",
]
