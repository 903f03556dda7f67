"""Category visual styling: colors, marker shapes, and palette assignment."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

logger = logging.getLogger(__name__)

#: Fixed species colors (R's darkorchid4 / firebrick2).
URCHIN_COLORS: dict[str, str] = {
    "purple urchin": "#68228b",
    "red urchin": "#ee2c2c",
}

#: Color for categories missing from the color scale.
FALLBACK_COLOR = "#7f7f7f"

#: Marker shapes: scale categories in sorted order, then the rest.
SHAPES = ("circle", "triangle", "square", "diamond")


@dataclass(frozen=True)
class CategoryStyle:
    """Color and marker shape for one category value."""

    label: str
    color: str
    shape: str
    in_scale: bool = True


def build_category_styles(
    categories: Iterable[str],
    color_values: Mapping[str, str],
    fallback_color: str = FALLBACK_COLOR,
) -> dict[str, CategoryStyle]:
    """Assign a color and shape to each distinct category.

    Shapes follow the sorted keys of ``color_values``, whether or not a key
    occurs in ``categories``, so scale categories keep their shapes when
    others appear. Categories not in ``color_values`` come after them in
    sorted order, with ``fallback_color`` and a warning.
    """
    present = set(categories)
    scale = sorted(color_values)
    extras = sorted(present.difference(scale))

    styles: dict[str, CategoryStyle] = {}
    for i, label in enumerate(scale):
        if label in present:
            styles[label] = CategoryStyle(
                label=label, color=color_values[label], shape=SHAPES[i % len(SHAPES)]
            )
    for i, label in enumerate(extras, start=len(scale)):
        logger.warning("Category %r has no color in the scale, using %s", label, fallback_color)
        styles[label] = CategoryStyle(
            label=label,
            color=fallback_color,
            shape=SHAPES[i % len(SHAPES)],
            in_scale=False,
        )
    return styles


def marker_polygon(shape: str, cx: float, cy: float, r: float) -> str:
    """SVG polygon points for a marker centred on (cx, cy); empty for circles."""
    if shape == "triangle":
        pts = [(cx, cy - r), (cx - r * 0.866, cy + r * 0.5), (cx + r * 0.866, cy + r * 0.5)]
    elif shape == "square":
        h = r * 0.85
        pts = [(cx - h, cy - h), (cx + h, cy - h), (cx + h, cy + h), (cx - h, cy + h)]
    elif shape == "diamond":
        pts = [(cx, cy - r), (cx + r, cy), (cx, cy + r), (cx - r, cy)]
    else:
        return ""
    return " ".join(f"{x:.1f},{y:.1f}" for x, y in pts)
