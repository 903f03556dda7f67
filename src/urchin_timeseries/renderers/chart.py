"""Declarative chart spec resolved to an inline SVG.

A ``ChartSpec`` is immutable: every ``with_*`` method returns a new spec,
so partially built specs can be shared and extended safely. Nothing is
computed until ``resolve()``, which turns the spec into plain drawing
instructions (scales, ticks, marks, legend). ``render_chart()`` feeds those
to the ``chart.html.j2`` template.

Usage::

    spec = (
        ChartSpec()
        .with_data(df)
        .with_mapping(x="date", y="dry_mass_per_area", color="common_name", shape="common_name")
        .with_point(size=2)
        .with_line()
        .with_color_scale({"red urchin": "#ee2c2c"})
        .with_theme(THEME_MINIMAL)
        .with_labels(x="Date", y="Dry biomass (g/m2)", color="Species", shape="Species")
    )
    html = render_chart(spec)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import TYPE_CHECKING, Any, Literal

import pandas as pd

from urchin_timeseries.renderers import render_template
from urchin_timeseries.renderers.palette import (
    FALLBACK_COLOR,
    CategoryStyle,
    build_category_styles,
    marker_polygon,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

Geom = Literal["point", "line"]

# SVG layout
MARGIN_LEFT = 70
MARGIN_TOP = 45
MARGIN_RIGHT = 25
MARGIN_BOTTOM = 55
LEGEND_WIDTH = 140

DEFAULT_MARK_COLOR = "#333333"


# =============================================================================
# Spec
# =============================================================================


@dataclass(frozen=True)
class Aesthetics:
    """Column bindings for each visual channel."""

    x: str
    y: str
    color: str | None = None
    shape: str | None = None


@dataclass(frozen=True)
class Layer:
    geom: Geom
    size: float = 2.0


@dataclass(frozen=True)
class Labels:
    x: str = ""
    y: str = ""
    color: str = ""
    shape: str = ""
    title: str = ""


@dataclass(frozen=True)
class Theme:
    """Background, grid and text styling."""

    name: str
    background: str = "#ffffff"
    panel_background: str = "#ffffff"
    grid_color: str = "#ebebeb"
    text_color: str = "#333333"
    axis_line: bool = False
    font_family: str = "Helvetica, Arial, sans-serif"


#: White background, light grid, no axis lines or panel border.
THEME_MINIMAL = Theme(name="minimal")

#: Gray panel with white grid lines.
THEME_GRAY = Theme(name="gray", panel_background="#ebebeb", grid_color="#ffffff")


@dataclass(frozen=True)
class ChartSpec:
    """Immutable chart description; build with the ``with_*`` methods."""

    data: pd.DataFrame | None = field(default=None, compare=False)
    aes: Aesthetics | None = None
    layers: tuple[Layer, ...] = ()
    color_values: Mapping[str, str] = field(default_factory=dict)
    fallback_color: str = FALLBACK_COLOR
    theme: Theme = THEME_MINIMAL
    labels: Labels = Labels()
    width: int = 760
    height: int = 420

    def with_data(self, data: pd.DataFrame) -> ChartSpec:
        return replace(self, data=data)

    def with_mapping(
        self, x: str, y: str, color: str | None = None, shape: str | None = None
    ) -> ChartSpec:
        return replace(self, aes=Aesthetics(x=x, y=y, color=color, shape=shape))

    def with_point(self, size: float = 2.0) -> ChartSpec:
        return replace(self, layers=(*self.layers, Layer("point", size)))

    def with_line(self, size: float = 1.0) -> ChartSpec:
        return replace(self, layers=(*self.layers, Layer("line", size)))

    def with_color_scale(
        self, values: Mapping[str, str], fallback: str | None = None
    ) -> ChartSpec:
        return replace(
            self,
            color_values=dict(values),
            fallback_color=fallback or self.fallback_color,
        )

    def with_theme(self, theme: Theme) -> ChartSpec:
        return replace(self, theme=theme)

    def with_labels(self, **labels: str) -> ChartSpec:
        return replace(self, labels=replace(self.labels, **labels))

    def with_size(self, width: int, height: int) -> ChartSpec:
        return replace(self, width=width, height=height)

    def resolve(self) -> ResolvedChart:
        """Compute scales, ticks, marks and legend for this spec."""
        if self.aes is None:
            msg = "ChartSpec has no aesthetic mapping; call with_mapping() first"
            raise ValueError(msg)
        return _resolve(self, self.aes)


# =============================================================================
# Resolved chart (template input)
# =============================================================================


@dataclass
class Tick:
    pos: float
    label: str


@dataclass
class Marker:
    category: str
    color: str
    shape: str
    x: float
    y: float
    r: float
    points: str = ""


@dataclass
class Polyline:
    category: str
    color: str
    points: str
    width: float = 1.0


@dataclass
class ResolvedLayer:
    geom: str
    markers: list[Marker] = field(default_factory=list)
    lines: list[Polyline] = field(default_factory=list)


@dataclass
class ResolvedChart:
    width: int
    height: int
    theme: Theme
    labels: Labels
    left: float
    top: float
    right: float
    bottom: float
    x_ticks: list[Tick]
    y_ticks: list[Tick]
    layers: list[ResolvedLayer]
    legend: list[Marker]
    legend_title: str
    legend_x: float

    @property
    def mark_count(self) -> int:
        return sum(len(layer.markers) for layer in self.layers)


# =============================================================================
# Resolution
# =============================================================================


def _is_missing(value: Any) -> bool:
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _x_number(value: Any) -> float:
    """Numeric position of an x value; dates map to proleptic ordinals."""
    if isinstance(value, datetime):
        seconds = value.hour * 3600 + value.minute * 60 + value.second
        return value.toordinal() + seconds / 86400
    if isinstance(value, date):
        return float(value.toordinal())
    return float(value)


def _collect_rows(spec: ChartSpec, aes: Aesthetics) -> tuple[list[tuple[float, float, str]], bool]:
    """(x, y, category) per drawable row, plus whether x is temporal."""
    if spec.data is None or spec.data.empty:
        return [], False

    category_col = aes.color or aes.shape
    wanted = [aes.x, aes.y] + ([category_col] if category_col else [])
    missing = [c for c in wanted if c not in spec.data.columns]
    if missing:
        msg = f"Chart data has no column(s): {', '.join(missing)}"
        raise ValueError(msg)

    rows: list[tuple[float, float, str]] = []
    temporal = False
    dropped = 0
    for rec in spec.data.to_dict(orient="records"):
        x, y = rec[aes.x], rec[aes.y]
        if _is_missing(x) or _is_missing(y):
            dropped += 1
            continue
        x_num, y_num = _x_number(x), float(y)
        if not (math.isfinite(x_num) and math.isfinite(y_num)):
            dropped += 1
            continue
        temporal = temporal or isinstance(x, date)
        category = str(rec[category_col]) if category_col else ""
        rows.append((x_num, y_num, category))
    if dropped:
        logger.debug("Dropped %d rows with missing or non-finite x or y", dropped)
    return rows, temporal


def nice_ticks(lo: float, hi: float, n: int = 5) -> list[float]:
    """Evenly spaced round tick values covering [lo, hi]."""
    if hi <= lo:
        hi = lo + 1
    raw = (hi - lo) / n
    magnitude = 10 ** math.floor(math.log10(raw))
    step = magnitude
    for m in (1, 2, 2.5, 5, 10):
        step = m * magnitude
        if step >= raw:
            break
    start = math.floor(lo / step) * step
    stop = math.ceil(hi / step) * step
    count = round((stop - start) / step)
    return [round(start + i * step, 10) for i in range(count + 1)]


def _format_number(value: float) -> str:
    return f"{int(value)}" if value == int(value) else f"{value:g}"


def date_ticks(lo: float, hi: float, max_ticks: int = 12) -> list[tuple[float, str]]:
    """Tick positions and labels for an ordinal date range.

    Uses January 1st of each year when at least two fall in range, then
    month starts, then the range endpoints.
    """
    start = date.fromordinal(max(1, math.ceil(lo)))
    end = date.fromordinal(max(1, math.floor(hi)))

    years = [date(y, 1, 1) for y in range(start.year, end.year + 1)]
    years = [d for d in years if start <= d <= end]
    if len(years) >= 2:
        step = math.ceil(len(years) / max_ticks)
        return [(d.toordinal(), str(d.year)) for d in years[::step]]

    months: list[date] = []
    y, m = start.year, start.month
    while date(y, m, 1) <= end:
        if date(y, m, 1) >= start:
            months.append(date(y, m, 1))
        y, m = (y + 1, 1) if m == 12 else (y, m + 1)
    if len(months) >= 2:
        step = math.ceil(len(months) / max_ticks)
        return [(d.toordinal(), d.strftime("%b %Y")) for d in months[::step]]

    if start >= end:
        return [(start.toordinal(), start.isoformat())]
    return [(start.toordinal(), start.isoformat()), (end.toordinal(), end.isoformat())]


def _x_domain(xs: list[float], temporal: bool) -> tuple[float, float, list[tuple[float, str]]]:
    if not xs:
        return 0.0, 1.0, []
    lo, hi = min(xs), max(xs)
    if lo == hi:
        pad = 15.0 if temporal else 0.5
    else:
        pad = (hi - lo) * 0.04
    lo, hi = lo - pad, hi + pad
    if temporal:
        return lo, hi, date_ticks(lo, hi)
    ticks = [(v, _format_number(v)) for v in nice_ticks(lo, hi) if lo <= v <= hi]
    return lo, hi, ticks


def _resolve(spec: ChartSpec, aes: Aesthetics) -> ResolvedChart:
    rows, temporal = _collect_rows(spec, aes)

    styles: dict[str, CategoryStyle] = {}
    if aes.color or aes.shape:
        styles = build_category_styles(
            (c for _, _, c in rows), spec.color_values, spec.fallback_color
        )
    default_style = CategoryStyle(label="", color=DEFAULT_MARK_COLOR, shape="circle")

    left, top = float(MARGIN_LEFT), float(MARGIN_TOP)
    right = float(spec.width - MARGIN_RIGHT - (LEGEND_WIDTH if styles else 0))
    bottom = float(spec.height - MARGIN_BOTTOM)

    x_lo, x_hi, x_tick_values = _x_domain([x for x, _, _ in rows], temporal)
    ys = [y for _, y, _ in rows]
    y_values = nice_ticks(min(0.0, min(ys)), max(ys)) if ys else nice_ticks(0.0, 1.0)
    y_lo, y_hi = y_values[0], y_values[-1]

    def px(x: float) -> float:
        return round(left + (x - x_lo) / (x_hi - x_lo) * (right - left), 1)

    def py(y: float) -> float:
        return round(bottom - (y - y_lo) / (y_hi - y_lo) * (bottom - top), 1)

    layers: list[ResolvedLayer] = []
    for layer in spec.layers:
        resolved = ResolvedLayer(geom=layer.geom)
        if layer.geom == "point":
            r = layer.size * 2
            for x, y, category in rows:
                style = styles.get(category, default_style)
                cx, cy = px(x), py(y)
                resolved.markers.append(
                    Marker(
                        category=category,
                        color=style.color,
                        shape=style.shape,
                        x=cx,
                        y=cy,
                        r=r,
                        points=marker_polygon(style.shape, cx, cy, r),
                    )
                )
        elif layer.geom == "line":
            groups: dict[str, list[str]] = {}
            # sorted() is stable, so ties keep input order
            for x, y, category in sorted(rows, key=lambda row: row[0]):
                groups.setdefault(category, []).append(f"{px(x)},{py(y)}")
            for category in sorted(groups):
                points = groups[category]
                if len(points) < 2:
                    continue
                resolved.lines.append(
                    Polyline(
                        category=category,
                        color=styles.get(category, default_style).color,
                        points=" ".join(points),
                        width=layer.size,
                    )
                )
        layers.append(resolved)

    legend_x = right + 20
    legend: list[Marker] = []
    for i, style in enumerate(styles.values()):
        cx, cy = legend_x + 8, top + 28 + i * 22
        legend.append(
            Marker(
                category=style.label,
                color=style.color,
                shape=style.shape,
                x=cx,
                y=cy,
                r=4.0,
                points=marker_polygon(style.shape, cx, cy, 4.0),
            )
        )

    return ResolvedChart(
        width=spec.width,
        height=spec.height,
        theme=spec.theme,
        labels=spec.labels,
        left=left,
        top=top,
        right=right,
        bottom=bottom,
        x_ticks=[Tick(px(v), label) for v, label in x_tick_values],
        y_ticks=[Tick(py(v), _format_number(v)) for v in y_values],
        layers=layers,
        legend=legend,
        legend_title=spec.labels.color or spec.labels.shape,
        legend_x=legend_x,
    )


def render_chart(spec: ChartSpec) -> str:
    """Resolve ``spec`` and render it as an HTML fragment with inline SVG."""
    return render_template("chart.html.j2", chart=spec.resolve())
