"""Tests for the declarative chart spec and its resolution."""

from __future__ import annotations

import logging
from datetime import date

import pandas as pd
import pytest

from urchin_timeseries.renderers.chart import (
    THEME_GRAY,
    THEME_MINIMAL,
    ChartSpec,
    date_ticks,
    nice_ticks,
    render_chart,
)
from urchin_timeseries.renderers.palette import (
    FALLBACK_COLOR,
    URCHIN_COLORS,
    build_category_styles,
    marker_polygon,
)


def urchin_frame() -> pd.DataFrame:
    """Two species, dates deliberately out of order."""
    return pd.DataFrame(
        {
            "date": [
                date(2016, 8, 1),
                date(2014, 8, 1),
                date(2015, 8, 1),
                date(2014, 8, 1),
                date(2015, 8, 1),
            ],
            "dry_mass_per_area": [30.0, 10.0, 20.0, 5.0, 6.0],
            "common_name": [
                "purple urchin",
                "purple urchin",
                "purple urchin",
                "red urchin",
                "red urchin",
            ],
        }
    )


def base_spec(data: pd.DataFrame) -> ChartSpec:
    return (
        ChartSpec()
        .with_data(data)
        .with_mapping(x="date", y="dry_mass_per_area", color="common_name", shape="common_name")
        .with_point(size=2)
        .with_line()
        .with_color_scale(URCHIN_COLORS)
    )


class TestChartSpecBuilder:
    """Each with_* call returns a new spec."""

    def test_builder_does_not_mutate(self) -> None:
        empty = ChartSpec()
        with_points = empty.with_point()
        both = with_points.with_line()

        assert empty.layers == ()
        assert [layer.geom for layer in with_points.layers] == ["point"]
        assert [layer.geom for layer in both.layers] == ["point", "line"]

    def test_labels_merge(self) -> None:
        spec = ChartSpec().with_labels(x="Date").with_labels(title="T")
        assert spec.labels.x == "Date"
        assert spec.labels.title == "T"

    def test_theme_and_scale(self) -> None:
        spec = ChartSpec().with_theme(THEME_GRAY).with_color_scale({"a": "#000000"}, "#123456")
        assert spec.theme is THEME_GRAY
        assert spec.color_values == {"a": "#000000"}
        assert spec.fallback_color == "#123456"

    def test_resolve_requires_mapping(self) -> None:
        with pytest.raises(ValueError, match="with_mapping"):
            ChartSpec().with_point().resolve()

    def test_unknown_column(self) -> None:
        spec = ChartSpec().with_data(urchin_frame()).with_mapping(x="date", y="biomass")
        with pytest.raises(ValueError, match="biomass"):
            spec.resolve()


class TestResolve:
    """Scales, marks and legend."""

    def test_one_marker_per_row(self) -> None:
        chart = base_spec(urchin_frame()).resolve()
        assert chart.mark_count == 5

    def test_category_drives_color_and_shape(self) -> None:
        chart = base_spec(urchin_frame()).resolve()
        points = chart.layers[0].markers

        purple = [m for m in points if m.category == "purple urchin"]
        red = [m for m in points if m.category == "red urchin"]
        assert {m.color for m in purple} == {URCHIN_COLORS["purple urchin"]}
        assert {m.color for m in red} == {URCHIN_COLORS["red urchin"]}
        assert {m.shape for m in purple} == {"circle"}
        assert {m.shape for m in red} == {"triangle"}
        assert all(m.points for m in red)

    def test_one_line_per_category(self) -> None:
        chart = base_spec(urchin_frame()).resolve()
        lines = chart.layers[1].lines

        assert [line.category for line in lines] == ["purple urchin", "red urchin"]
        assert len(lines[0].points.split()) == 3
        assert len(lines[1].points.split()) == 2

    def test_lines_ordered_by_date(self) -> None:
        chart = base_spec(urchin_frame()).resolve()
        for line in chart.layers[1].lines:
            xs = [float(p.split(",")[0]) for p in line.points.split()]
            assert xs == sorted(xs)

    def test_single_point_category_has_no_line(self) -> None:
        data = urchin_frame().iloc[:4]  # one red urchin row
        chart = base_spec(data).resolve()
        assert [line.category for line in chart.layers[1].lines] == ["purple urchin"]

    def test_marks_inside_plot_area(self) -> None:
        chart = base_spec(urchin_frame()).resolve()
        for m in chart.layers[0].markers:
            assert chart.left <= m.x <= chart.right
            assert chart.top <= m.y <= chart.bottom

    def test_y_axis_starts_at_zero(self) -> None:
        chart = base_spec(urchin_frame()).resolve()
        assert chart.y_ticks[0].label == "0"
        assert chart.y_ticks[-1].label == "30"

    def test_year_ticks(self) -> None:
        chart = base_spec(urchin_frame()).resolve()
        assert [t.label for t in chart.x_ticks] == ["2015", "2016"]

    def test_legend_merges_color_and_shape(self) -> None:
        chart = base_spec(urchin_frame()).with_labels(color="Species", shape="Species").resolve()
        assert chart.legend_title == "Species"
        assert [(e.category, e.shape) for e in chart.legend] == [
            ("purple urchin", "circle"),
            ("red urchin", "triangle"),
        ]

    def test_out_of_domain_category_uses_fallback(self, caplog: pytest.LogCaptureFixture) -> None:
        data = pd.concat(
            [
                urchin_frame(),
                pd.DataFrame(
                    {
                        "date": [date(2015, 1, 1)],
                        "dry_mass_per_area": [1.0],
                        "common_name": ["kelp bass"],
                    }
                ),
            ],
            ignore_index=True,
        )
        with caplog.at_level(logging.WARNING):
            chart = base_spec(data).resolve()

        bass = [m for m in chart.layers[0].markers if m.category == "kelp bass"]
        assert [m.color for m in bass] == [FALLBACK_COLOR]
        assert "kelp bass" in caplog.text

    def test_missing_y_rows_dropped(self) -> None:
        data = urchin_frame()
        data.loc[0, "dry_mass_per_area"] = float("nan")
        assert base_spec(data).resolve().mark_count == 4

    @pytest.mark.parametrize("value", [float("inf"), float("-inf")])
    def test_non_finite_y_rows_dropped(self, value: float) -> None:
        data = urchin_frame()
        data.loc[0, "dry_mass_per_area"] = value
        chart = base_spec(data).resolve()

        assert chart.mark_count == 4
        assert chart.y_ticks[-1].label == "20"

    def test_extra_category_goes_last_in_legend(self) -> None:
        extra = pd.DataFrame(
            {"date": [date(2015, 1, 1)], "dry_mass_per_area": [1.0], "common_name": ["abalone"]}
        )
        data = pd.concat([urchin_frame(), extra], ignore_index=True)
        chart = base_spec(data).resolve()

        assert [(e.category, e.shape) for e in chart.legend] == [
            ("purple urchin", "circle"),
            ("red urchin", "triangle"),
            ("abalone", "square"),
        ]

    def test_empty_data(self) -> None:
        data = urchin_frame().iloc[0:0]
        chart = base_spec(data).resolve()

        assert chart.mark_count == 0
        assert all(not layer.lines for layer in chart.layers)
        assert chart.legend == []
        assert chart.x_ticks == []
        assert chart.y_ticks

    def test_no_category_mapping(self) -> None:
        spec = ChartSpec().with_data(urchin_frame()).with_mapping(
            x="date", y="dry_mass_per_area"
        )
        chart = spec.with_line().resolve()
        assert len(chart.layers[0].lines) == 1
        assert chart.legend == []


class TestRenderChart:
    def test_renders_svg(self) -> None:
        html = render_chart(base_spec(urchin_frame()).with_labels(title="Urchins"))
        assert "<svg" in html
        assert "Urchins" in html
        assert html.count('class="mark"') == 5
        assert html.count('class="line"') == 2
        assert URCHIN_COLORS["red urchin"] in html

    def test_empty_chart_renders(self) -> None:
        html = render_chart(base_spec(urchin_frame().iloc[0:0]).with_labels(x="Date"))
        assert "<svg" in html
        assert 'class="mark"' not in html
        assert "Date" in html

    def test_minimal_theme_has_no_axis_lines(self) -> None:
        html = render_chart(base_spec(urchin_frame()).with_theme(THEME_MINIMAL))
        assert "axis-lines" not in html


class TestTicks:
    def test_nice_ticks(self) -> None:
        assert nice_ticks(0, 47) == [0, 10, 20, 30, 40, 50]

    def test_nice_ticks_small_range(self) -> None:
        assert nice_ticks(0, 1) == [0, 0.2, 0.4, 0.6, 0.8, 1.0]

    def test_nice_ticks_degenerate(self) -> None:
        ticks = nice_ticks(0, 0)
        assert ticks[0] == 0
        assert ticks[-1] >= 1

    def test_date_ticks_years(self) -> None:
        lo = date(2014, 1, 15).toordinal()
        hi = date(2024, 8, 1).toordinal()
        labels = [label for _, label in date_ticks(lo, hi)]
        assert labels[0] == "2015"
        assert labels[-1] == "2024"

    def test_date_ticks_months(self) -> None:
        lo = date(2020, 2, 15).toordinal()
        hi = date(2020, 6, 20).toordinal()
        labels = [label for _, label in date_ticks(lo, hi)]
        assert labels == ["Mar 2020", "Apr 2020", "May 2020", "Jun 2020"]

    def test_date_ticks_single_day(self) -> None:
        d = date(2020, 2, 15).toordinal()
        assert date_ticks(d, d) == [(d, "2020-02-15")]


class TestPalette:
    def test_fixed_colors(self) -> None:
        styles = build_category_styles(["red urchin", "purple urchin"], URCHIN_COLORS)
        assert styles["purple urchin"].color == "#68228b"
        assert styles["red urchin"].color == "#ee2c2c"
        assert all(s.in_scale for s in styles.values())

    def test_fallback_color(self) -> None:
        styles = build_category_styles(["sea star"], URCHIN_COLORS)
        assert styles["sea star"].color == FALLBACK_COLOR
        assert styles["sea star"].in_scale is False

    def test_shapes_by_sorted_order(self) -> None:
        styles = build_category_styles(["b", "a", "c", "d", "e"], {})
        assert [styles[k].shape for k in "abcde"] == [
            "circle",
            "triangle",
            "square",
            "diamond",
            "circle",
        ]

    def test_extra_category_does_not_shift_scale_shapes(self) -> None:
        styles = build_category_styles(["red urchin", "abalone", "purple urchin"], URCHIN_COLORS)
        assert styles["purple urchin"].shape == "circle"
        assert styles["red urchin"].shape == "triangle"
        assert styles["abalone"].shape == "square"
        assert list(styles) == ["purple urchin", "red urchin", "abalone"]

    def test_scale_shape_kept_when_other_species_absent(self) -> None:
        styles = build_category_styles(["red urchin"], URCHIN_COLORS)
        assert list(styles) == ["red urchin"]
        assert styles["red urchin"].shape == "triangle"

    def test_marker_polygon(self) -> None:
        assert marker_polygon("circle", 10, 10, 4) == ""
        assert len(marker_polygon("triangle", 10, 10, 4).split()) == 3
        assert len(marker_polygon("square", 10, 10, 4).split()) == 4
        assert len(marker_polygon("diamond", 10, 10, 4).split()) == 4
