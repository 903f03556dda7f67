"""Urchin biomass timeseries chart and standalone page."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from urchin_timeseries.datasources.edi.client import DATASET_CITATION, DATASET_DOI
from urchin_timeseries.renderers import render_template
from urchin_timeseries.renderers.chart import THEME_MINIMAL, ChartSpec, render_chart
from urchin_timeseries.renderers.palette import URCHIN_COLORS
from urchin_timeseries.schemas import SubsetCriteria

if TYPE_CHECKING:
    import pandas as pd

X_LABEL = "Date"
Y_LABEL = "Dry biomass (g/m2)"
LEGEND_LABEL = "Species"


def species_phrase(species: tuple[str, ...] | list[str]) -> str:
    """Readable list of species names for a title.

    >>> species_phrase(("red urchin", "purple urchin"))
    'purple and red urchin'
    """
    names = sorted(species)
    if not names:
        return "species"
    if len(names) == 1:
        return names[0]
    # Factor out a shared trailing noun ("purple urchin", "red urchin")
    tails = {n.rsplit(" ", 1)[-1] for n in names}
    if len(tails) == 1 and all(" " in n for n in names):
        tail = tails.pop()
        heads = [n.rsplit(" ", 1)[0] for n in names]
        return f"{', '.join(heads[:-1])} and {heads[-1]} {tail}"
    return f"{', '.join(names[:-1])} and {names[-1]}"


def chart_title(criteria: SubsetCriteria) -> str:
    return (
        f"Timeseries of {species_phrase(criteria.species)} biomass, "
        f"{criteria.year_min}-{criteria.year_max}"
    )


def build_biomass_chart(data: pd.DataFrame, criteria: SubsetCriteria | None = None) -> ChartSpec:
    """Chart spec for a normalized urchin table: biomass over time by species."""
    criteria = criteria or SubsetCriteria()
    return (
        ChartSpec()
        .with_data(data)
        .with_mapping(
            x="date",
            y="dry_mass_per_area",
            color="common_name",
            shape="common_name",
        )
        .with_point(size=2)
        .with_line()
        .with_color_scale(URCHIN_COLORS)
        .with_theme(THEME_MINIMAL)
        .with_labels(
            x=X_LABEL,
            y=Y_LABEL,
            color=LEGEND_LABEL,
            shape=LEGEND_LABEL,
            title=chart_title(criteria),
        )
    )


def render(data: pd.DataFrame, config: SubsetCriteria | None = None) -> str:
    """Render the urchin biomass chart as an HTML fragment.

    An empty table gives a chart with axes and labels but no marks.
    """
    return render_chart(build_biomass_chart(data, config))


def build_page_html(
    chart_html: str,
    title: str,
    citation: str = DATASET_CITATION,
    doi: str = DATASET_DOI,
) -> str:
    """Wrap a chart fragment in a standalone HTML page."""
    updated = datetime.now(UTC).strftime("%Y-%m-%d %H:%M UTC")
    return render_template(
        "page.html.j2",
        title=title,
        chart=chart_html,
        citation=citation,
        doi=doi,
        updated=updated,
    )
