"""Pure rendering functions: structured data -> HTML strings.

All renderers follow the same pattern:
  - Input: DataFrame, model or ChartSpec
  - Output: str (HTML fragment, except build_page_html)
  - No side effects, no I/O, no Prefect decorators

Used by flows/plot.py, which writes the final page.

Public API:
  - chart: ChartSpec, render_chart, THEME_MINIMAL
  - timeseries: build_biomass_chart, render, build_page_html
  - palette: URCHIN_COLORS, FALLBACK_COLOR, build_category_styles

Adding a chart
--------------
1. Create ``renderers/{name}.py`` with a function that builds a ChartSpec::

       from urchin_timeseries.renderers.chart import ChartSpec, render_chart

       def render_mychart(data: pd.DataFrame) -> str:
           spec = ChartSpec().with_data(data).with_mapping(x="date", y="value").with_line()
           return render_chart(spec)

2. Other HTML fragments go in ``templates/{name}.html.j2`` and are rendered
   with ``render_template``. Page-level CSS lives in ``templates/page.html.j2``.

3. Wire it into ``flows/plot.py`` and add tests that assert on the returned HTML.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import jinja2

# Shared Jinja2 environment for all renderers
_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
_jinja_env = jinja2.Environment(
    loader=jinja2.FileSystemLoader(str(_TEMPLATE_DIR)),
    autoescape=True,
    trim_blocks=True,
    lstrip_blocks=True,
)


def render_template(template_name: str, **kwargs: Any) -> str:
    """Render a Jinja2 template by name."""
    return _jinja_env.get_template(template_name).render(**kwargs)
