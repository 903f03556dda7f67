"""Domain logic between data sources and renderers.

Dependency rule: analysis/ takes DataFrames from datasources/ and returns
DataFrames or models that renderers can consume. It never downloads data
and never produces HTML.

Modules:
  - normalize: raw biomass table -> urchin subset (rename, project,
    coerce, filter)
"""

from urchin_timeseries.analysis.normalize import (
    apply_filters,
    clean_name,
    clean_names,
    coerce_types,
    iter_records,
    normalize,
    project,
)

__all__ = [
    "apply_filters",
    "clean_name",
    "clean_names",
    "coerce_types",
    "iter_records",
    "normalize",
    "project",
]
