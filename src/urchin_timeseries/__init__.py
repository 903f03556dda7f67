"""Urchin Timeseries - SBC LTER kelp forest biomass, plotted through time.

Architecture::

    datasources/   EDI data portal (download with fallback, CSV parsing)
    analysis/      Normalization (rename, project, coerce, filter)
    renderers/     Pure data -> HTML/SVG (declarative chart spec)
    flows/         Prefect orchestration (fetch -> load -> normalize -> render)
    services/      Shared utilities (HTTP client with retry)

Data flow: datasources -> analysis -> renderers -> chart page

Extension points (see each package docstring):
  - New data source:   datasources/__init__.py
  - New chart:         renderers/__init__.py
"""

__version__ = "0.1.0"

from urchin_timeseries.config import Settings
from urchin_timeseries.schemas import NormalizedRecord, SubsetCriteria

__all__ = ["NormalizedRecord", "Settings", "SubsetCriteria", "__version__"]
