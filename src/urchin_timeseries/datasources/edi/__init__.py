"""EDI (Environmental Data Initiative) data source.

Downloads the SBC LTER kelp forest biomass table from the PASTA data
portal and parses it into a DataFrame.

Public API:
  - transfer: fetch (download with strategy fallback), CurlTransfer, SessionTransfer
  - reader: load (parse + delete temp file), glimpse, format_summary
  - client: URLs, dataset citation, COLUMN_NAMES
"""

from urchin_timeseries.datasources.edi.client import (
    COLUMN_NAMES,
    DATASET_CITATION,
    DATASET_DOI,
    DEFAULT_SOURCE_URL,
)
from urchin_timeseries.datasources.edi.reader import format_summary, glimpse, load
from urchin_timeseries.datasources.edi.transfer import (
    CurlTransfer,
    SessionTransfer,
    TransferStrategy,
    default_strategies,
    fetch,
)

__all__ = [
    "COLUMN_NAMES",
    "DATASET_CITATION",
    "DATASET_DOI",
    "DEFAULT_SOURCE_URL",
    "CurlTransfer",
    "SessionTransfer",
    "TransferStrategy",
    "default_strategies",
    "fetch",
    "format_summary",
    "glimpse",
    "load",
]
