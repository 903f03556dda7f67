"""Turn the raw biomass table into the normalized urchin subset.

Steps, each returning a new DataFrame:

1. ``clean_names``    column labels -> lowercase snake_case
2. ``project``        keep the configured columns, renamed to output fields
3. ``coerce_types``   date -> datetime.date, year -> int, biomass -> float
4. ``apply_filters``  lower-case site/common_name, then filter by year range,
                      species and site
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterator, Mapping
from typing import Any

import pandas as pd

from urchin_timeseries.exceptions import DateCoercionError, SchemaMismatch
from urchin_timeseries.schemas import NormalizedRecord, SubsetCriteria

logger = logging.getLogger(__name__)

LOWERCASE_COLUMNS = ("site", "common_name")

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_NON_ALNUM = re.compile(r"[^0-9A-Za-z]+")

RowFilter = Callable[[pd.DataFrame], pd.Series]


# =============================================================================
# Column names
# =============================================================================


def clean_name(name: object) -> str:
    """Lowercase snake_case form of a column label.

    >>> clean_name("SCIENTIFIC_NAME")
    'scientific_name'
    >>> clean_name("dryMass (g/m2)")
    'dry_mass_g_m2'
    """
    text = _CAMEL_BOUNDARY.sub("_", str(name).strip())
    text = _NON_ALNUM.sub("_", text).strip("_").lower()
    return text or "x"


def clean_names(table: pd.DataFrame) -> pd.DataFrame:
    """Rename every column to its clean form; duplicates get ``_2``, ``_3``..."""
    seen: dict[str, int] = {}
    names: list[str] = []
    for col in table.columns:
        base = clean_name(col)
        seen[base] = seen.get(base, 0) + 1
        names.append(base if seen[base] == 1 else f"{base}_{seen[base]}")
    return table.set_axis(names, axis=1)


def project(table: pd.DataFrame, columns: Mapping[str, str]) -> pd.DataFrame:
    """Select ``columns`` by name, in mapping order, and rename them.

    Raises:
        SchemaMismatch: If any source column is absent.
    """
    missing = [c for c in columns if c not in table.columns]
    if missing:
        msg = f"Missing column(s) after renaming: {', '.join(missing)}"
        raise SchemaMismatch(msg, missing=missing)
    return table.loc[:, list(columns)].rename(columns=dict(columns))


# =============================================================================
# Types
# =============================================================================


def _parse_dates(values: pd.Series, column: str = "date") -> pd.Series:
    parsed = pd.to_datetime(values, format="ISO8601", errors="coerce")
    bad = parsed.isna()
    if bad.any():
        raise DateCoercionError(column, values[bad].iloc[0])
    return parsed.dt.date


def coerce_types(table: pd.DataFrame) -> pd.DataFrame:
    """Parse dates and numbers in the projected table.

    An unparseable value anywhere fails the whole call.

    Raises:
        DateCoercionError: A date is missing or not a valid ISO date.
        ValueError: ``year`` or ``dry_mass_per_area`` is not numeric.
    """
    out = table.copy()
    out["date"] = _parse_dates(out["date"]) if len(out) else out["date"].astype(object)
    out["year"] = pd.to_numeric(out["year"], errors="raise").astype("int64")
    out["dry_mass_per_area"] = pd.to_numeric(out["dry_mass_per_area"], errors="raise").astype(
        "float64"
    )
    return out


# =============================================================================
# Filters
# =============================================================================


def _lower(value: Any) -> Any:
    return value.lower() if isinstance(value, str) else value


def lowercase(table: pd.DataFrame, columns: tuple[str, ...] = LOWERCASE_COLUMNS) -> pd.DataFrame:
    out = table.copy()
    for col in columns:
        out[col] = out[col].map(_lower)
    return out


def build_filters(criteria: SubsetCriteria) -> list[tuple[str, RowFilter]]:
    """Row filters in application order, as (label, mask function) pairs."""
    species = list(criteria.species)
    return [
        (
            f"year {criteria.year_min}-{criteria.year_max}",
            lambda t: t["year"].between(criteria.year_min, criteria.year_max),
        ),
        (f"species in {species}", lambda t: t["common_name"].isin(species)),
        (f"site == {criteria.site!r}", lambda t: t["site"] == criteria.site),
    ]


def apply_filters(table: pd.DataFrame, criteria: SubsetCriteria) -> pd.DataFrame:
    """Lower-case the categorical columns, then keep rows matching ``criteria``.

    Row order is preserved. Running this on its own output is a no-op.
    """
    out = lowercase(table)
    for label, mask in build_filters(criteria):
        before = len(out)
        out = out[mask(out)]
        logger.debug("Filter %s: %d -> %d rows", label, before, len(out))
    return out.reset_index(drop=True)


# =============================================================================
# Pipeline
# =============================================================================


def normalize(raw: pd.DataFrame, criteria: SubsetCriteria | None = None) -> pd.DataFrame:
    """
    Normalize the raw biomass table to the configured urchin subset.

    Args:
        raw: Table from ``datasources.edi.load``. Not modified.
        criteria: Columns, year range, species and site to keep.
            Defaults to red and purple urchins at Naples, 2014-2024.

    Returns:
        DataFrame with columns year, date, site, dry_mass_per_area,
        common_name, in input row order.
    """
    criteria = criteria or SubsetCriteria()
    table = clean_names(raw)
    table = project(table, criteria.columns)
    table = coerce_types(table)
    result = apply_filters(table, criteria)
    logger.info("Normalized %d raw rows to %d rows", len(raw), len(result))
    return result


def iter_records(table: pd.DataFrame) -> Iterator[NormalizedRecord]:
    """Validated NormalizedRecord for each row of a normalized table."""
    for row in table.to_dict(orient="records"):
        yield NormalizedRecord(**row)
