"""
Domain models for urchin timeseries.

Pydantic models for normalized rows and for the subset parameters that
drive normalization. Tables themselves stay as pandas DataFrames; these
models define what a row of the normalized table must look like.
"""

from __future__ import annotations

from datetime import date  # noqa: TC003 -- pydantic resolves this at runtime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# =============================================================================
# Subset criteria
# =============================================================================

NORMALIZED_FIELDS = ("year", "date", "site", "dry_mass_per_area", "common_name")

#: Canonical source column -> output field, in output order.
DEFAULT_COLUMNS: dict[str, str] = {
    "year": "year",
    "date": "date",
    "site": "site",
    "dry_gm2": "dry_mass_per_area",
    "common_name": "common_name",
}

DEFAULT_SPECIES: tuple[str, ...] = ("red urchin", "purple urchin")
DEFAULT_SITE = "napl"
DEFAULT_YEAR_MIN = 2014
DEFAULT_YEAR_MAX = 2024


class SubsetCriteria(BaseModel):
    """Which rows and columns of the raw table to keep."""

    model_config = ConfigDict(frozen=True)

    year_min: int = DEFAULT_YEAR_MIN
    year_max: int = DEFAULT_YEAR_MAX
    species: tuple[str, ...] = DEFAULT_SPECIES
    site: str = DEFAULT_SITE
    columns: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_COLUMNS))

    @field_validator("species", mode="before")
    @classmethod
    def _lower_species(cls, value: object) -> tuple[str, ...]:
        if isinstance(value, str):
            value = [value]
        return tuple(str(s).strip().lower() for s in value)  # type: ignore[union-attr]

    @field_validator("site")
    @classmethod
    def _lower_site(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("columns")
    @classmethod
    def _check_output_fields(cls, value: dict[str, str]) -> dict[str, str]:
        if sorted(value.values()) != sorted(NORMALIZED_FIELDS):
            msg = f"columns must map onto exactly {', '.join(NORMALIZED_FIELDS)}"
            raise ValueError(msg)
        return value

    @model_validator(mode="after")
    def _check_year_range(self) -> SubsetCriteria:
        if self.year_min > self.year_max:
            msg = f"year_min ({self.year_min}) is greater than year_max ({self.year_max})"
            raise ValueError(msg)
        return self


# =============================================================================
# Normalized rows
# =============================================================================


class NormalizedRecord(BaseModel):
    """One row of the normalized urchin table."""

    model_config = ConfigDict(frozen=True)

    year: int
    date: date
    site: str
    dry_mass_per_area: float = Field(..., description="Dry biomass in g/m2")
    common_name: str


# =============================================================================
# Table summaries
# =============================================================================


class ColumnSummary(BaseModel):
    """Dtype and a few example values for one column."""

    name: str
    dtype: str
    samples: list[str] = Field(default_factory=list)


class TableSummary(BaseModel):
    """First look at a table: shape plus per-column summaries."""

    rows: int
    columns: list[ColumnSummary] = Field(default_factory=list)

    @property
    def column_count(self) -> int:
        return len(self.columns)
