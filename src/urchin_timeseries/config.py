"""
Application settings.

Values come from (highest priority first) explicit overrides, environment
variables prefixed ``URCHINS_``, a local ``.env`` file, and the defaults
below. List and dict fields are read from the environment as JSON, e.g.::

    URCHINS_SPECIES='["red urchin"]'
    URCHINS_YEAR_MIN=2018
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from urchin_timeseries.datasources.edi.client import DEFAULT_SOURCE_URL, DEFAULT_USER_AGENT
from urchin_timeseries.schemas import (
    DEFAULT_COLUMNS,
    DEFAULT_SITE,
    DEFAULT_SPECIES,
    DEFAULT_YEAR_MAX,
    DEFAULT_YEAR_MIN,
    SubsetCriteria,
)


class Settings(BaseSettings):
    """Runtime configuration for the urchin timeseries pipeline."""

    model_config = SettingsConfigDict(
        env_prefix="URCHINS_",
        env_file=".env",
        extra="ignore",
    )

    app_name: str = "urchin-timeseries"
    app_env: Literal["dev", "prod"] = "dev"
    debug: bool = False
    log_level: str = "INFO"

    # Source
    source_url: str = DEFAULT_SOURCE_URL
    user_agent: str = DEFAULT_USER_AGENT
    request_timeout: float = Field(default=120.0, gt=0)

    # Subset
    year_min: int = DEFAULT_YEAR_MIN
    year_max: int = DEFAULT_YEAR_MAX
    species: tuple[str, ...] = DEFAULT_SPECIES
    site: str = DEFAULT_SITE
    columns: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_COLUMNS))

    # Output
    output_path: Path = Path("urchin_biomass.html")

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

    @model_validator(mode="after")
    def _check_year_range(self) -> Settings:
        if self.year_min > self.year_max:
            msg = f"year_min ({self.year_min}) is greater than year_max ({self.year_max})"
            raise ValueError(msg)
        return self

    def criteria(self) -> SubsetCriteria:
        """Subset criteria for the normalizer."""
        return SubsetCriteria(
            year_min=self.year_min,
            year_max=self.year_max,
            species=self.species,
            site=self.site,
            columns=self.columns,
        )


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
