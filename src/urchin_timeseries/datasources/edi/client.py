"""EDI (Environmental Data Initiative) constants for the SBC LTER kelp forest data.

Dataset: Reed, D. and R. Miller. 2024. SBC LTER: Reef: Seasonal Kelp Forest
Community Dynamics: biomass of kelp forest species, ongoing since 2008 ver 1.
Environmental Data Initiative.

Portal docs: https://pasta.lternet.edu/package/docs/api
"""

PASTA_DATA_API = "https://pasta.lternet.edu/package/data/eml"

# knb-lter-sbc.182 revision 1, biomass data entity
PACKAGE_SCOPE = "knb-lter-sbc"
PACKAGE_ID = 182
PACKAGE_REVISION = 1
ENTITY_ID = "8bd628cbfbb5bef0d9b1a7ead8aab832"

DEFAULT_SOURCE_URL = f"{PASTA_DATA_API}/{PACKAGE_SCOPE}/{PACKAGE_ID}/{PACKAGE_REVISION}/{ENTITY_ID}"

DATASET_DOI = "https://doi.org/10.6073/pasta/2e3b1cf934ec4f4a9293ba117aad37f5"
DATASET_CITATION = (
    "Reed, D. and R. Miller. 2024. SBC LTER: Reef: Seasonal Kelp Forest Community "
    "Dynamics: biomass of kelp forest species, ongoing since 2008 ver 1. "
    "Environmental Data Initiative."
)

DEFAULT_USER_AGENT = "urchin-timeseries/0.1 (+https://pasta.lternet.edu)"

# Positional column names for the biomass CSV; the file's own header is skipped.
COLUMN_NAMES: tuple[str, ...] = (
    "YEAR",
    "MONTH",
    "DATE",
    "SITE",
    "TRANSECT",
    "VIS",
    "SP_CODE",
    "PERCENT_COVER",
    "DENSITY",
    "WM_GM2",
    "DRY_GM2",
    "SFDM",
    "AFDM",
    "SCIENTIFIC_NAME",
    "COMMON_NAME",
    "TAXON_KINGDOM",
    "TAXON_CLASS",
    "TAXON_PHYLUM",
    "TAXON_ORDER",
    "TAXON_FAMILY",
    "TAXON_GENUS",
    "GROUP",
    "MOBILITY",
    "GROWTH_MORPH",
)
