"""
Prefect flows for the urchin biomass pipeline.

Flows:
- plot: Download the EDI biomass table, normalize it to the urchin subset,
  and write the timeseries chart page

Usage (local):
    python -m urchin_timeseries.flows.plot

Usage (Prefect):
    prefect server start  # Optional, for dashboard
    python -m urchin_timeseries.flows.plot
"""
