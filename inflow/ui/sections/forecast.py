from __future__ import annotations
import pandas as pd
import streamlit as st

from inflow.data import Dataset
from inflow.forecast import ForecastResult
from inflow.plots import scatter_figure
from inflow.ui.state import Controls

__all__ = ["render_forecast_panel", "render_scatter", "render_analog_years", "analog_table"]

_FACTOR_LABELS = ("SWE", "Fall SM", "Spring P")


def render_forecast_panel(result: ForecastResult):
    st.subheader("Forecasted Inflow")
    st.metric("Streamflow (% of 1991-2020 average)", f"{result.percent_of_baseline:.0f}%")
    st.metric("Streamflow (mm)", f"{result.absolute_value:.1f}")
    st.caption(f"Baseline: {result.baseline_mean:.1f} mm")
    if result.raw_percent != result.percent_of_baseline:
        st.caption(f"Unclamped estimate {result.raw_percent:.0f}% limited to the historical range.")
    st.markdown("**Factor contributions**")
    cols = st.columns(3)
    for col, label, dev in zip(cols, _FACTOR_LABELS, result.deviations):
        with col:
            st.metric(label, f"{dev:+.0f}%")


def render_scatter(dataset: Dataset, result: ForecastResult, controls: Controls):
    st.subheader("SWE vs Streamflow Relationship")
    st.caption("Colour: spring precipitation (red dry, blue wet) · Size: fall soil moisture")
    fig = scatter_figure(dataset, result, swe_pct=controls.swe_pct, fall_sm_pct=controls.fall_sm_pct)
    st.plotly_chart(fig, use_container_width=True, config={"displaylogo": False, "modeBarButtonsToRemove": ["select2d", "lasso2d"]})


def analog_table(result: ForecastResult, dataset: Dataset) -> pd.DataFrame:
    resp_pct = dataset.response_column
    resp_mm = dataset.baseline.response_column
    rows = [
        {
            "Water year": rec.year,
            "SWE %": rec.swe_pct,
            "Fall SM %": rec.fall_sm_pct,
            "Spring P %": rec.spring_precip_pct,
            "Streamflow %": getattr(rec, resp_pct),
            "Streamflow (mm)": getattr(rec, resp_mm),
        }
        for rec in result.analog_years
    ]
    return pd.DataFrame(rows, columns=["Water year", "SWE %", "Fall SM %", "Spring P %", "Streamflow %", "Streamflow (mm)"])


def render_analog_years(result: ForecastResult, dataset: Dataset):
    st.subheader("Analog years")
    table = analog_table(result, dataset)
    if table.empty:
        st.info("No historical year is within tolerance of the current inputs.")
        return
    st.dataframe(table.style.format(precision=1), hide_index=True, use_container_width=True)
