"""Streamlit orchestrator app.

Responsibilities are delegated to modules under `inflow`:

  inflow.ui.data.load_all            -> fetch CSV, normalize, fit sensitivity (once)
  inflow.ui.controls.build_controls  -> quick-select year, reset, three sliders
  inflow.ui.state.AppState           -> snapshot passed to the forecast engine
  inflow.ui.sections.*               -> forecast panel, scatter, analog years, methodology

This file only sequences the page; pipeline logic lives in the package.

Environment:
  DATA_ROOT            project root override (bundled CSV under data/)
  INFLOW_DATA_SOURCE   CSV path or http(s) URL
  INFLOW_FIT_STRATEGY  independent | joint
  INFLOW_ANALOG_POLICY tolerance | nearest
  INFLOW_STREAMFLOW_BASIS seasonal | total
  INFLOW_LOG_LEVEL     logging level (default INFO)

Run: streamlit run app.py
"""
from __future__ import annotations

import logging
import os

import streamlit as st

from inflow.config import PipelinePolicy
from inflow.errors import DataFormatError
from inflow.paths import default_data_source
from inflow.ui.controls import build_controls
from inflow.ui.data import load_all
from inflow.ui.sections import render_analog_years, render_forecast_panel, render_methodology, render_scatter
from inflow.ui.state import AppState, LoadedData

logging.basicConfig(level=getattr(logging, os.environ.get("INFLOW_LOG_LEVEL", "INFO").upper(), logging.INFO))

DATA_SOURCE = default_data_source()


@st.cache_resource(show_spinner=False)
def _load(source: str, policy: PipelinePolicy) -> LoadedData:
    return load_all(source, policy)


st.set_page_config(page_title="Seasonal Inflow Forecast", layout="wide")
st.title("Seasonal Inflow Forecasting Tool")
st.caption("Streamflow sensitivity to snowpack, fall soil moisture and spring precipitation (baseline: 1991-2020)")

try:
    policy = PipelinePolicy.from_env()
except ValueError as exc:
    st.error(f"Invalid configuration: {exc}")
    st.stop()

with st.spinner("Loading water-year data..."):
    try:
        ld = _load(DATA_SOURCE, policy)
    except DataFormatError as exc:
        st.error(f"Error loading data: {exc}")
        st.stop()

controls = build_controls(ld)
state = AppState(data=ld, controls=controls)
result = state.forecast()

col1, col2 = st.columns([1, 2])
with col1:
    render_forecast_panel(result)
    render_analog_years(result, ld.dataset)
with col2:
    render_scatter(ld.dataset, result, controls)

render_methodology(ld.model, ld.dataset, ld.policy)
st.caption(f"Data source: {ld.source} · {len(ld.dataset)} water years")
