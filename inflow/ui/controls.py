from __future__ import annotations
from typing import Optional

import streamlit as st

from .state import Controls, LoadedData
from inflow.baseline import VariableRange
from inflow.config import PREDICTOR_COLUMNS
from inflow.data import Dataset
from inflow.plots import slider_histogram_figure

__all__ = ["build_controls", "SLIDER_KEYS", "SLIDER_LABELS"]

SLIDER_KEYS = {
    "swe_pct": "ctl_swe_pct",
    "fall_sm_pct": "ctl_fall_sm_pct",
    "spring_precip_pct": "ctl_spring_precip_pct",
}
SLIDER_LABELS = {
    "swe_pct": "April 1st SWE",
    "fall_sm_pct": "Fall Soil Moisture (Oct-Nov)",
    "spring_precip_pct": "Spring Precipitation (Apr-Jul)",
}
SLIDER_COLORS = {
    "swe_pct": "#93c5fd",
    "fall_sm_pct": "#fcd34d",
    "spring_precip_pct": "#67e8f9",
}
QUICK_YEAR_KEY = "ctl_quick_year"


def _slider_bounds(rng: VariableRange) -> tuple[float, float]:
    # st.slider needs min < max
    if rng.span <= 0:
        return rng.min - 1.0, rng.max + 1.0
    return rng.min, rng.max


def _set_inputs(values: dict[str, float]) -> None:
    for col, val in values.items():
        st.session_state[SLIDER_KEYS[col]] = float(val)


def _on_reset(dataset: Dataset) -> None:
    _set_inputs({col: dataset.ranges[col].clamp(100.0) for col in PREDICTOR_COLUMNS})
    st.session_state[QUICK_YEAR_KEY] = None


def _on_quick_select(dataset: Dataset) -> None:
    year = st.session_state.get(QUICK_YEAR_KEY)
    if year is None:
        return
    rec = dataset.find_year(year)
    if rec is not None:
        _set_inputs({col: getattr(rec, col) for col in PREDICTOR_COLUMNS})


def build_controls(ld: LoadedData) -> Controls:
    dataset = ld.dataset
    for col in PREDICTOR_COLUMNS:
        st.session_state.setdefault(SLIDER_KEYS[col], dataset.ranges[col].clamp(100.0))

    st.sidebar.header("Input Parameters")
    st.sidebar.button("Reset to 100%", on_click=_on_reset, args=(dataset,), help="Reset all inputs to the 1991-2020 average")

    years = dataset.years.drop_duplicates("year", keep="first")
    labels: dict[Optional[int], str] = {None: "-- Select a water year --"}
    for year, pct in zip(years["year"], years[dataset.response_column]):
        labels[int(year)] = f"WY {int(year)} ({pct:.0f}%)"
    quick_year = st.sidebar.selectbox(
        "Quick Select Historical Year",
        list(labels),
        format_func=labels.get,
        key=QUICK_YEAR_KEY,
        on_change=_on_quick_select,
        args=(dataset,),
    )

    values: dict[str, float] = {}
    for col in PREDICTOR_COLUMNS:
        rng = dataset.ranges[col]
        lo, hi = _slider_bounds(rng)
        current = float(st.session_state[SLIDER_KEYS[col]])
        st.sidebar.plotly_chart(
            slider_histogram_figure(dataset.histograms.get(col), current, rng, color=SLIDER_COLORS[col]),
            use_container_width=True,
            config={"displayModeBar": False, "staticPlot": True},
            key=f"hist_{col}",
        )
        values[col] = float(st.sidebar.slider(
            f"{SLIDER_LABELS[col]} (% of avg)",
            min_value=float(lo),
            max_value=float(hi),
            step=0.5,
            key=SLIDER_KEYS[col],
        ))
        st.sidebar.caption(f"{lo:.0f}%  ·  100% (1991-2020 avg)  ·  {hi:.0f}%")

    return Controls(
        swe_pct=values["swe_pct"],
        fall_sm_pct=values["fall_sm_pct"],
        spring_precip_pct=values["spring_precip_pct"],
        quick_year=quick_year,
    )
