from __future__ import annotations

import math
from typing import Optional

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from .baseline import VariableRange
from .data import Dataset
from .forecast import ForecastResult

# dry (red) -> normal (yellow) -> wet (blue) spring precipitation
SPRING_PRECIP_COLORSCALE = [
    [0.0, "rgb(215,48,39)"],
    [0.25, "rgb(255,110,30)"],
    [0.5, "rgb(250,220,50)"],
    [0.75, "rgb(70,200,200)"],
    [1.0, "rgb(30,120,240)"],
]
MARKER_SIZE_MIN = 8.0
MARKER_SIZE_MAX = 22.0


def axis_ticks(rng: VariableRange, step: float = 25.0) -> tuple[tuple[float, float], list[float]]:
    """Axis bounds snapped outward to `step` and tick list always including 100."""
    lo = math.floor(rng.min / step) * step
    hi = math.ceil(rng.max / step) * step
    if hi <= lo:
        hi = lo + step
    ticks = [float(t) for t in np.arange(lo, hi + step / 2, step)]
    if 100.0 not in ticks:
        ticks = sorted(ticks + [100.0])
    return (lo, hi), ticks


def marker_sizes(values: pd.Series, rng: VariableRange) -> np.ndarray:
    norm = (values.to_numpy(dtype=float) - rng.min) / max(1e-9, rng.span)
    return MARKER_SIZE_MIN + np.clip(norm, 0.0, 1.0) * (MARKER_SIZE_MAX - MARKER_SIZE_MIN)


def scatter_figure(dataset: Dataset, forecast: Optional[ForecastResult] = None, swe_pct: Optional[float] = None,
                   fall_sm_pct: Optional[float] = None) -> go.Figure:
    """SWE % vs streamflow % per water year; colour = spring precip %, size = fall soil moisture %."""
    years = dataset.years
    resp_col = dataset.response_column
    resp_mm = dataset.baseline.response_column
    swe_rng = dataset.ranges["swe_pct"]
    sm_rng = dataset.ranges["fall_sm_pct"]
    sp_rng = dataset.ranges["spring_precip_pct"]
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=years["swe_pct"],
        y=years[resp_col],
        mode="markers",
        name="Water years",
        marker=dict(
            size=marker_sizes(years["fall_sm_pct"], sm_rng),
            color=years["spring_precip_pct"],
            colorscale=SPRING_PRECIP_COLORSCALE,
            cmin=sp_rng.min,
            cmax=sp_rng.max,
            opacity=0.6,
            line=dict(width=0.5, color="#444"),
            colorbar=dict(title="Spring P (%)"),
        ),
        customdata=np.stack([
            years["year"].to_numpy(),
            years["fall_sm_pct"].to_numpy(dtype=float) - 100.0,
            years["spring_precip_pct"].to_numpy(dtype=float) - 100.0,
            years[resp_mm].to_numpy(dtype=float),
        ], axis=-1),
        hovertemplate=(
            "WY %{customdata[0]}<br>SWE: %{x:.1f}%<br>Fall SM: %{customdata[1]:+.1f}%"
            "<br>Spring P: %{customdata[2]:+.1f}%<br>Streamflow: %{y:.0f}% (%{customdata[3]:.1f} mm)<extra></extra>"
        ),
    ))
    if forecast is not None and swe_pct is not None:
        size = marker_sizes(pd.Series([fall_sm_pct if fall_sm_pct is not None else 100.0]), sm_rng)
        fig.add_trace(go.Scatter(
            x=[swe_pct],
            y=[forecast.percent_of_baseline],
            mode="markers",
            name="Forecast",
            marker=dict(symbol="star", size=float(size[0]) + 6, color="#ef4444", line=dict(width=1, color="#7f1d1d")),
            hovertemplate="Forecast<br>SWE: %{x:.0f}%<br>Streamflow: %{y:.0f}%<extra></extra>",
        ))
    (x_lo, x_hi), x_ticks = axis_ticks(swe_rng)
    (y_lo, y_hi), y_ticks = axis_ticks(dataset.response_range)
    fig.add_vline(x=100, line=dict(color="#666", width=2))
    fig.add_hline(y=100, line=dict(color="#666", width=2))
    fig.update_layout(
        template="plotly_white",
        title="SWE vs Streamflow Relationship",
        xaxis=dict(title="April 1st SWE (% of 1991-2020 average)", range=[x_lo, x_hi], tickvals=x_ticks),
        yaxis=dict(title="Streamflow (% of 1991-2020 average)", range=[y_lo, y_hi], tickvals=y_ticks),
        height=520,
        showlegend=False,
    )
    return fig


def slider_histogram_figure(histogram: pd.DataFrame, value: float, rng: VariableRange, color: str = "#93c5fd") -> go.Figure:
    """Compact bar strip of historical frequency with the current value marked."""
    fig = go.Figure()
    if histogram is not None and not histogram.empty:
        fig.add_trace(go.Bar(
            x=histogram["value"],
            y=histogram["count"],
            width=(histogram["bin_end"] - histogram["bin_start"]),
            marker_color=color,
            opacity=0.6,
            hovertemplate="%{x:.0f}%: %{y} yrs<extra></extra>",
        ))
    fig.add_vline(x=value, line=dict(color="#ef4444", width=2))
    fig.update_layout(
        template="plotly_white",
        height=70,
        margin=dict(l=0, r=0, t=0, b=0),
        xaxis=dict(range=[rng.min, rng.max] if rng.span > 0 else None, visible=False),
        yaxis=dict(visible=False),
        showlegend=False,
        bargap=0,
    )
    return fig


__all__ = [
    "SPRING_PRECIP_COLORSCALE",
    "axis_ticks",
    "marker_sizes",
    "scatter_figure",
    "slider_histogram_figure",
]
