from __future__ import annotations
import streamlit as st

from inflow.config import BASELINE_END_YEAR, BASELINE_START_YEAR, PipelinePolicy
from inflow.data import Dataset
from inflow.regression import RegressionModel

__all__ = ["render_methodology", "markdown_doc"]

_STRATEGY_TEXT = {
    "independent": "each coefficient is a per-variable slope Σ(x·y)/Σ(x²), ignoring cross-correlation between predictors",
    "joint": "coefficients solve the 3x3 normal equations (XᵀX)β = Xᵀy by ordinary least squares",
}
_ANALOG_TEXT = {
    "tolerance": "years with all three predictors within ±{tol:.0f} points of the inputs, highest streamflow first",
    "nearest": "years closest to the inputs in SWE % / spring precipitation % (Euclidean distance)",
}


def markdown_doc(model: RegressionModel, dataset: Dataset, policy: PipelinePolicy) -> str:
    b1, b2, b3 = model.coefficients
    basis = "April-July" if dataset.streamflow_basis == "seasonal" else "water-year total"
    lines = [
        "### Forecasting model",
        f"A linear sensitivity model relates {basis} streamflow to three seasonal indicators. "
        f"All values are percentages of the {BASELINE_START_YEAR}-{BASELINE_END_YEAR} average "
        f"({dataset.baseline.n_years} baseline years).",
        "",
        "`Streamflow% = 100 + β₁·(SWE% − 100) + β₂·(FallSM% − 100) + β₃·(SpringPrecip% − 100)`",
        "",
        f"Fit: {_STRATEGY_TEXT[model.strategy]}.",
        "",
        f"- β₁ (SWE) = {b1:.4f}",
        f"- β₂ (Fall SM) = {b2:.4f}",
        f"- β₃ (Spring Precip) = {b3:.4f}",
        "",
        "The forecast is clamped to the observed streamflow range; it is never extrapolated.",
        "",
        f"Analog years: {_ANALOG_TEXT[policy.analog_policy].format(tol=policy.analog_tolerance)}; at most {policy.max_analogs}.",
    ]
    if model.degenerate:
        lines += ["", "⚠️ The predictor matrix was singular; coefficients were not updated."]
    return "\n".join(lines)


def render_methodology(model: RegressionModel, dataset: Dataset, policy: PipelinePolicy):
    with st.expander("Methodology & Information", expanded=False):
        st.markdown(markdown_doc(model, dataset, policy))
