from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from scipy.spatial.distance import cdist

from .config import (
    DEFAULT_ANALOG_TOLERANCE,
    MAX_ANALOG_YEARS,
    NEAREST_ANALOG_COLUMNS,
    PREDICTOR_COLUMNS,
    PipelinePolicy,
)
from .data import Dataset, YearRecord
from .regression import RegressionModel


@dataclass(frozen=True)
class ForecastResult:
    percent_of_baseline: float  # clamped into historical streamflow range
    absolute_value: float  # mm
    analog_years: Tuple[YearRecord, ...]
    raw_percent: float
    deviations: Tuple[float, float, float]  # input - 100 per predictor
    baseline_mean: float  # response baseline mean (mm)


def select_analogs_tolerance(
    years: pd.DataFrame,
    inputs: Sequence[float],
    response_mm_column: str,
    *,
    tolerance: float = DEFAULT_ANALOG_TOLERANCE,
    limit: int = MAX_ANALOG_YEARS,
) -> pd.DataFrame:
    """Years with every predictor within ±tolerance points of the inputs.

    Ordered by descending response (mm), ties by ascending year; at most `limit` rows.
    """
    if years.empty:
        return years
    mask = np.ones(len(years), dtype=bool)
    for col, value in zip(PREDICTOR_COLUMNS, inputs):
        mask &= np.abs(years[col].to_numpy(dtype=float) - float(value)) <= tolerance
    hits = years.loc[mask]
    return hits.sort_values([response_mm_column, "year"], ascending=[False, True], kind="mergesort").head(limit)


def select_analogs_nearest(
    years: pd.DataFrame,
    inputs: Sequence[float],
    *,
    columns: Sequence[str] = NEAREST_ANALOG_COLUMNS,
    limit: int = MAX_ANALOG_YEARS,
) -> pd.DataFrame:
    """Years ranked by Euclidean distance to the inputs over `columns` (no tolerance gate)."""
    if years.empty:
        return years
    lookup = dict(zip(PREDICTOR_COLUMNS, inputs))
    target = np.array([[float(lookup[c]) for c in columns]])
    dist = cdist(years[list(columns)].to_numpy(dtype=float), target).ravel()
    ranked = years.assign(_distance=dist).sort_values(["_distance", "year"], kind="mergesort")
    return ranked.head(limit).drop(columns="_distance")


def compute_forecast(
    dataset: Dataset,
    model: RegressionModel,
    swe_pct: float,
    fall_sm_pct: float,
    spring_precip_pct: float,
    policy: Optional[PipelinePolicy] = None,
) -> ForecastResult:
    """Forecast streamflow for one scenario of predictor percentages.

    raw     = 100 + Σ (input_i - 100) · beta_i
    percent = raw clamped to the historical response range
    mm      = percent / 100 · baseline response mean

    Pure: no state is kept between calls.
    """
    policy = policy or PipelinePolicy()
    inputs = (float(swe_pct), float(fall_sm_pct), float(spring_precip_pct))
    deviations = tuple(v - 100.0 for v in inputs)
    raw = 100.0 + model.predict_deviation(deviations)
    percent = dataset.response_range.clamp(raw)
    baseline_mean = dataset.baseline.response_mean
    if policy.analog_policy == "nearest":
        analogs = select_analogs_nearest(dataset.years, inputs, limit=policy.max_analogs)
    else:
        analogs = select_analogs_tolerance(
            dataset.years,
            inputs,
            dataset.baseline.response_column,
            tolerance=policy.analog_tolerance,
            limit=policy.max_analogs,
        )
    return ForecastResult(
        percent_of_baseline=percent,
        absolute_value=percent / 100.0 * baseline_mean,
        analog_years=tuple(YearRecord.from_row(row) for row in analogs.to_dict("records")),
        raw_percent=raw,
        deviations=deviations,  # type: ignore[arg-type]
        baseline_mean=baseline_mean,
    )


__all__ = [
    "ForecastResult",
    "select_analogs_tolerance",
    "select_analogs_nearest",
    "compute_forecast",
]
