"""Baseline-period statistics and percent-of-baseline normalization.

Every measurement column is expressed relative to its 1991-2020 mean:

    pct = raw / baseline_mean * 100

so 100 means "long-run average". Means ignore non-numeric values. A mean of
exactly zero is replaced by ZERO_MEAN_EPS before dividing.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping

import numpy as np
import pandas as pd

from .config import (
    BASELINE_END_YEAR,
    BASELINE_START_YEAR,
    PCT_COLUMNS,
    RESPONSE_MM_COLUMNS,
    ZERO_MEAN_EPS,
    StreamflowBasis,
)
from .errors import DataFormatError


@dataclass(frozen=True)
class BaselineStatistics:
    means: Mapping[str, float]  # internal mm column -> baseline mean (mm)
    n_years: int
    streamflow_basis: StreamflowBasis = "seasonal"
    start_year: int = BASELINE_START_YEAR
    end_year: int = BASELINE_END_YEAR

    @property
    def response_column(self) -> str:
        return RESPONSE_MM_COLUMNS[self.streamflow_basis]

    @property
    def response_mean(self) -> float:
        return float(self.means[self.response_column])

    def mean(self, column: str) -> float:
        return float(self.means[column])


@dataclass(frozen=True)
class VariableRange:
    min: float
    max: float

    def clamp(self, value: float) -> float:
        return float(min(self.max, max(self.min, value)))

    @property
    def span(self) -> float:
        return self.max - self.min


def _safe_mean(values: pd.Series) -> float:
    numeric = pd.to_numeric(values, errors="coerce")
    mean = numeric.mean(skipna=True)
    if pd.isna(mean) or mean == 0:
        logging.getLogger(__name__).warning("Baseline mean of %s is zero; using epsilon", values.name)
        return ZERO_MEAN_EPS
    return float(mean)


def baseline_subset(records: pd.DataFrame, start_year: int = BASELINE_START_YEAR, end_year: int = BASELINE_END_YEAR) -> pd.DataFrame:
    if records.empty or "year" not in records.columns:
        return records.iloc[0:0]
    mask = (records["year"] >= start_year) & (records["year"] <= end_year)
    return records.loc[mask]


def compute_baseline(records: pd.DataFrame, streamflow_basis: StreamflowBasis = "seasonal") -> BaselineStatistics:
    """Return per-variable means over the baseline window.

    Raises DataFormatError when no record falls inside the window.
    """
    if streamflow_basis not in RESPONSE_MM_COLUMNS:
        raise ValueError(f"Unknown streamflow basis {streamflow_basis!r}")
    base = baseline_subset(records)
    if base.empty:
        raise DataFormatError(
            f"No baseline ({BASELINE_START_YEAR}-{BASELINE_END_YEAR}) records found in input."
        )
    means = {col: _safe_mean(base[col]) for col in PCT_COLUMNS if col in base.columns}
    return BaselineStatistics(means=means, n_years=int(len(base)), streamflow_basis=streamflow_basis)


def normalize(records: pd.DataFrame, baseline: BaselineStatistics) -> pd.DataFrame:
    """Return a copy of records with a *_pct column per measurement column."""
    out = records.copy()
    for mm_col, pct_col in PCT_COLUMNS.items():
        if mm_col not in out.columns:
            continue
        out[pct_col] = out[mm_col].astype(float) / baseline.mean(mm_col) * 100.0
    return out


def compute_ranges(years: pd.DataFrame) -> dict[str, VariableRange]:
    """Global min/max of every percent column (all years, not only baseline)."""
    ranges: dict[str, VariableRange] = {}
    for pct_col in PCT_COLUMNS.values():
        if pct_col not in years.columns:
            continue
        vals = years[pct_col].to_numpy(dtype=float)
        vals = vals[np.isfinite(vals)]
        if vals.size == 0:
            ranges[pct_col] = VariableRange(100.0, 100.0)
        else:
            ranges[pct_col] = VariableRange(float(vals.min()), float(vals.max()))
    return ranges


__all__ = [
    "BaselineStatistics",
    "VariableRange",
    "baseline_subset",
    "compute_baseline",
    "normalize",
    "compute_ranges",
]
