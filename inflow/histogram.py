from __future__ import annotations

from typing import Iterable, Mapping

import numpy as np
import pandas as pd

from .config import DEFAULT_BIN_COUNT, HISTOGRAM_EPS

HISTOGRAM_COLUMNS = ["value", "count", "bin_start", "bin_end"]


def compute_histogram(series: Iterable[float], bin_count: int = DEFAULT_BIN_COUNT) -> pd.DataFrame:
    """Bin a numeric series into equal-width buckets spanning [min, max].

    Returns DataFrame with columns: value (bin midpoint), count, bin_start, bin_end.
    Bucket index is floor((v - min) / width), clamped into the last bin so the
    maximum is counted. Non-finite values are dropped. Empty input -> empty frame;
    a (near) constant series -> single bin of width 1 centred on the value.
    """
    if bin_count < 1:
        raise ValueError("bin_count must be >= 1")
    x = np.asarray(list(series), dtype=float)
    x = x[np.isfinite(x)]
    if x.size == 0:
        return pd.DataFrame(columns=HISTOGRAM_COLUMNS)
    lo = float(x.min())
    hi = float(x.max())
    if abs(hi - lo) < HISTOGRAM_EPS:
        return pd.DataFrame(
            {"value": [lo], "count": [int(x.size)], "bin_start": [lo - 0.5], "bin_end": [lo + 0.5]}
        )
    width = (hi - lo) / bin_count
    idx = np.floor((x - lo) / width).astype(int)
    idx = np.clip(idx, 0, bin_count - 1)
    counts = np.bincount(idx, minlength=bin_count)
    i = np.arange(bin_count)
    return pd.DataFrame({
        "value": lo + (i + 0.5) * width,
        "count": counts.astype(int),
        "bin_start": lo + i * width,
        "bin_end": lo + (i + 1) * width,
    })


def build_histograms(years: pd.DataFrame, columns: Iterable[str], bin_count: int = DEFAULT_BIN_COUNT) -> Mapping[str, pd.DataFrame]:
    return {col: compute_histogram(years[col], bin_count) for col in columns if col in years.columns}


__all__ = ["HISTOGRAM_COLUMNS", "compute_histogram", "build_histograms"]
