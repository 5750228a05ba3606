from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

import numpy as np
import pandas as pd
import requests

from .baseline import BaselineStatistics, VariableRange, compute_baseline, compute_ranges, normalize
from .config import (
    MEASUREMENT_COLUMNS,
    PCT_COLUMNS,
    PREDICTOR_COLUMNS,
    YEAR_COLUMN,
    PipelinePolicy,
)
from .errors import DataFormatError
from .histogram import build_histograms
from .paths import is_remote

RECORD_COLUMNS = ["year", *MEASUREMENT_COLUMNS.values()]


@dataclass(frozen=True)
class YearRecord:
    year: int
    swe_mm: float
    fall_sm_mm: float
    spring_precip_mm: float
    seasonal_streamflow_mm: float
    total_streamflow_mm: float
    swe_pct: float
    fall_sm_pct: float
    spring_precip_pct: float
    seasonal_streamflow_pct: float
    total_streamflow_pct: float

    @classmethod
    def from_row(cls, row: Mapping) -> "YearRecord":
        values = {col: float(row[col]) for col in (*MEASUREMENT_COLUMNS.values(), *PCT_COLUMNS.values())}
        return cls(year=int(row["year"]), **values)


@dataclass(frozen=True)
class Dataset:
    """Normalized water-year records plus derived read-only structures.

    years      : one row per input record (duplicates kept), mm + *_pct columns
    baseline   : 1991-2020 means
    ranges     : *_pct column -> VariableRange over all years
    histograms : *_pct column -> histogram frame (predictors + response)
    """

    years: pd.DataFrame
    baseline: BaselineStatistics
    ranges: Mapping[str, VariableRange]
    histograms: Mapping[str, pd.DataFrame]

    @property
    def streamflow_basis(self) -> str:
        return self.baseline.streamflow_basis

    @property
    def response_column(self) -> str:
        return PCT_COLUMNS[self.baseline.response_column]

    @property
    def response_range(self) -> VariableRange:
        return self.ranges[self.response_column]

    def __len__(self) -> int:
        return len(self.years)

    def records(self) -> list[YearRecord]:
        return [YearRecord.from_row(row) for row in self.years.to_dict("records")]

    def find_year(self, year: int) -> Optional[YearRecord]:
        """First record with the given water year (duplicates shadow later rows)."""
        match = self.years[self.years["year"] == int(year)]
        if match.empty:
            return None
        return YearRecord.from_row(match.iloc[0])


def read_source(source: str, *, timeout: float = 30.0) -> str:
    """Fetch raw CSV text from an http(s) URL or a local path."""
    if is_remote(source):
        try:
            resp = requests.get(source, timeout=timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise DataFormatError(f"Error loading {source}: {exc}") from exc
        return resp.text
    path = Path(source).expanduser()
    if not path.is_file():
        raise DataFormatError(f"Data file not found: {path}")
    try:
        return path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise DataFormatError(f"Error reading {path}: {exc}") from exc


def parse_records(raw_text: str) -> pd.DataFrame:
    """Parse CSV text into typed year records.

    Returns DataFrame with columns: year, swe_mm, fall_sm_mm, spring_precip_mm,
    seasonal_streamflow_mm, total_streamflow_mm. Rows whose water_year is blank or
    non-integral are dropped; blank, non-numeric or infinite measurements become 0.
    """
    if raw_text is None or not str(raw_text).strip():
        raise DataFormatError("Empty input; expected CSV text with a header row.")
    try:
        raw = pd.read_csv(io.StringIO(raw_text), skip_blank_lines=True)
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as exc:
        raise DataFormatError(f"Error parsing CSV: {exc}") from exc
    raw.columns = [str(c).strip() for c in raw.columns]
    if YEAR_COLUMN not in raw.columns:
        raise DataFormatError(f"Missing required column {YEAR_COLUMN!r}")

    year = pd.to_numeric(raw[YEAR_COLUMN], errors="coerce").astype(float)
    valid = np.isfinite(year) & (year == np.floor(year))
    dropped = int((~valid).sum())
    if dropped:
        logging.getLogger(__name__).info("Dropped %d rows without a valid %s", dropped, YEAR_COLUMN)

    out = pd.DataFrame({"year": year[valid].astype(int)})
    for csv_col, col in MEASUREMENT_COLUMNS.items():
        if csv_col in raw.columns:
            values = pd.to_numeric(raw.loc[valid, csv_col], errors="coerce").astype(float)
            non_finite = int(np.isinf(values).sum())
            if non_finite:
                logging.getLogger(__name__).warning("Column %s: %d non-finite values treated as 0", csv_col, non_finite)
            out[col] = values.replace([np.inf, -np.inf], np.nan).fillna(0.0)
        else:
            logging.getLogger(__name__).warning("Column %s missing; treating as 0", csv_col)
            out[col] = 0.0
    return out.reset_index(drop=True)[RECORD_COLUMNS]


def load_dataset(raw_text: str, policy: Optional[PipelinePolicy] = None) -> Dataset:
    """Parse, normalize and summarise raw CSV text.

    Raises DataFormatError if the text is unusable or has no baseline years.
    """
    policy = policy or PipelinePolicy()
    records = parse_records(raw_text)
    baseline = compute_baseline(records, policy.streamflow_basis)
    years = normalize(records, baseline)
    ranges = compute_ranges(years)
    response_col = PCT_COLUMNS[baseline.response_column]
    histograms = build_histograms(years, [*PREDICTOR_COLUMNS, response_col], policy.bin_count)
    logging.getLogger(__name__).info(
        "Loaded %d water years (%d baseline, streamflow basis=%s)",
        len(years), baseline.n_years, policy.streamflow_basis,
    )
    return Dataset(years=years, baseline=baseline, ranges=ranges, histograms=histograms)


def load_dataset_from_source(source: str, policy: Optional[PipelinePolicy] = None) -> Dataset:
    return load_dataset(read_source(source), policy)


__all__ = [
    "RECORD_COLUMNS",
    "YearRecord",
    "Dataset",
    "read_source",
    "parse_records",
    "load_dataset",
    "load_dataset_from_source",
]
