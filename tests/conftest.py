"""Shared fixtures for pipeline tests."""

from pathlib import Path

import pytest

from inflow.data import load_dataset

HEADER = (
    "water_year,apr1_swe_mm,fall_sm_oct_nov_avg_mm,spring_precip_apr_jul_mm,"
    "key_streamflow_apr_jul_mm,total_streamflow_mm"
)
SAMPLE_CSV = Path(__file__).resolve().parent.parent / "data" / "water_year_metrics.csv"


def build_csv(rows):
    """Build CSV text from rows of (year, swe, fall_sm, spring_p, seasonal_q, total_q)."""
    lines = [HEADER] + [",".join("" if v is None else str(v) for v in row) for row in rows]
    return "\n".join(lines) + "\n"


# Baseline SWE mean = 200 mm, seasonal flow mean = 100 mm, total flow mean = 200 mm.
# Fall soil moisture and spring precipitation are constant (always 100 %).
SMALL_ROWS = [
    (1980, 400, 100, 50, 250, 500),
    (1991, 200, 100, 50, 100, 200),
    (2015, 100, 100, 50, 50, 100),
    (2016, 300, 100, 50, 150, 300),
]

# Six baseline years, all predictors within ±5 points of 100 %.
CLUSTER_ROWS = [
    (1991, 200, 100, 50, 100, 150),
    (1992, 205, 100, 50, 120, 170),
    (1993, 195, 100, 50, 80, 130),
    (1994, 210, 100, 50, 120, 160),
    (1995, 190, 100, 50, 90, 140),
    (1996, 200, 100, 50, 110, 150),
]


@pytest.fixture
def small_text():
    return build_csv(SMALL_ROWS)


@pytest.fixture
def small_dataset(small_text):
    return load_dataset(small_text)


@pytest.fixture
def cluster_dataset():
    return load_dataset(build_csv(CLUSTER_ROWS))


@pytest.fixture
def sample_text():
    return SAMPLE_CSV.read_text(encoding="utf-8")


@pytest.fixture
def sample_dataset(sample_text):
    return load_dataset(sample_text)


@pytest.fixture
def make_csv():
    return build_csv


@pytest.fixture
def csv_header():
    return HEADER
