"""Pipeline constants and policy selection.

Constants describe the input CSV layout and the fixed baseline window.
`PipelinePolicy` bundles the interchangeable strategies (fit method, analog
selection, streamflow denominator) so the pipeline never hard-codes them.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal, Mapping, Optional

FitStrategy = Literal["independent", "joint"]
AnalogPolicy = Literal["tolerance", "nearest"]
StreamflowBasis = Literal["seasonal", "total"]

FIT_STRATEGIES: tuple[str, ...] = ("independent", "joint")
ANALOG_POLICIES: tuple[str, ...] = ("tolerance", "nearest")
STREAMFLOW_BASES: tuple[str, ...] = ("seasonal", "total")

BASELINE_START_YEAR = 1991
BASELINE_END_YEAR = 2020

YEAR_COLUMN = "water_year"

# CSV header -> internal column name (mm)
MEASUREMENT_COLUMNS: dict[str, str] = {
    "apr1_swe_mm": "swe_mm",
    "fall_sm_oct_nov_avg_mm": "fall_sm_mm",
    "spring_precip_apr_jul_mm": "spring_precip_mm",
    "key_streamflow_apr_jul_mm": "seasonal_streamflow_mm",
    "total_streamflow_mm": "total_streamflow_mm",
}

# internal mm column -> derived percent-of-baseline column
PCT_COLUMNS: dict[str, str] = {
    "swe_mm": "swe_pct",
    "fall_sm_mm": "fall_sm_pct",
    "spring_precip_mm": "spring_precip_pct",
    "seasonal_streamflow_mm": "seasonal_streamflow_pct",
    "total_streamflow_mm": "total_streamflow_pct",
}

PREDICTOR_COLUMNS: tuple[str, str, str] = ("swe_pct", "fall_sm_pct", "spring_precip_pct")

RESPONSE_MM_COLUMNS: dict[str, str] = {
    "seasonal": "seasonal_streamflow_mm",
    "total": "total_streamflow_mm",
}

ZERO_MEAN_EPS = 1e-9
HISTOGRAM_EPS = 1e-6
DETERMINANT_EPS = 1e-10  # relative to the product of the XᵀX diagonal

DEFAULT_BIN_COUNT = 15
DEFAULT_ANALOG_TOLERANCE = 15.0
MAX_ANALOG_YEARS = 5
NEAREST_ANALOG_COLUMNS: tuple[str, str] = ("swe_pct", "spring_precip_pct")


def _check_choice(name: str, value: str, allowed: tuple[str, ...]) -> None:
    if value not in allowed:
        raise ValueError(f"Unknown {name} {value!r}; expected one of {', '.join(allowed)}")


@dataclass(frozen=True)
class PipelinePolicy:
    fit_strategy: FitStrategy = "independent"
    analog_policy: AnalogPolicy = "tolerance"
    streamflow_basis: StreamflowBasis = "seasonal"
    analog_tolerance: float = DEFAULT_ANALOG_TOLERANCE
    max_analogs: int = MAX_ANALOG_YEARS
    bin_count: int = DEFAULT_BIN_COUNT

    def __post_init__(self) -> None:
        _check_choice("fit strategy", self.fit_strategy, FIT_STRATEGIES)
        _check_choice("analog policy", self.analog_policy, ANALOG_POLICIES)
        _check_choice("streamflow basis", self.streamflow_basis, STREAMFLOW_BASES)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PipelinePolicy":
        """Build a policy from INFLOW_* environment variables (app entry point only).

        Recognised: INFLOW_FIT_STRATEGY, INFLOW_ANALOG_POLICY, INFLOW_STREAMFLOW_BASIS,
        INFLOW_ANALOG_TOLERANCE, INFLOW_BIN_COUNT. Unset values keep defaults.
        """
        env = os.environ if environ is None else environ
        default = cls()
        return cls(
            fit_strategy=env.get("INFLOW_FIT_STRATEGY", default.fit_strategy).strip().lower(),  # type: ignore[arg-type]
            analog_policy=env.get("INFLOW_ANALOG_POLICY", default.analog_policy).strip().lower(),  # type: ignore[arg-type]
            streamflow_basis=env.get("INFLOW_STREAMFLOW_BASIS", default.streamflow_basis).strip().lower(),  # type: ignore[arg-type]
            analog_tolerance=float(env.get("INFLOW_ANALOG_TOLERANCE", default.analog_tolerance)),
            bin_count=int(env.get("INFLOW_BIN_COUNT", default.bin_count)),
        )


__all__ = [
    "FitStrategy",
    "AnalogPolicy",
    "StreamflowBasis",
    "PipelinePolicy",
    "BASELINE_START_YEAR",
    "BASELINE_END_YEAR",
    "YEAR_COLUMN",
    "MEASUREMENT_COLUMNS",
    "PCT_COLUMNS",
    "PREDICTOR_COLUMNS",
    "RESPONSE_MM_COLUMNS",
    "ZERO_MEAN_EPS",
    "HISTOGRAM_EPS",
    "DETERMINANT_EPS",
    "DEFAULT_BIN_COUNT",
    "DEFAULT_ANALOG_TOLERANCE",
    "MAX_ANALOG_YEARS",
    "NEAREST_ANALOG_COLUMNS",
]
