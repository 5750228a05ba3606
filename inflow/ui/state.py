from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from inflow.config import PipelinePolicy
from inflow.data import Dataset
from inflow.forecast import ForecastResult, compute_forecast
from inflow.regression import RegressionModel

__all__ = [
    "LoadedData",
    "Controls",
    "AppState",
]

@dataclass(frozen=True)
class LoadedData:
    dataset: Dataset
    model: RegressionModel
    policy: PipelinePolicy
    source: str

@dataclass(frozen=True)
class Controls:
    swe_pct: float
    fall_sm_pct: float
    spring_precip_pct: float
    quick_year: Optional[int] = None

    @property
    def inputs(self) -> tuple[float, float, float]:
        return (self.swe_pct, self.fall_sm_pct, self.spring_precip_pct)

@dataclass(frozen=True)
class AppState:
    """Snapshot handed to the forecast engine on every rerun."""
    data: LoadedData
    controls: Controls

    def forecast(self) -> ForecastResult:
        return compute_forecast(
            self.data.dataset,
            self.data.model,
            *self.controls.inputs,
            policy=self.data.policy,
        )
