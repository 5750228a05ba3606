"""Seasonal inflow forecast (inflow) package.

Modules:
  config: CSV layout constants, baseline window, PipelinePolicy
  paths: project root and data source resolution
  errors: DataFormatError, DegenerateFitWarning
  data: CSV parsing, YearRecord / Dataset, load_dataset
  baseline: 1991-2020 means, percent-of-baseline, variable ranges
  histogram: fixed-width binning for slider backgrounds
  regression: independent-slope / joint least-squares sensitivities
  forecast: clamped forecast + analog years
  plots: interactive Plotly figures
"""

from .config import PipelinePolicy
from .data import Dataset, YearRecord, load_dataset, load_dataset_from_source
from .errors import DataFormatError, DegenerateFitWarning
from .forecast import ForecastResult, compute_forecast
from .histogram import compute_histogram
from .regression import RegressionModel, fit_sensitivity

__all__ = [
    "PipelinePolicy",
    "Dataset",
    "YearRecord",
    "load_dataset",
    "load_dataset_from_source",
    "DataFormatError",
    "DegenerateFitWarning",
    "ForecastResult",
    "compute_forecast",
    "compute_histogram",
    "RegressionModel",
    "fit_sensitivity",
]
