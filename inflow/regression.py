"""Sensitivity of streamflow to the three seasonal predictors.

Predictors and response are deviation-coded against the baseline:

    x_i = pct_i - 100        y = streamflow_pct - 100

and the model is the intercept-free linear form  y ≈ Σ beta_i · x_i.

Two fitting strategies are available (select one per system):

independent
    beta_i = Σ(x_i·y) / Σ(x_i²), each predictor on its own. A constant
    predictor (zero denominator) gets beta_i = 0.
joint
    Ordinary least squares beta = (XᵀX)⁻¹ Xᵀy with a closed-form cofactor
    inverse of the 3x3 normal matrix. When |det(XᵀX)| / Π diag(XᵀX) is below
    DETERMINANT_EPS (collinear or constant predictors) the fit is skipped: a
    DegenerateFitWarning is emitted and the previous coefficients (zeros if
    none) are returned unchanged.
"""
from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
import pandas as pd

from .config import DETERMINANT_EPS, FIT_STRATEGIES, PREDICTOR_COLUMNS, FitStrategy
from .errors import DegenerateFitWarning

Coefficients = Tuple[float, float, float]
ZERO_COEFFICIENTS: Coefficients = (0.0, 0.0, 0.0)


@dataclass(frozen=True)
class RegressionModel:
    coefficients: Coefficients = ZERO_COEFFICIENTS
    strategy: FitStrategy = "independent"
    degenerate: bool = False

    def predict_deviation(self, deviations) -> float:
        return float(np.dot(np.asarray(deviations, dtype=float), np.asarray(self.coefficients, dtype=float)))


def design_matrix(years: pd.DataFrame, response_column: str) -> tuple[np.ndarray, np.ndarray]:
    """Return deviation-coded (X, y) arrays: X shape (n, 3), y shape (n,)."""
    X = years[list(PREDICTOR_COLUMNS)].to_numpy(dtype=float) - 100.0
    y = years[response_column].to_numpy(dtype=float) - 100.0
    return X, y


def fit_independent_slopes(X: np.ndarray, y: np.ndarray) -> Coefficients:
    X = np.asarray(X, dtype=float)
    y = np.asarray(y, dtype=float)
    sum_xy = (X * y[:, None]).sum(axis=0)
    sum_x2 = (X ** 2).sum(axis=0)
    beta = np.zeros(X.shape[1], dtype=float)
    np.divide(sum_xy, sum_x2, out=beta, where=sum_x2 > 0)
    return tuple(float(b) for b in beta)  # type: ignore[return-value]


def invert_3x3(m, eps: float = DETERMINANT_EPS) -> Optional[np.ndarray]:
    """Inverse of a 3x3 matrix via cofactors / determinant; None if singular.

    The determinant is compared relative to the product of the diagonal, so the
    test does not depend on the units of the predictors: for a Gram matrix XᵀX
    the ratio is 1 for orthogonal columns and 0 for collinear ones.
    """
    a = np.asarray(m, dtype=float)
    if a.shape != (3, 3):
        raise ValueError(f"Expected a 3x3 matrix, got shape {a.shape}")
    cof = np.empty((3, 3), dtype=float)
    for i in range(3):
        for j in range(3):
            minor = np.delete(np.delete(a, i, axis=0), j, axis=1)
            cof[i, j] = (-1) ** (i + j) * (minor[0, 0] * minor[1, 1] - minor[0, 1] * minor[1, 0])
    det = float(np.dot(a[0], cof[0]))
    scale = abs(float(np.prod(np.diag(a))))
    if scale == 0.0:
        scale = 1.0
    if not np.isfinite(det) or abs(det) / scale < eps:
        return None
    return cof.T / det


def fit_joint_least_squares(
    X: np.ndarray,
    y: np.ndarray,
    previous: Optional[RegressionModel] = None,
) -> RegressionModel:
    X = np.asarray(X, dtype=float)
    y = np.asarray(y, dtype=float)
    xtx = X.T @ X
    xty = X.T @ y
    inv = invert_3x3(xtx)
    if inv is None:
        kept = previous.coefficients if previous is not None else ZERO_COEFFICIENTS
        msg = "Predictor matrix is singular (collinear or constant predictors); keeping previous coefficients"
        logging.getLogger(__name__).warning("%s: %s", msg, kept)
        warnings.warn(msg, DegenerateFitWarning, stacklevel=2)
        return RegressionModel(coefficients=kept, strategy="joint", degenerate=True)
    beta = inv @ xty
    return RegressionModel(coefficients=tuple(float(b) for b in beta), strategy="joint")  # type: ignore[arg-type]


def fit_sensitivity(
    dataset,
    strategy: FitStrategy = "independent",
    previous: Optional[RegressionModel] = None,
) -> RegressionModel:
    """Fit coefficients for (SWE, fall soil moisture, spring precipitation).

    `dataset` is an inflow.data.Dataset; the response is its chosen streamflow
    percent column. Depends on the dataset only, never on user inputs.
    """
    if strategy not in FIT_STRATEGIES:
        raise ValueError(f"Unknown fit strategy {strategy!r}")
    if len(dataset.years) == 0:
        return RegressionModel(strategy=strategy)
    X, y = design_matrix(dataset.years, dataset.response_column)
    if strategy == "joint":
        model = fit_joint_least_squares(X, y, previous)
    else:
        model = RegressionModel(coefficients=fit_independent_slopes(X, y), strategy="independent")
    logging.getLogger(__name__).info(
        "Fitted %s sensitivity: swe=%.4f fall_sm=%.4f spring_precip=%.4f",
        model.strategy, *model.coefficients,
    )
    return model


__all__ = [
    "Coefficients",
    "RegressionModel",
    "design_matrix",
    "fit_independent_slopes",
    "invert_3x3",
    "fit_joint_least_squares",
    "fit_sensitivity",
]
