"""Tests for the sensitivity estimator."""

import warnings

import numpy as np
import pytest

from inflow.errors import DegenerateFitWarning
from inflow.regression import (
    RegressionModel,
    design_matrix,
    fit_independent_slopes,
    fit_joint_least_squares,
    fit_sensitivity,
    invert_3x3,
)


@pytest.fixture
def linear_xy():
    rng = np.random.default_rng(7)
    X = rng.normal(0.0, 25.0, size=(40, 3))
    y = X @ np.array([0.8, 0.3, -0.1])
    return X, y


class TestIndependentSlopes:
    """Per-variable slope strategy."""

    def test_small_dataset_slopes(self, small_dataset):
        model = fit_sensitivity(small_dataset, "independent")
        # x = [100, 0, -50, 50], y = [150, 0, -50, 50]
        assert model.coefficients[0] == pytest.approx(20000.0 / 15000.0)
        assert model.coefficients[1] == 0.0
        assert model.coefficients[2] == 0.0
        assert model.strategy == "independent"
        assert not model.degenerate

    def test_constant_predictor_gets_zero(self):
        X = np.array([[10.0, 0.0, 5.0], [-10.0, 0.0, -5.0]])
        y = np.array([4.0, -4.0])
        beta = fit_independent_slopes(X, y)
        assert beta == pytest.approx((0.4, 0.0, 0.8))

    def test_design_matrix_is_deviation_coded(self, small_dataset):
        X, y = design_matrix(small_dataset.years, small_dataset.response_column)
        assert X.shape == (4, 3)
        assert X[:, 0].tolist() == pytest.approx([100.0, 0.0, -50.0, 50.0])
        assert y.tolist() == pytest.approx([150.0, 0.0, -50.0, 50.0])


class TestJointLeastSquares:
    """Closed-form 3x3 normal-equation strategy."""

    def test_invert_matches_numpy(self):
        m = np.array([[4.0, 1.0, 2.0], [1.0, 3.0, 0.5], [2.0, 0.5, 5.0]])
        np.testing.assert_allclose(invert_3x3(m), np.linalg.inv(m), rtol=1e-10)

    def test_invert_singular_returns_none(self):
        m = np.array([[1.0, 2.0, 3.0], [2.0, 4.0, 6.0], [0.0, 1.0, 1.0]])
        assert invert_3x3(m) is None

    def test_invert_rejects_wrong_shape(self):
        with pytest.raises(ValueError):
            invert_3x3(np.eye(2))

    def test_recovers_exact_coefficients(self, linear_xy):
        X, y = linear_xy
        model = fit_joint_least_squares(X, y)
        assert model.coefficients == pytest.approx((0.8, 0.3, -0.1), abs=1e-8)
        assert model.strategy == "joint"
        assert not model.degenerate

    def test_degenerate_keeps_previous(self):
        X = np.array([[10.0, 0.0, 5.0], [-10.0, 0.0, -5.0], [3.0, 0.0, 1.0]])
        y = np.array([4.0, -4.0, 1.0])
        previous = RegressionModel((0.5, 0.25, 0.125), "joint")
        with pytest.warns(DegenerateFitWarning):
            model = fit_joint_least_squares(X, y, previous)
        assert model.coefficients == (0.5, 0.25, 0.125)
        assert model.degenerate

    def test_scaled_copy_predictor_is_degenerate(self):
        rng = np.random.default_rng(11)
        a = rng.normal(0.0, 40.0, size=30)
        b = rng.normal(0.0, 40.0, size=30)
        X = np.column_stack([a, b, 0.7 * b])
        y = 0.8 * a + 0.3 * b
        previous = RegressionModel((0.5, 0.25, 0.125), "joint")
        with pytest.warns(DegenerateFitWarning):
            model = fit_joint_least_squares(X, y, previous)
        assert model.degenerate
        assert model.coefficients == (0.5, 0.25, 0.125)

    def test_invert_singular_independent_of_scale(self):
        v = np.array([30.0, -20.0, 10.0])
        gram = np.outer(v, v) * 1e4 + np.diag([0.0, 0.0, 1e-9])
        assert invert_3x3(gram) is None
        assert invert_3x3(np.eye(3) * 1e-6) is not None

    def test_degenerate_without_previous_is_zero(self, small_dataset):
        # fall SM and spring precip are constant in the small dataset
        with pytest.warns(DegenerateFitWarning):
            model = fit_sensitivity(small_dataset, "joint")
        assert model.coefficients == (0.0, 0.0, 0.0)
        assert model.degenerate

    def test_sample_dataset_fits_without_warning(self, sample_dataset):
        with warnings.catch_warnings():
            warnings.simplefilter("error", DegenerateFitWarning)
            model = fit_sensitivity(sample_dataset, "joint")
        assert all(np.isfinite(model.coefficients))
        assert model.coefficients[0] > 0


class TestFitSensitivity:
    """Strategy dispatch and determinism."""

    @pytest.mark.parametrize("strategy", ["independent", "joint"])
    def test_deterministic(self, sample_dataset, strategy):
        assert fit_sensitivity(sample_dataset, strategy) == fit_sensitivity(sample_dataset, strategy)

    def test_unknown_strategy(self, sample_dataset):
        with pytest.raises(ValueError):
            fit_sensitivity(sample_dataset, "ridge")

    def test_predict_deviation(self):
        model = RegressionModel((0.8, 0.0, 0.0))
        assert model.predict_deviation((-50.0, 0.0, 0.0)) == pytest.approx(-40.0)
