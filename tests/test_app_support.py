"""Tests for configuration, app state and figure builders."""

import pytest

from inflow.baseline import VariableRange
from inflow.config import PipelinePolicy
from inflow.forecast import compute_forecast
from inflow.paths import default_data_source, is_remote, project_root
from inflow.plots import axis_ticks, scatter_figure, slider_histogram_figure
from inflow.regression import fit_sensitivity
from inflow.ui.data import load_all
from inflow.ui.state import AppState, Controls
from inflow.ui.sections.forecast import analog_table
from inflow.ui.sections.methodology import markdown_doc


class TestPolicy:
    """PipelinePolicy construction."""

    def test_defaults(self):
        policy = PipelinePolicy()
        assert policy.fit_strategy == "independent"
        assert policy.analog_policy == "tolerance"
        assert policy.streamflow_basis == "seasonal"
        assert policy.max_analogs == 5

    def test_from_env(self):
        policy = PipelinePolicy.from_env({
            "INFLOW_FIT_STRATEGY": "Joint",
            "INFLOW_ANALOG_POLICY": "nearest",
            "INFLOW_STREAMFLOW_BASIS": "total",
            "INFLOW_BIN_COUNT": "10",
        })
        assert policy == PipelinePolicy("joint", "nearest", "total", bin_count=10)

    def test_from_empty_env(self):
        assert PipelinePolicy.from_env({}) == PipelinePolicy()

    def test_invalid_choice(self):
        with pytest.raises(ValueError):
            PipelinePolicy(fit_strategy="ridge")


class TestPaths:
    """Data source resolution."""

    def test_default_source(self):
        source = default_data_source({})
        assert source == str(project_root() / "data" / "water_year_metrics.csv")

    def test_data_root_override(self, tmp_path):
        assert default_data_source({"DATA_ROOT": str(tmp_path)}) == str(tmp_path / "data" / "water_year_metrics.csv")

    def test_explicit_source(self):
        url = "https://example.org/metrics.csv"
        assert default_data_source({"INFLOW_DATA_SOURCE": url}) == url
        assert is_remote(url)
        assert not is_remote("/tmp/metrics.csv")


class TestAppState:
    """Application state snapshot and loading."""

    def test_load_all_and_forecast(self):
        ld = load_all(default_data_source({}))
        state = AppState(data=ld, controls=Controls(90.0, 100.0, 110.0))
        expected = compute_forecast(ld.dataset, ld.model, 90.0, 100.0, 110.0, ld.policy)
        assert state.forecast() == expected

    def test_analog_table_and_docs(self):
        ld = load_all(default_data_source({}))
        result = AppState(data=ld, controls=Controls(100.0, 100.0, 100.0)).forecast()
        table = analog_table(result, ld.dataset)
        assert len(table) == len(result.analog_years)
        doc = markdown_doc(ld.model, ld.dataset, ld.policy)
        assert "β₁ (SWE)" in doc
        assert "1991-2020" in doc


class TestPlots:
    """Figure builders."""

    def test_axis_ticks_include_100(self):
        (lo, hi), ticks = axis_ticks(VariableRange(40.0, 180.0))
        assert (lo, hi) == (25.0, 200.0)
        assert 100.0 in ticks

    def test_scatter_with_forecast(self, sample_dataset):
        result = compute_forecast(sample_dataset, fit_sensitivity(sample_dataset), 120.0, 95.0, 105.0)
        fig = scatter_figure(sample_dataset, result, swe_pct=120.0, fall_sm_pct=95.0)
        assert len(fig.data) == 2
        assert fig.data[1].y[0] == pytest.approx(result.percent_of_baseline)

    def test_slider_histogram(self, sample_dataset):
        hist = sample_dataset.histograms["swe_pct"]
        fig = slider_histogram_figure(hist, 100.0, sample_dataset.ranges["swe_pct"])
        assert len(fig.data) == 1
        assert sum(fig.data[0].y) == len(sample_dataset.years)
