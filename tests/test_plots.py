"""Smoke tests for visualization plot functions.

Each test verifies that the function returns a valid Plotly Figure
without raising exceptions, for both populated and empty inputs.
"""

import plotly.graph_objects as go
import pytest

from detection.pipeline import detect_anomalies
from detection.settings import DetectionConfig
from detection.statistics import compute_statistics, precipitation_statistics
from visualization.plots import (
    create_confidence_profile,
    create_precipitation_histogram,
    create_precipitation_map,
    create_wind_field_figure,
)


@pytest.fixture
def plot_results(synthetic_dataset):
    return detect_anomalies(
        synthetic_dataset["observations"], DetectionConfig(magnitude_threshold=1.5),
    )


class TestCreatePrecipitationMap:
    def test_returns_figure(self, synthetic_dataset):
        fig = create_precipitation_map(synthetic_dataset["observations"])
        assert isinstance(fig, go.Figure)

    def test_with_results(self, synthetic_dataset, plot_results):
        fig = create_precipitation_map(synthetic_dataset["observations"], plot_results)
        assert isinstance(fig, go.Figure)
        assert len(fig.data) >= 2

    def test_empty(self):
        assert isinstance(create_precipitation_map([]), go.Figure)


class TestCreateWindFieldFigure:
    def test_returns_figure(self, reference_scenario):
        fig = create_wind_field_figure(reference_scenario)
        assert isinstance(fig, go.Figure)

    def test_with_results(self, reference_scenario):
        results = detect_anomalies(reference_scenario)
        fig = create_wind_field_figure(reference_scenario, results)
        assert isinstance(fig, go.Figure)
        assert len(fig.layout.annotations) == len(results)

    def test_with_results_adds_verdict_markers(self, synthetic_dataset, plot_results):
        """Anomaly markers overlay a plain (non-subplot) wind figure."""
        fig = create_wind_field_figure(synthetic_dataset["observations"], plot_results)
        names = {trace.name for trace in fig.data}
        assert {"Mean Wind", "Locations", "True Anomaly", "Filtered (Noise)"} <= names

    def test_empty(self):
        assert isinstance(create_wind_field_figure([]), go.Figure)


class TestCreatePrecipitationHistogram:
    def test_returns_figure(self, reference_scenario):
        stats = precipitation_statistics(reference_scenario)
        fig = create_precipitation_histogram(reference_scenario, stats, 2.5)
        assert isinstance(fig, go.Figure)

    def test_constant_field(self, obs_factory):
        observations = [obs_factory(prec=0.1) for _ in range(5)]
        stats = compute_statistics([0.1] * 5)
        assert isinstance(create_precipitation_histogram(observations, stats, 2.5), go.Figure)

    def test_empty(self):
        stats = compute_statistics([0.0])
        assert isinstance(create_precipitation_histogram([], stats, 2.5), go.Figure)


class TestCreateConfidenceProfile:
    def test_returns_figure(self, plot_results):
        fig = create_confidence_profile(plot_results, limit=5)
        assert isinstance(fig, go.Figure)
        assert len(fig.data[0].y) == min(5, len(plot_results))

    def test_disabled_check(self, reference_scenario):
        results = detect_anomalies(
            reference_scenario, DetectionConfig(enable_directional_consistency=False),
        )
        assert isinstance(create_confidence_profile(results), go.Figure)

    def test_empty(self):
        assert isinstance(create_confidence_profile([]), go.Figure)
