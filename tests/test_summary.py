"""Tests for dataset and results summaries."""

import pytest

from analysis.summary import dataset_overview, results_summary
from detection.errors import EmptyInputError
from detection.pipeline import detect_anomalies
from detection.settings import DetectionConfig


class TestDatasetOverview:
    def test_reference_scenario(self, reference_scenario):
        overview = dataset_overview(reference_scenario)
        assert overview["total_points"] == 10
        assert overview["unique_locations"] == 9
        assert overview["year_start"] == 1981
        assert overview["year_end"] == 1981
        assert overview["years_spanned"] == 1
        assert overview["avg_precipitation"] == pytest.approx(0.891)
        assert overview["min_lat"] == 28.75
        assert overview["max_lat"] == 29.25
        assert overview["min_lon"] == 78.75
        assert overview["max_lon"] == 79.25

    def test_multi_year_span(self, obs_factory):
        from models.observation import Observation
        observations = [
            obs_factory(),
            Observation(lat=29.0, lon=79.0, year=1990, month=6, day=1,
                        wind_speed=1.0, wind_direction_deg=0.0,
                        specific_humidity=5.0, precipitation=0.0),
        ]
        overview = dataset_overview(observations)
        assert overview["years_spanned"] == 10

    def test_empty_raises(self):
        with pytest.raises(EmptyInputError):
            dataset_overview([])


class TestResultsSummary:
    def test_empty_returns_none(self):
        assert results_summary([]) is None

    def test_reference_results(self, reference_scenario):
        summary = results_summary(detect_anomalies(reference_scenario))
        assert summary["total"] == 1
        assert summary["true_count"] == 0
        assert summary["false_count"] == 1
        assert summary["true_percentage"] == 0.0
        assert summary["avg_directional_consistency"] is not None

    def test_disabled_check_has_no_consistency(self, reference_scenario):
        results = detect_anomalies(
            reference_scenario, DetectionConfig(enable_directional_consistency=False),
        )
        summary = results_summary(results)
        assert summary["true_percentage"] == 100.0
        assert summary["avg_confidence"] == pytest.approx(0.7)
        assert summary["avg_directional_consistency"] is None

    def test_counts_add_up(self, synthetic_dataset):
        results = detect_anomalies(synthetic_dataset["observations"])
        summary = results_summary(results)
        assert summary["true_count"] + summary["false_count"] == summary["total"]
        assert 0.0 <= summary["avg_confidence"] <= 1.0
