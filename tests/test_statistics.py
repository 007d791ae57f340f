"""Tests for the statistics engine."""

import numpy as np
import pytest

from detection.errors import EmptyInputError
from detection.statistics import compute_statistics, precipitation_statistics


class TestComputeStatistics:
    def test_known_values(self):
        """Mean, population std and median of a small sequence."""
        stats = compute_statistics([2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0])
        assert stats.mean == pytest.approx(5.0)
        assert stats.std == pytest.approx(2.0)  # population std, divisor N
        assert stats.count == 8

    def test_std_uses_population_divisor(self):
        values = [1.0, 2.0, 3.0, 4.0]
        stats = compute_statistics(values)
        assert stats.std == pytest.approx(np.std(values, ddof=0))
        assert stats.std != pytest.approx(np.std(values, ddof=1))

    def test_lower_median_for_even_length(self):
        """Even-length median is the value at index n // 2, not an average."""
        stats = compute_statistics([4.0, 1.0, 3.0, 2.0])
        assert stats.median == 3.0

    def test_median_for_odd_length(self):
        stats = compute_statistics([5.0, 1.0, 3.0])
        assert stats.median == 3.0

    def test_single_value(self):
        stats = compute_statistics([0.42])
        assert stats.mean == pytest.approx(0.42)
        assert stats.std == 0.0
        assert stats.median == 0.42

    def test_empty_raises(self):
        with pytest.raises(EmptyInputError):
            compute_statistics([])

    def test_empty_error_is_value_error(self):
        with pytest.raises(ValueError):
            compute_statistics(np.array([]))

    def test_random_sequences_properties(self):
        """std >= 0 and median is the element at sorted index floor(n/2)."""
        rng = np.random.default_rng(0)
        for n in range(1, 40):
            values = rng.gamma(0.8, 2.0, size=n)
            stats = compute_statistics(values)
            assert stats.std >= 0.0
            assert stats.median == np.sort(values)[n // 2]


class TestPrecipitationStatistics:
    def test_uses_precipitation_field(self, reference_scenario):
        stats = precipitation_statistics(reference_scenario)
        prec = [o.precipitation for o in reference_scenario]
        assert stats.mean == pytest.approx(np.mean(prec))
        assert stats.count == len(reference_scenario)
