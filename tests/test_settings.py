"""Tests for DetectionConfig validation."""

import dataclasses
import math

import pytest

from detection.settings import DetectionConfig


class TestDetectionConfig:
    def test_defaults(self):
        config = DetectionConfig()
        assert config.magnitude_threshold == 2.5
        assert config.spatial_radius == 0.5
        assert config.minimum_neighbors == 3
        assert config.enable_directional_consistency is True
        assert config.enable_seasonal_decomposition is False
        assert config.neighbor_index == "kdtree"
        assert config.max_workers is None

    def test_is_immutable(self):
        config = DetectionConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.magnitude_threshold = 3.0

    def test_replace_returns_new_snapshot(self):
        config = DetectionConfig()
        changed = config.replace(spatial_radius=1.0)
        assert changed.spatial_radius == 1.0
        assert config.spatial_radius == 0.5

    def test_replace_validates(self):
        with pytest.raises(ValueError):
            DetectionConfig().replace(spatial_radius=-0.1)

    @pytest.mark.parametrize("field, value", [
        ("magnitude_threshold", -1.0),
        ("spatial_radius", -0.5),
        ("minimum_neighbors", -1),
        ("max_workers", 0),
    ])
    def test_invalid_values_raise(self, field, value):
        with pytest.raises(ValueError, match=field):
            DetectionConfig(**{field: value})

    def test_unknown_index_raises(self):
        with pytest.raises(ValueError, match="neighbor_index"):
            DetectionConfig(neighbor_index="rtree")

    def test_zero_values_allowed(self):
        config = DetectionConfig(magnitude_threshold=0.0, spatial_radius=0.0, minimum_neighbors=0)
        assert config.minimum_neighbors == 0

    @pytest.mark.parametrize("field", ["magnitude_threshold", "spatial_radius"])
    @pytest.mark.parametrize("value", [math.nan, math.inf])
    def test_non_finite_values_raise(self, field, value):
        """NaN and infinity are rejected before the sign checks."""
        with pytest.raises(ValueError, match=f"{field} must be a finite number"):
            DetectionConfig(**{field: value, "neighbor_index": "grid"})
