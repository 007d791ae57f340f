"""Tests for the spatial neighbor index strategies."""

import numpy as np
import pytest

from detection.spatial_index import (
    NeighborIndex,
    BruteForceNeighborIndex,
    GridNeighborIndex,
    KDTreeNeighborIndex,
    build_neighbor_index,
)

STRATEGIES = ["brute", "grid", "kdtree"]


@pytest.fixture
def cluster():
    """Centre point, four points at 0.25 deg, one at exactly 0.5, one far away."""
    lats = np.array([29.0, 29.25, 28.75, 29.0, 29.0, 29.5, 31.0])
    lons = np.array([79.0, 79.0, 79.0, 79.25, 78.75, 79.0, 79.0])
    return lats, lons


class TestNeighborQuery:
    @pytest.mark.parametrize("strategy", STRATEGIES)
    def test_finds_points_within_radius(self, cluster, strategy):
        lats, lons = cluster
        index = build_neighbor_index(lats, lons, 0.5, strategy)
        np.testing.assert_array_equal(index.query(0), [1, 2, 3, 4, 5])

    @pytest.mark.parametrize("strategy", STRATEGIES)
    def test_radius_is_inclusive(self, cluster, strategy):
        """The point at exactly 0.5 deg is a neighbor."""
        lats, lons = cluster
        index = build_neighbor_index(lats, lons, 0.5, strategy)
        assert 5 in index.query(0)

    @pytest.mark.parametrize("strategy", STRATEGIES)
    def test_excludes_same_coordinates(self, strategy):
        """Every record at the target's exact coordinates is excluded."""
        lats = np.array([29.0, 29.0, 29.0, 29.1])
        lons = np.array([79.0, 79.0, 79.0, 79.0])
        index = build_neighbor_index(lats, lons, 0.5, strategy)
        np.testing.assert_array_equal(index.query(0), [3])
        np.testing.assert_array_equal(index.query(3), [0, 1, 2])

    @pytest.mark.parametrize("strategy", STRATEGIES)
    def test_zero_radius_has_no_neighbors(self, cluster, strategy):
        lats, lons = cluster
        index = build_neighbor_index(lats, lons, 0.0, strategy)
        for i in range(len(lats)):
            assert index.query(i).size == 0

    @pytest.mark.parametrize("strategy", STRATEGIES)
    def test_query_point_off_grid(self, cluster, strategy):
        lats, lons = cluster
        index = build_neighbor_index(lats, lons, 0.3, strategy)
        np.testing.assert_array_equal(index.query_point(29.1, 79.0), [0, 1, 3, 4])

    @pytest.mark.parametrize("strategy", STRATEGIES)
    def test_empty_index(self, strategy):
        index = build_neighbor_index(np.array([]), np.array([]), 0.5, strategy)
        assert len(index) == 0
        assert index.query_point(0.0, 0.0).size == 0

    def test_larger_radius_never_loses_neighbors(self, cluster):
        lats, lons = cluster
        previous = set()
        for radius in [0.1, 0.25, 0.5, 1.0, 2.5]:
            current = set(build_neighbor_index(lats, lons, radius, "brute").query(0).tolist())
            assert previous <= current
            previous = current


class TestDifferential:
    """Accelerated strategies must match the brute-force reference exactly."""

    @pytest.mark.parametrize("strategy", ["grid", "kdtree"])
    @pytest.mark.parametrize("radius", [0.1, 0.25, 0.5, 1.3])
    def test_matches_brute_force_on_random_points(self, strategy, radius):
        rng = np.random.default_rng(123)
        lats = rng.uniform(-10.0, 10.0, size=400)
        lons = rng.uniform(70.0, 90.0, size=400)
        reference = BruteForceNeighborIndex(lats, lons, radius)
        candidate = build_neighbor_index(lats, lons, radius, strategy)
        for i in range(len(lats)):
            np.testing.assert_array_equal(candidate.query(i), reference.query(i))

    @pytest.mark.parametrize("strategy", ["grid", "kdtree"])
    def test_matches_brute_force_on_regular_grid(self, strategy):
        """Points on a lattice sit exactly on the radius boundary."""
        coords = np.arange(0.0, 3.01, 0.25)
        lat_grid, lon_grid = np.meshgrid(coords, coords)
        lats = np.repeat(lat_grid.ravel(), 3)
        lons = np.repeat(lon_grid.ravel(), 3)
        reference = BruteForceNeighborIndex(lats, lons, 0.5)
        candidate = build_neighbor_index(lats, lons, 0.5, strategy)
        for i in range(len(lats)):
            np.testing.assert_array_equal(candidate.query(i), reference.query(i))

    def test_grid_custom_cell_size(self):
        rng = np.random.default_rng(7)
        lats = rng.uniform(0.0, 5.0, size=200)
        lons = rng.uniform(0.0, 5.0, size=200)
        reference = BruteForceNeighborIndex(lats, lons, 0.6)
        grid = GridNeighborIndex(lats, lons, 0.6, cell_size=0.2)
        for i in range(len(lats)):
            np.testing.assert_array_equal(grid.query(i), reference.query(i))


class TestBuildNeighborIndex:
    def test_strategy_types(self):
        lats = np.array([0.0, 1.0])
        lons = np.array([0.0, 1.0])
        assert isinstance(build_neighbor_index(lats, lons, 1.0, "brute"), BruteForceNeighborIndex)
        assert isinstance(build_neighbor_index(lats, lons, 1.0, "grid"), GridNeighborIndex)
        assert isinstance(build_neighbor_index(lats, lons, 1.0, "kdtree"), KDTreeNeighborIndex)

    def test_all_are_neighbor_indexes(self):
        lats = np.array([0.0])
        lons = np.array([0.0])
        for strategy in STRATEGIES:
            assert isinstance(build_neighbor_index(lats, lons, 1.0, strategy), NeighborIndex)

    def test_unknown_strategy_raises(self):
        with pytest.raises(ValueError, match="Unknown neighbor index"):
            build_neighbor_index(np.array([0.0]), np.array([0.0]), 1.0, "octree")

    def test_negative_radius_raises(self):
        with pytest.raises(ValueError, match="radius"):
            BruteForceNeighborIndex(np.array([0.0]), np.array([0.0]), -1.0)

    def test_mismatched_lengths_raise(self):
        with pytest.raises(ValueError):
            BruteForceNeighborIndex(np.array([0.0, 1.0]), np.array([0.0]), 1.0)
