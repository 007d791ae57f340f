"""
Spatial Neighbor Index.

Finds observations within a Euclidean radius of a target in (lat, lon)
degree space.  Records sharing the target's exact coordinate pair are
never neighbors: a grid cell's other days describe the same location,
not its surroundings.

Three interchangeable strategies share one acceptance predicate:

    BruteForceNeighborIndex   O(N) scan per query (reference)
    GridNeighborIndex         hash buckets of size ~radius
    KDTreeNeighborIndex       scipy cKDTree ball query

The accelerated strategies only pre-select candidate indices; the final
decision is always made by ``NeighborIndex._accept`` so every strategy
returns exactly what the brute-force scan returns.
"""

import math
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Dict, List, Tuple

import numpy as np
from scipy.spatial import cKDTree

from config import DEFAULT_NEIGHBOR_INDEX

# Ball queries are widened by this relative margin before exact filtering
_QUERY_MARGIN = 1e-9


class NeighborIndex(ABC):
    """Abstract base class for radius neighbor queries.

    Args:
        lats: 1D array of latitudes (degrees).
        lons: 1D array of longitudes (degrees), same length as ``lats``.
        radius: Inclusive search radius (degrees).
    """

    def __init__(self, lats: np.ndarray, lons: np.ndarray, radius: float):
        self.lats = np.asarray(lats, dtype=float)
        self.lons = np.asarray(lons, dtype=float)
        if self.lats.shape != self.lons.shape or self.lats.ndim != 1:
            raise ValueError("lats and lons must be 1D arrays of equal length")
        if radius < 0:
            raise ValueError("radius must be >= 0")
        self.radius = float(radius)

    def __len__(self) -> int:
        return len(self.lats)

    def query(self, index: int) -> np.ndarray:
        """Return sorted indices of the neighbors of observation ``index``."""
        return self.query_point(self.lats[index], self.lons[index])

    def query_point(self, lat: float, lon: float) -> np.ndarray:
        """Return sorted indices of observations within radius of (lat, lon)."""
        if len(self) == 0:
            return np.empty(0, dtype=np.intp)
        return self._accept(lat, lon, self._candidate_indices(lat, lon))

    @abstractmethod
    def _candidate_indices(self, lat: float, lon: float) -> np.ndarray:
        """Return a superset of the neighbor indices for (lat, lon)."""
        ...

    def _accept(self, lat: float, lon: float, candidates) -> np.ndarray:
        idx = np.asarray(candidates, dtype=np.intp)
        if idx.size == 0:
            return idx
        c_lat = self.lats[idx]
        c_lon = self.lons[idx]
        distance = np.sqrt((c_lat - lat) ** 2 + (c_lon - lon) ** 2)
        same_location = (c_lat == lat) & (c_lon == lon)
        return np.sort(idx[(distance <= self.radius) & ~same_location])


class BruteForceNeighborIndex(NeighborIndex):
    """Scan every observation on each query."""

    def _candidate_indices(self, lat: float, lon: float) -> np.ndarray:
        return np.arange(len(self), dtype=np.intp)


class GridNeighborIndex(NeighborIndex):
    """Bucket observations into square cells and scan nearby cells only.

    Args:
        cell_size: Bucket edge length in degrees.  Defaults to the radius
            (or 1 degree when the radius is 0).
    """

    def __init__(self, lats, lons, radius: float, cell_size: float = None):
        super().__init__(lats, lons, radius)
        if cell_size is None:
            cell_size = self.radius if self.radius > 0 else 1.0
        if cell_size <= 0:
            raise ValueError("cell_size must be > 0")
        self.cell_size = float(cell_size)
        # One extra ring absorbs floor() round-off at cell edges
        self._reach = int(math.ceil(self.radius / self.cell_size)) + 1

        self._buckets: Dict[Tuple[int, int], List[int]] = defaultdict(list)
        cell_i = np.floor(self.lats / self.cell_size).astype(np.int64)
        cell_j = np.floor(self.lons / self.cell_size).astype(np.int64)
        for k, key in enumerate(zip(cell_i.tolist(), cell_j.tolist())):
            self._buckets[key].append(k)

    def _candidate_indices(self, lat: float, lon: float) -> np.ndarray:
        ci = int(math.floor(lat / self.cell_size))
        cj = int(math.floor(lon / self.cell_size))
        found: List[int] = []
        for di in range(-self._reach, self._reach + 1):
            for dj in range(-self._reach, self._reach + 1):
                bucket = self._buckets.get((ci + di, cj + dj))
                if bucket:
                    found.extend(bucket)
        return np.asarray(found, dtype=np.intp)


class KDTreeNeighborIndex(NeighborIndex):
    """Ball queries against a scipy k-d tree."""

    def __init__(self, lats, lons, radius: float):
        super().__init__(lats, lons, radius)
        self._tree = cKDTree(np.column_stack([self.lats, self.lons])) if len(self) else None

    def _candidate_indices(self, lat: float, lon: float) -> np.ndarray:
        r = self.radius * (1.0 + _QUERY_MARGIN) + _QUERY_MARGIN
        return np.asarray(self._tree.query_ball_point([lat, lon], r), dtype=np.intp)


_STRATEGIES = {
    "brute": BruteForceNeighborIndex,
    "grid": GridNeighborIndex,
    "kdtree": KDTreeNeighborIndex,
}


def build_neighbor_index(
    lats: np.ndarray,
    lons: np.ndarray,
    radius: float,
    strategy: str = DEFAULT_NEIGHBOR_INDEX,
) -> NeighborIndex:
    """
    Construct a neighbor index by strategy name.

    Args:
        lats, lons: 1D coordinate arrays (degrees).
        radius: Inclusive search radius (degrees).
        strategy: "brute", "grid" or "kdtree".

    Returns:
        A NeighborIndex ready for queries.
    """
    try:
        cls = _STRATEGIES[strategy]
    except KeyError:
        raise ValueError(
            f"Unknown neighbor index strategy '{strategy}'. "
            f"Use one of {', '.join(_STRATEGIES)}."
        ) from None
    return cls(lats, lons, radius)
