"""
Detection run configuration.

A ``DetectionConfig`` is an immutable snapshot: one run uses exactly one
config, and UI controls produce a new snapshot via ``replace`` rather than
mutating the one a run is holding.
"""

import dataclasses
import math
from dataclasses import dataclass
from typing import Optional

from config import (
    DEFAULT_MAGNITUDE_THRESHOLD,
    DEFAULT_SPATIAL_RADIUS_DEG,
    DEFAULT_MINIMUM_NEIGHBORS,
    DEFAULT_NEIGHBOR_INDEX,
    NEIGHBOR_INDEX_STRATEGIES,
)


@dataclass(frozen=True)
class DetectionConfig:
    """Parameters for a single detection run.

    Args:
        magnitude_threshold: Deviation score above which an observation
            becomes a candidate.
        spatial_radius: Neighbor search radius in (lat, lon) degrees.
        minimum_neighbors: Neighbors required to evaluate directional
            consistency.
        enable_directional_consistency: Validate candidates against the
            neighbor wind field.  When False every candidate is kept.
        enable_seasonal_decomposition: Reserved.  Carried for UI parity,
            no detection step reads it.
        neighbor_index: Spatial index strategy: "brute", "grid" or "kdtree".
        max_workers: Thread count for the per-candidate phase.  None or 1
            runs sequentially.
    """

    magnitude_threshold: float = DEFAULT_MAGNITUDE_THRESHOLD
    spatial_radius: float = DEFAULT_SPATIAL_RADIUS_DEG
    minimum_neighbors: int = DEFAULT_MINIMUM_NEIGHBORS
    enable_directional_consistency: bool = True
    enable_seasonal_decomposition: bool = False
    neighbor_index: str = DEFAULT_NEIGHBOR_INDEX
    max_workers: Optional[int] = None

    def __post_init__(self):
        for name in ("magnitude_threshold", "spatial_radius"):
            if not math.isfinite(getattr(self, name)):
                raise ValueError(f"{name} must be a finite number")
        if self.magnitude_threshold < 0:
            raise ValueError("magnitude_threshold must be >= 0")
        if self.spatial_radius < 0:
            raise ValueError("spatial_radius must be >= 0")
        if self.minimum_neighbors < 0:
            raise ValueError("minimum_neighbors must be >= 0")
        if self.neighbor_index not in NEIGHBOR_INDEX_STRATEGIES:
            raise ValueError(
                f"Unknown neighbor_index '{self.neighbor_index}'. "
                f"Use one of {', '.join(NEIGHBOR_INDEX_STRATEGIES)}."
            )
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError("max_workers must be >= 1")

    def replace(self, **changes) -> "DetectionConfig":
        """Return a new snapshot with the given fields changed."""
        return dataclasses.replace(self, **changes)
