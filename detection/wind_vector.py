"""
Vector Consistency Validator.

Converts wind speed/direction into Cartesian components and measures how
well a candidate's wind agrees with the mean wind of its spatial
neighbors.  A precipitation spike embedded in a coherent wind field is
more likely a real weather event than a sensor or reanalysis artifact.

Components use u = ws * cos(wd), v = ws * sin(wd) with wd in radians.
Only the angle between vectors matters here, so the axis convention is
irrelevant as long as every vector uses the same one.
"""

from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np

from config import COHERENCE_THRESHOLD, DEFAULT_MINIMUM_NEIGHBORS

ArrayLike = Union[float, np.ndarray]


@dataclass(frozen=True)
class ConsistencyResult:
    """Outcome of the directional check for one candidate."""

    consistency: float
    is_coherent: bool


NOT_COHERENT = ConsistencyResult(consistency=0.0, is_coherent=False)


def wind_to_vector(speed: ArrayLike, direction_deg: ArrayLike) -> Tuple[ArrayLike, ArrayLike]:
    """
    Convert wind speed and direction to (u, v) components.

    Args:
        speed: Wind speed (scalar or array).
        direction_deg: Wind direction in degrees (scalar or array).

    Returns:
        (u, v) with the same shape as the inputs.
    """
    radians = np.asarray(direction_deg, dtype=float) * np.pi / 180.0
    u = np.asarray(speed, dtype=float) * np.cos(radians)
    v = np.asarray(speed, dtype=float) * np.sin(radians)
    if np.ndim(u) == 0:
        return float(u), float(v)
    return u, v


def directional_consistency(
    target_uv: Tuple[float, float],
    neighbor_u: np.ndarray,
    neighbor_v: np.ndarray,
    minimum_neighbors: int = DEFAULT_MINIMUM_NEIGHBORS,
    coherence_threshold: float = COHERENCE_THRESHOLD,
) -> ConsistencyResult:
    """
    Cosine similarity between a target vector and the neighbor mean vector.

    Too few neighbors, or a calm (zero-length) target or mean vector,
    yields consistency 0 and not coherent: there is no direction to
    compare against.

    Args:
        target_uv: (u, v) of the candidate.
        neighbor_u, neighbor_v: 1D component arrays of the neighbors.
        minimum_neighbors: Neighbors required for an evaluation.
        coherence_threshold: Consistency strictly above this is coherent.

    Returns:
        ConsistencyResult with consistency in [-1, 1].
    """
    neighbor_u = np.asarray(neighbor_u, dtype=float)
    neighbor_v = np.asarray(neighbor_v, dtype=float)
    if neighbor_u.size < minimum_neighbors or neighbor_u.size == 0:
        return NOT_COHERENT

    tu, tv = float(target_uv[0]), float(target_uv[1])
    mu = float(np.mean(neighbor_u))
    mv = float(np.mean(neighbor_v))

    target_mag = np.sqrt(tu * tu + tv * tv)
    mean_mag = np.sqrt(mu * mu + mv * mv)
    if target_mag == 0.0 or mean_mag == 0.0:
        return NOT_COHERENT

    cosine = (tu * mu + tv * mv) / (target_mag * mean_mag)
    consistency = float(np.clip(cosine, -1.0, 1.0))

    return ConsistencyResult(
        consistency=consistency,
        is_coherent=consistency > coherence_threshold,
    )
