"""
Magnitude Screener.

Scores every observation by its absolute distance from the dataset mean
in standard-deviation units and flags those above a threshold.

A constant field has no spread, so no point can be an outlier: every
score is defined as 0 rather than propagating a division by zero.
"""

from typing import List, Optional, Sequence

import numpy as np

from config import DEFAULT_MAGNITUDE_THRESHOLD
from detection.errors import EmptyInputError
from detection.statistics import SummaryStatistics, compute_statistics
from models.anomaly import Candidate
from models.observation import Observation


def deviation_scores(
    values: np.ndarray,
    stats: Optional[SummaryStatistics] = None,
) -> np.ndarray:
    """
    Compute |value - mean| / std for each value.

    Args:
        values: 1D array of the screened field.
        stats: Precomputed statistics for ``values``; computed if omitted.

    Returns:
        1D array of non-negative deviation scores, same length as ``values``.
    """
    arr = np.asarray(values, dtype=float)
    if stats is None:
        stats = compute_statistics(arr)

    # Constant input can leave a ~1e-17 residual std from summation order
    if arr.size == 0 or stats.std == 0.0 or np.all(arr == arr[0]):
        return np.zeros_like(arr)

    return np.abs(arr - stats.mean) / stats.std


def assess_observations(
    observations: Sequence[Observation],
    threshold: float = DEFAULT_MAGNITUDE_THRESHOLD,
    stats: Optional[SummaryStatistics] = None,
) -> List[Candidate]:
    """
    Score every observation and mark those above ``threshold``.

    Args:
        observations: Full observation sequence.
        threshold: Strict lower bound on the deviation score.
        stats: Precomputed precipitation statistics; computed if omitted.

    Returns:
        One Candidate per observation, in index order, with ``is_outlier``
        set when its score exceeds ``threshold``.

    Raises:
        EmptyInputError: If ``observations`` is empty.
    """
    if len(observations) == 0:
        raise EmptyInputError("No observations to screen")

    prec = np.array([o.precipitation for o in observations], dtype=float)
    scores = deviation_scores(prec, stats)
    flags = scores > threshold

    return [
        Candidate(index=i, deviation_score=float(s), is_outlier=bool(f))
        for i, (s, f) in enumerate(zip(scores, flags))
    ]


def screen_candidates(
    observations: Sequence[Observation],
    threshold: float = DEFAULT_MAGNITUDE_THRESHOLD,
    stats: Optional[SummaryStatistics] = None,
) -> List[Candidate]:
    """Return only the outliers from ``assess_observations``, in index order."""
    return [c for c in assess_observations(observations, threshold, stats) if c.is_outlier]
