"""
Statistics Engine.

Summary statistics over a numeric field.  The median uses the
lower-median convention (value at sorted index floor(n/2)), not an
interpolated median, so that displayed values match exported ones.
"""

from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np

from detection.errors import EmptyInputError
from models.observation import Observation


@dataclass(frozen=True)
class SummaryStatistics:
    """Mean, population standard deviation and lower median of a field."""

    mean: float
    std: float
    median: float
    count: int


def compute_statistics(values: Union[Sequence[float], np.ndarray]) -> SummaryStatistics:
    """
    Compute mean, population std (divisor N) and lower median.

    Args:
        values: Non-empty sequence of finite floats.

    Returns:
        SummaryStatistics for the sequence.

    Raises:
        EmptyInputError: If ``values`` has no elements.
    """
    arr = np.asarray(values, dtype=float).ravel()
    if arr.size == 0:
        raise EmptyInputError("Cannot compute statistics of an empty sequence")

    mean = float(np.mean(arr))
    std = float(np.sqrt(np.mean((arr - mean) ** 2)))
    median = float(np.sort(arr)[arr.size // 2])

    return SummaryStatistics(mean=mean, std=std, median=median, count=int(arr.size))


def precipitation_statistics(observations: Sequence[Observation]) -> SummaryStatistics:
    """Summary statistics of the precipitation field, as shown before detection."""
    return compute_statistics([o.precipitation for o in observations])
