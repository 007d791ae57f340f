"""
Confidence Scorer & Ranker.

Maps a directional-consistency outcome to a verdict and a bounded
confidence, then orders results by confidence.

    check disabled:  true anomaly,  confidence = 0.7
    coherent:        true anomaly,  confidence = 0.8 + 0.2 * c   in (0.9, 1.0]
    not coherent:    false anomaly, confidence = 0.3 - 0.2 * c   in [0.2, 0.5]
"""

from typing import Iterable, List, Optional, Tuple

from config import (
    COHERENT_CONFIDENCE_BASE,
    COHERENT_CONFIDENCE_SLOPE,
    INCOHERENT_CONFIDENCE_BASE,
    INCOHERENT_CONFIDENCE_SLOPE,
    UNCHECKED_CONFIDENCE,
)
from detection.wind_vector import ConsistencyResult
from models.anomaly import AnomalyResult


def score_candidate(consistency: Optional[ConsistencyResult]) -> Tuple[bool, float]:
    """
    Return (is_true_anomaly, confidence) for one candidate.

    Args:
        consistency: Directional check outcome, or None when the check
                     is disabled for the run.
    """
    if consistency is None:
        return True, UNCHECKED_CONFIDENCE
    c = consistency.consistency
    if consistency.is_coherent:
        return True, COHERENT_CONFIDENCE_BASE + COHERENT_CONFIDENCE_SLOPE * c
    return False, INCOHERENT_CONFIDENCE_BASE - INCOHERENT_CONFIDENCE_SLOPE * c


def rank_results(results: Iterable[AnomalyResult]) -> List[AnomalyResult]:
    """Stable sort by confidence, highest first."""
    return sorted(results, key=lambda r: r.confidence, reverse=True)
