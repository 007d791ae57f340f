"""
Two-stage precipitation anomaly detection.

    Observations -> statistics -> magnitude screening -> (per candidate)
    neighbor query -> directional consistency -> confidence -> ranking

A run is a pure function of (observations, config): nothing is cached
between runs and the inputs are never mutated, so repeated runs return
identical ordered results.  The per-candidate phase only reads shared
immutable arrays and may be spread over a thread pool.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from typing import List, Optional, Sequence

import numpy as np

from detection.errors import EmptyInputError
from detection.magnitude import screen_candidates
from detection.scoring import rank_results, score_candidate
from detection.settings import DetectionConfig
from detection.spatial_index import NeighborIndex, build_neighbor_index
from detection.statistics import SummaryStatistics, precipitation_statistics
from detection.wind_vector import directional_consistency, wind_to_vector
from models.anomaly import AnomalyResult, Candidate
from models.observation import Observation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetectionReport:
    """Everything a detection run hands to presentation and export."""

    config: DetectionConfig
    statistics: SummaryStatistics
    candidate_count: int
    results: List[AnomalyResult]
    elapsed_s: float

    @property
    def true_anomalies(self) -> List[AnomalyResult]:
        return [r for r in self.results if r.is_true_anomaly]

    @property
    def false_anomalies(self) -> List[AnomalyResult]:
        return [r for r in self.results if not r.is_true_anomaly]


def _evaluate_candidate(
    candidate: Candidate,
    observations: Sequence[Observation],
    neighbor_index: NeighborIndex,
    wind_u: np.ndarray,
    wind_v: np.ndarray,
    config: DetectionConfig,
) -> AnomalyResult:
    """Validate one candidate against its neighborhood and score it."""
    i = candidate.index
    neighbors = neighbor_index.query(i)

    outcome = None
    if config.enable_directional_consistency:
        outcome = directional_consistency(
            (wind_u[i], wind_v[i]),
            wind_u[neighbors],
            wind_v[neighbors],
            minimum_neighbors=config.minimum_neighbors,
        )
    is_true, confidence = score_candidate(outcome)

    return AnomalyResult(
        index=i,
        observation=observations[i],
        deviation_score=candidate.deviation_score,
        neighbor_count=int(neighbors.size),
        directional_consistency=outcome.consistency if outcome else None,
        is_directionally_coherent=outcome.is_coherent if outcome else None,
        is_true_anomaly=is_true,
        confidence=confidence,
    )


def run_detection(
    observations: Sequence[Observation],
    config: Optional[DetectionConfig] = None,
) -> DetectionReport:
    """
    Run the full detection pipeline and keep the run's context.

    Args:
        observations: Complete, validated observation sequence.
        config: Detection parameters; defaults to ``DetectionConfig()``.

    Returns:
        DetectionReport with summary statistics and ranked results.

    Raises:
        EmptyInputError: If ``observations`` is empty.
    """
    if config is None:
        config = DetectionConfig()
    if len(observations) == 0:
        raise EmptyInputError("No observations to analyze")

    start = time.perf_counter()
    logger.info(
        f"Running detection on {len(observations)} observations "
        f"(threshold={config.magnitude_threshold}, radius={config.spatial_radius}, "
        f"min_neighbors={config.minimum_neighbors}, "
        f"directional={config.enable_directional_consistency}, "
        f"index={config.neighbor_index})"
    )
    if config.enable_seasonal_decomposition:
        logger.debug("Seasonal decomposition is reserved and has no effect")

    stats = precipitation_statistics(observations)
    candidates = screen_candidates(observations, config.magnitude_threshold, stats)
    logger.info(f"Magnitude screening flagged {len(candidates)} candidates")

    results: List[AnomalyResult] = []
    if candidates:
        lats = np.array([o.lat for o in observations], dtype=float)
        lons = np.array([o.lon for o in observations], dtype=float)
        wind_u, wind_v = wind_to_vector(
            np.array([o.wind_speed for o in observations], dtype=float),
            np.array([o.wind_direction_deg for o in observations], dtype=float),
        )
        neighbor_index = build_neighbor_index(
            lats, lons, config.spatial_radius, config.neighbor_index,
        )
        evaluate = partial(
            _evaluate_candidate,
            observations=observations,
            neighbor_index=neighbor_index,
            wind_u=wind_u,
            wind_v=wind_v,
            config=config,
        )

        if config.max_workers and config.max_workers > 1:
            with ThreadPoolExecutor(max_workers=config.max_workers) as pool:
                # map() yields in submission order, keeping the sort stable
                results = list(pool.map(evaluate, candidates))
        else:
            results = [evaluate(c) for c in candidates]

    ranked = rank_results(results)
    elapsed = time.perf_counter() - start

    n_true = sum(1 for r in ranked if r.is_true_anomaly)
    logger.info(
        f"Detection completed in {elapsed:.3f}s: {len(ranked)} anomalies "
        f"({n_true} true, {len(ranked) - n_true} filtered)"
    )

    return DetectionReport(
        config=config,
        statistics=stats,
        candidate_count=len(candidates),
        results=ranked,
        elapsed_s=elapsed,
    )


def detect_anomalies(
    observations: Sequence[Observation],
    config: Optional[DetectionConfig] = None,
) -> List[AnomalyResult]:
    """
    Detect and rank precipitation anomalies.

    Args:
        observations: Complete, validated observation sequence.
        config: Detection parameters; defaults to ``DetectionConfig()``.

    Returns:
        One AnomalyResult per magnitude candidate, sorted by confidence
        descending (ties keep input order).

    Raises:
        EmptyInputError: If ``observations`` is empty.
    """
    return run_detection(observations, config).results
