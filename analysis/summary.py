"""
Dataset overview and results summary for the presentation layer.
"""

from typing import Dict, List, Optional, Sequence

import numpy as np

from detection.errors import EmptyInputError
from models.anomaly import AnomalyResult
from models.observation import Observation


def dataset_overview(observations: Sequence[Observation]) -> Dict[str, float]:
    """
    Summarize an observation set for display before detection.

    Returns:
        Dict with keys:
            total_points, unique_locations,
            year_start, year_end, years_spanned,
            avg_precipitation, avg_wind_speed, avg_humidity,
            min_lat, max_lat, min_lon, max_lon.

    Raises:
        EmptyInputError: If ``observations`` is empty.
    """
    if len(observations) == 0:
        raise EmptyInputError("No observations to summarize")

    lats = np.array([o.lat for o in observations])
    lons = np.array([o.lon for o in observations])
    years = np.array([o.year for o in observations])

    return {
        "total_points": len(observations),
        "unique_locations": len({o.location for o in observations}),
        "year_start": int(years.min()),
        "year_end": int(years.max()),
        "years_spanned": int(years.max() - years.min() + 1),
        "avg_precipitation": float(np.mean([o.precipitation for o in observations])),
        "avg_wind_speed": float(np.mean([o.wind_speed for o in observations])),
        "avg_humidity": float(np.mean([o.specific_humidity for o in observations])),
        "min_lat": float(lats.min()),
        "max_lat": float(lats.max()),
        "min_lon": float(lons.min()),
        "max_lon": float(lons.max()),
    }


def results_summary(results: List[AnomalyResult]) -> Optional[dict]:
    """
    Aggregate statistics over ranked results.

    Returns:
        Dict with keys total, true_count, false_count, true_percentage,
        avg_confidence, avg_deviation_score, avg_directional_consistency
        (None when the directional check was disabled), or None when
        ``results`` is empty.
    """
    if not results:
        return None

    true_count = sum(1 for r in results if r.is_true_anomaly)
    consistencies = [
        r.directional_consistency for r in results
        if r.directional_consistency is not None
    ]

    return {
        "total": len(results),
        "true_count": true_count,
        "false_count": len(results) - true_count,
        "true_percentage": true_count / len(results) * 100.0,
        "avg_confidence": float(np.mean([r.confidence for r in results])),
        "avg_deviation_score": float(np.mean([r.deviation_score for r in results])),
        "avg_directional_consistency": (
            float(np.mean(consistencies)) if consistencies else None
        ),
    }
