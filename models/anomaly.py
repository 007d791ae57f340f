"""
Anomaly data models.

``Candidate`` is the transient output of magnitude screening.
``AnomalyResult`` is the final, ranked artifact handed to presentation
and export.  Directional fields are ``None`` when the directional
consistency check was disabled for the run.
"""

from dataclasses import dataclass
from typing import Optional

from models.observation import Observation


@dataclass(frozen=True)
class Candidate:
    """An observation flagged (or not) by magnitude screening."""

    index: int
    deviation_score: float
    is_outlier: bool


@dataclass(frozen=True)
class AnomalyResult:
    """A screened candidate after directional validation and scoring.

    Args:
        index: Position of the source observation in the input sequence.
        observation: The source observation.
        deviation_score: |prec - mean| / std for the source observation.
        neighbor_count: Number of observations within the spatial radius.
        directional_consistency: Cosine similarity to the neighbor mean
            wind vector, or None when the check is disabled.
        is_directionally_coherent: consistency > coherence threshold, or
            None when the check is disabled.
        is_true_anomaly: Final verdict.
        confidence: Bounded confidence in the verdict.
    """

    index: int
    observation: Observation
    deviation_score: float
    neighbor_count: int
    directional_consistency: Optional[float]
    is_directionally_coherent: Optional[bool]
    is_true_anomaly: bool
    confidence: float

    @property
    def lat(self) -> float:
        return self.observation.lat

    @property
    def lon(self) -> float:
        return self.observation.lon

    @property
    def precipitation(self) -> float:
        return self.observation.precipitation

    def to_dict(self) -> dict:
        """Flatten observation fields and detection fields into one dict."""
        obs = self.observation
        return {
            "index": self.index,
            "lat": obs.lat,
            "lon": obs.lon,
            "year": obs.year,
            "month": obs.month,
            "day": obs.day,
            "wind_speed": obs.wind_speed,
            "wind_direction_deg": obs.wind_direction_deg,
            "specific_humidity": obs.specific_humidity,
            "precipitation": obs.precipitation,
            "deviation_score": self.deviation_score,
            "neighbor_count": self.neighbor_count,
            "directional_consistency": self.directional_consistency,
            "is_directionally_coherent": self.is_directionally_coherent,
            "is_true_anomaly": self.is_true_anomaly,
            "confidence": self.confidence,
        }
