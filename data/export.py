"""
Export of ranked anomaly results to delimited files.
"""

import csv
import io
import os
from typing import IO, Iterable, List, Union

from config import EXPORT_HEADER, EXPORT_DECIMALS
from models.anomaly import AnomalyResult


def _fmt(value: float) -> str:
    return f"{value:.{EXPORT_DECIMALS}f}"


def results_to_rows(results: Iterable[AnomalyResult]) -> List[list]:
    """Flatten results into export rows (header not included), preserving order."""
    rows = []
    for r in results:
        obs = r.observation
        rows.append([
            r.index,
            obs.lat,
            obs.lon,
            obs.year,
            obs.month,
            obs.day,
            obs.precipitation,
            obs.wind_speed,
            obs.wind_direction_deg,
            _fmt(r.deviation_score),
            r.neighbor_count,
            "N/A" if r.directional_consistency is None else _fmt(r.directional_consistency),
            "true" if r.is_true_anomaly else "false",
            _fmt(r.confidence),
        ])
    return rows


def write_results_csv(results: Iterable[AnomalyResult], stream: IO[str]) -> None:
    """Write header and rows to an open text stream."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(EXPORT_HEADER)
    writer.writerows(results_to_rows(results))


def export_results_csv(results: Iterable[AnomalyResult], path: Union[str, os.PathLike]) -> None:
    """Write results to a CSV file on disk."""
    with open(path, "w", newline="", encoding="utf-8") as f:
        write_results_csv(results, f)


def results_to_csv_bytes(results: Iterable[AnomalyResult]) -> bytes:
    """Render results as UTF-8 CSV bytes, e.g. for a download button."""
    buf = io.StringIO()
    write_results_csv(results, buf)
    return buf.getvalue().encode("utf-8")
