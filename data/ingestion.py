"""
Climate CSV ingestion.

Parses delimited daily climate exports (NASA POWER style) into validated
``Observation`` records.  Expected header:

    Lat,Lon,Year,Month,Date,WS10M,WD10M,QV2M,Prec

Columns are read by position.  Commas and tabs are both accepted as
delimiters, even mixed within a file.  Rows are processed in chunks so a
caller can report progress on large inputs.
"""

import hashlib
import logging
import math
import os
import re
from typing import Callable, List, Optional

from config import (
    EXPECTED_HEADERS,
    INGESTION_CHUNK_SIZE,
    PROGRESS_REPORT_MIN_LINES,
    LARGE_DATASET_LINES,
    LARGE_FILE_BYTES,
)
from models.observation import Observation

logger = logging.getLogger(__name__)

_DELIMITER = re.compile(r"[,\t]")

ProgressCallback = Callable[[int], None]


class IngestionError(ValueError):
    """Raised when an input file cannot be turned into observations."""


def _parse_float(text: str) -> Optional[float]:
    try:
        value = float(text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _parse_int(text: str) -> Optional[int]:
    try:
        return int(text)
    except ValueError:
        value = _parse_float(text)
        return int(value) if value is not None else None


def content_fingerprint(raw: bytes) -> str:
    """SHA-256 of an upload's bytes, used to tell re-uploads apart."""
    return hashlib.sha256(raw).hexdigest()


def validate_headers(header_cells: List[str]) -> None:
    """Raise IngestionError unless every expected header is present.

    A header matches when it appears, case-insensitively, inside any
    header cell (so ``"Prec (mm/day)"`` satisfies ``"Prec"``).
    """
    cells = [c.strip().lower() for c in header_cells]
    missing = [h for h in EXPECTED_HEADERS if not any(h.lower() in c for c in cells)]
    if missing:
        raise IngestionError(
            f"Invalid CSV format. Expected headers: {', '.join(EXPECTED_HEADERS)}"
        )


def _parse_row(values: List[str]) -> Optional[Observation]:
    lat = _parse_float(values[0])
    lon = _parse_float(values[1])
    year = _parse_int(values[2])
    month = _parse_int(values[3])
    day = _parse_int(values[4])
    ws = _parse_float(values[5])
    wd = _parse_float(values[6])
    qv = _parse_float(values[7])
    prec = _parse_float(values[8])

    if None in (lat, lon, year, month, day, ws, wd, qv, prec):
        return None
    try:
        return Observation(
            lat=lat, lon=lon, year=year, month=month, day=day,
            wind_speed=ws, wind_direction_deg=wd,
            specific_humidity=qv, precipitation=prec,
        )
    except ValueError:
        return None


def parse_observations(
    text: str,
    progress: Optional[ProgressCallback] = None,
    chunk_size: int = INGESTION_CHUNK_SIZE,
) -> List[Observation]:
    """
    Parse CSV/TSV text into observations.

    Args:
        text: Full file contents including the header line.
        progress: Optional callback receiving percent complete (0-100).
                  Only called when the input exceeds
                  ``PROGRESS_REPORT_MIN_LINES`` lines.
        chunk_size: Rows parsed between progress reports.

    Returns:
        Observations in file order.

    Raises:
        IngestionError: If headers are missing or no row is valid.
    """
    lines = text.strip().splitlines()
    if not lines:
        raise IngestionError("Input is empty")
    logger.info(f"Parsing {len(lines)} lines")
    if len(lines) > LARGE_DATASET_LINES:
        logger.warning(f"Large dataset detected: {len(lines)} lines")

    validate_headers(_DELIMITER.split(lines[0]))

    report = progress is not None and len(lines) > PROGRESS_REPORT_MIN_LINES
    observations: List[Observation] = []
    short_rows = 0
    invalid_rows = 0

    for start in range(1, len(lines), chunk_size):
        end = min(start + chunk_size, len(lines))
        if report:
            progress(round(start / len(lines) * 100))

        for line in lines[start:end]:
            line = line.strip()
            if not line:
                continue
            values = _DELIMITER.split(line)
            if len(values) < len(EXPECTED_HEADERS):
                short_rows += 1
                continue
            obs = _parse_row(values)
            if obs is None:
                invalid_rows += 1
                continue
            observations.append(obs)

    if report:
        progress(100)
    if short_rows or invalid_rows:
        logger.warning(
            f"Skipped {short_rows} short rows and {invalid_rows} invalid rows"
        )
    if not observations:
        raise IngestionError("No valid data rows found in the file")

    logger.info(f"Parsing complete. Valid rows: {len(observations)}")
    return observations


def load_observations_csv(
    path: str,
    progress: Optional[ProgressCallback] = None,
) -> List[Observation]:
    """Read and parse a climate CSV file from disk.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        IngestionError: If the contents are not a valid climate CSV.
    """
    size = os.path.getsize(path)
    if size > LARGE_FILE_BYTES:
        logger.warning(f"Large file detected: {size} bytes, this may take a while")
    with open(path, newline="", encoding="utf-8") as f:
        text = f.read()
    return parse_observations(text, progress=progress)
