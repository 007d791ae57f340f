"""
Synthetic climate data for demos, experiments and tests.

Generates a regular lat/lon grid of daily observations under a
prevailing wind, with optional injected precipitation spikes whose wind
either follows the prevailing field (coherent) or opposes it (noise).
"""

from datetime import date, timedelta
from typing import List, Sequence

import numpy as np

from config import SAMPLE_GRID_ORIGIN, SAMPLE_GRID_STEP_DEG, SAMPLE_START_YEAR
from models.observation import Observation


def get_reference_scenario(spike_direction_deg: float = 197.62) -> List[Observation]:
    """
    Return a small hand-built dataset with a single precipitation spike.

    Ten observations around (29, 79): a quiet record and a 6.21 mm spike
    at the centre cell on consecutive days, plus eight surrounding cells
    with light rain and an east-south-east wind (100-115 deg).

    Args:
        spike_direction_deg: Wind direction of the spike.  The default
            diverges ~90 deg from its neighbors; ~110 makes it coherent.
    """
    def obs(lat, lon, day, ws, wd, qv, prec):
        return Observation(
            lat=lat, lon=lon, year=1981, month=1, day=day,
            wind_speed=ws, wind_direction_deg=wd,
            specific_humidity=qv, precipitation=prec,
        )

    return [
        obs(29.0, 79.0, 5, 2.88, 107.31, 6.65, 0.29),
        obs(29.0, 79.0, 6, 2.03, spike_direction_deg, 6.47, 6.21),
        obs(29.25, 79.0, 6, 2.50, 105.0, 6.50, 0.31),
        obs(28.75, 79.0, 6, 2.70, 110.0, 6.60, 0.27),
        obs(29.0, 79.25, 6, 2.40, 100.0, 6.40, 0.35),
        obs(29.0, 78.75, 6, 2.90, 112.0, 6.70, 0.22),
        obs(29.25, 79.25, 6, 2.60, 104.0, 6.50, 0.38),
        obs(28.75, 78.75, 6, 2.20, 115.0, 6.30, 0.25),
        obs(29.25, 78.75, 6, 2.80, 108.0, 6.60, 0.33),
        obs(28.75, 79.25, 6, 2.50, 102.0, 6.50, 0.30),
    ]


def generate_climate_dataset(
    n_lat: int = 4,
    n_lon: int = 4,
    n_days: int = 30,
    prevailing_direction_deg: float = 250.0,
    direction_spread_deg: float = 15.0,
    coherent_spikes: Sequence[tuple] = ((1, 1, 10),),
    incoherent_spikes: Sequence[tuple] = ((2, 2, 20),),
    spike_precipitation: float = 60.0,
    seed: int = 42,
) -> dict:
    """
    Generate a gridded daily dataset with injected precipitation spikes.

    Observations are ordered day-major, then latitude row, then longitude
    column, so the observation at (i, j, day) has index
    ``day * n_lat * n_lon + i * n_lon + j``.

    Args:
        n_lat, n_lon: Grid dimensions (cells).
        n_days: Number of consecutive days starting Jan 1 of the sample year.
        prevailing_direction_deg: Mean wind direction of the field.
        direction_spread_deg: Std of per-observation direction noise.
        coherent_spikes: (i, j, day) cells whose spike wind follows the field.
        incoherent_spikes: (i, j, day) cells whose spike wind opposes the field.
        spike_precipitation: Precipitation of every injected spike (mm/day).
        seed: Random seed for reproducibility.

    Returns:
        Dict with keys:
            'observations': List[Observation]
            'coherent_indices': indices of coherent spikes
            'incoherent_indices': indices of incoherent spikes
            'description': human-readable summary
    """
    rng = np.random.default_rng(seed)
    lat0, lon0 = SAMPLE_GRID_ORIGIN
    start = date(SAMPLE_START_YEAR, 1, 1)
    cells = n_lat * n_lon

    coherent = {tuple(s): "coherent" for s in coherent_spikes}
    incoherent = {tuple(s): "incoherent" for s in incoherent_spikes}
    spikes = {**coherent, **incoherent}

    observations: List[Observation] = []
    coherent_indices: List[int] = []
    incoherent_indices: List[int] = []

    for d in range(n_days):
        day = start + timedelta(days=d)
        for i in range(n_lat):
            for j in range(n_lon):
                direction = prevailing_direction_deg + rng.normal(0.0, direction_spread_deg)
                speed = float(rng.uniform(1.5, 4.5))
                precipitation = float(rng.gamma(0.8, 1.0))

                kind = spikes.get((i, j, d))
                if kind is not None:
                    precipitation = spike_precipitation
                    index = d * cells + i * n_lon + j
                    if kind == "incoherent":
                        direction += 180.0
                        incoherent_indices.append(index)
                    else:
                        coherent_indices.append(index)

                observations.append(Observation(
                    lat=round(lat0 + i * SAMPLE_GRID_STEP_DEG, 4),
                    lon=round(lon0 + j * SAMPLE_GRID_STEP_DEG, 4),
                    year=day.year,
                    month=day.month,
                    day=day.day,
                    wind_speed=round(speed, 2),
                    wind_direction_deg=round(float(direction % 360.0), 2),
                    specific_humidity=round(float(rng.uniform(5.0, 9.0)), 2),
                    precipitation=round(precipitation, 2),
                ))

    return {
        "observations": observations,
        "coherent_indices": coherent_indices,
        "incoherent_indices": incoherent_indices,
        "description": (
            f"{n_lat}x{n_lon} grid, {n_days} days, prevailing wind "
            f"{prevailing_direction_deg:.0f} deg, {len(coherent_indices)} coherent and "
            f"{len(incoherent_indices)} incoherent spikes"
        ),
    }


def observations_to_csv_text(observations: Sequence[Observation]) -> str:
    """Render observations in the ingestion CSV layout (used for sample downloads)."""
    lines = ["Lat,Lon,Year,Month,Date,WS10M,WD10M,QV2M,Prec"]
    for o in observations:
        lines.append(
            f"{o.lat},{o.lon},{o.year},{o.month},{o.day},"
            f"{o.wind_speed},{o.wind_direction_deg},{o.specific_humidity},{o.precipitation}"
        )
    return "\n".join(lines) + "\n"
