"""
Observation data model.

Represents a single daily weather record at a grid location: wind at
10 m, specific humidity at 2 m and total precipitation.  Records are
created once by ingestion and never mutated afterwards; identity is the
record's position in the input sequence.
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Observation:
    """A single validated climate observation.

    Args:
        lat: Latitude (degrees).
        lon: Longitude (degrees).
        year: Calendar year.
        month: Calendar month.
        day: Day of month.
        wind_speed: Wind speed at 10 m (m/s).
        wind_direction_deg: Wind direction at 10 m (meteorological degrees, 0-360).
        specific_humidity: Specific humidity at 2 m (g/kg).
        precipitation: Precipitation (mm/day).
    """

    lat: float
    lon: float
    year: int
    month: int
    day: int
    wind_speed: float
    wind_direction_deg: float
    specific_humidity: float
    precipitation: float

    def __post_init__(self):
        for name in ("lat", "lon", "wind_speed", "wind_direction_deg",
                     "specific_humidity", "precipitation"):
            if not math.isfinite(getattr(self, name)):
                raise ValueError(f"{name} must be a finite number")
        if self.wind_speed < 0:
            raise ValueError("wind_speed must be >= 0")
        if not 0.0 <= self.wind_direction_deg <= 360.0:
            raise ValueError("wind_direction_deg must be within [0, 360]")
        if self.specific_humidity < 0:
            raise ValueError("specific_humidity must be >= 0")
        if self.precipitation < 0:
            raise ValueError("precipitation must be >= 0")

    @property
    def location(self):
        """The (lat, lon) pair identifying the grid cell."""
        return (self.lat, self.lon)
