"""Shared fixtures for the Climate Outlier Detection test suite."""

import sys
import os
import pytest

# Ensure project root is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from models.observation import Observation


def make_obs(lat=29.0, lon=79.0, ws=3.0, wd=90.0, prec=0.3, day=1, qv=6.5):
    """Build an Observation with sensible defaults for unspecified fields."""
    return Observation(
        lat=lat, lon=lon, year=1981, month=1, day=day,
        wind_speed=ws, wind_direction_deg=wd,
        specific_humidity=qv, precipitation=prec,
    )


@pytest.fixture
def obs_factory():
    """Factory for observations with default fields."""
    return make_obs


@pytest.fixture
def reference_scenario():
    """Ten points around (29, 79) with one incoherent 6.21 mm spike at index 1."""
    from data.sample_data import get_reference_scenario
    return get_reference_scenario()


@pytest.fixture
def coherent_scenario():
    """Same as the reference scenario but the spike's wind agrees with its neighbors."""
    from data.sample_data import get_reference_scenario
    return get_reference_scenario(spike_direction_deg=110.0)


@pytest.fixture
def synthetic_dataset():
    """Gridded synthetic dataset with one coherent and one incoherent spike."""
    from data.sample_data import generate_climate_dataset
    return generate_climate_dataset(n_lat=4, n_lon=4, n_days=30, seed=42)


@pytest.fixture
def sample_csv_text():
    """A small valid climate CSV with a header and three rows."""
    return (
        "Lat,Lon,Year,Month,Date,WS10M,WD10M,QV2M,Prec\n"
        "29,79,1981,1,5,2.88,107.31,6.65,0.29\n"
        "29,79,1981,1,6,2.03,197.62,6.47,6.21\n"
        "29.5,79,1981,1,6,2.50,105.00,6.50,0.31\n"
    )
