"""
Pytest configuration and shared fixtures for patrol-zones tests.

This file provides:
- Synthetic incident records (well-separated groups, dense grids)
- Malformed record samples
- Simple geometric point sets
"""

from typing import Any, Dict, List

import numpy as np
import pandas as pd
import pytest

from patrol_zones.spatial import ZoneConfig


# ==============================================================================
# Helpers
# ==============================================================================

# Roughly Roysambu, Nairobi: latitude is negative, longitude ~36.9
BASE_LAT = -1.22
BASE_LNG = 36.87


def grid_records(
    center_lat: float,
    center_lng: float,
    size: int = 20,
    spacing: float = 0.0025,
    description: str = "THEFT",
) -> List[Dict[str, Any]]:
    """A ``size`` x ``size`` grid of incidents centred on the given point."""
    offset = (size - 1) * spacing / 2.0
    return [
        {
            "Latitude": center_lat - offset + i * spacing,
            "Longitude": center_lng - offset + j * spacing,
            "Description": description,
        }
        for i in range(size)
        for j in range(size)
    ]


def square_records(center_x: float, center_y: float, half: float = 0.5) -> List[Dict[str, Any]]:
    """Four incidents on the corners of a small square."""
    return [
        {"Latitude": center_x - half, "Longitude": center_y - half},
        {"Latitude": center_x + half, "Longitude": center_y - half},
        {"Latitude": center_x + half, "Longitude": center_y + half},
        {"Latitude": center_x - half, "Longitude": center_y + half},
    ]


# ==============================================================================
# Record Fixtures
# ==============================================================================

@pytest.fixture
def three_squares() -> List[Dict[str, Any]]:
    """12 incidents in 3 well-separated squares near (0,0), (10,10), (20,0)."""
    return square_records(0, 0) + square_records(10, 10) + square_records(20, 0)


@pytest.fixture
def dense_zone() -> List[Dict[str, Any]]:
    """400 incidents in one tight grid: enough for 4 representative points."""
    return grid_records(BASE_LAT, BASE_LNG)


@pytest.fixture
def two_dense_zones() -> List[Dict[str, Any]]:
    """Two 400-incident grids ~10km apart."""
    return (
        grid_records(BASE_LAT, BASE_LNG, description="THEFT")
        + grid_records(BASE_LAT + 0.1, BASE_LNG + 0.1, description="ASSAULT")
    )


@pytest.fixture
def malformed_records() -> List[Dict[str, Any]]:
    """Mix of valid and broken coordinate rows."""
    return [
        {"Latitude": -1.2201, "Longitude": 36.8701},
        {"Latitude": None, "Longitude": 36.8702},
        {"Latitude": "not a number", "Longitude": 36.8703},
        {"Longitude": 36.8704},
        {"Latitude": float("nan"), "Longitude": 36.8705},
        {"Latitude": -1.2206, "Longitude": float("inf")},
        {"Latitude": "-1.2207", "Longitude": "36.8707"},
        {"Latitude": -1.2208, "Longitude": 36.8708},
    ]


@pytest.fixture
def records_df(dense_zone) -> pd.DataFrame:
    """The dense zone as a DataFrame with a non-positional index."""
    df = pd.DataFrame(dense_zone)
    df.index = df.index + 1000
    return df


# ==============================================================================
# Geometry Fixtures
# ==============================================================================

@pytest.fixture
def unit_square() -> np.ndarray:
    return np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]])


@pytest.fixture
def sequential_config() -> ZoneConfig:
    return ZoneConfig(max_workers=None)
