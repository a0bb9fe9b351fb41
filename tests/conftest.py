"""
Pytest configuration file for the petsar tests.
"""
import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest

# Add the project root to Python path so we can import petsar modules
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from petsar.core.geometries import GeoPoint
from petsar.core.models import PetRecord


@pytest.fixture
def fixed_now():
    """A weekday morning, inside the 06:00-10:00 activity window."""
    return datetime(2024, 5, 1, 8, 0, 0)


@pytest.fixture
def sample_coordinates():
    return {
        "tokyo_station": GeoPoint(35.681236, 139.767125),
        "shibuya": GeoPoint(35.658034, 139.701636),
        "home": GeoPoint(35.683, 139.769),
    }


@pytest.fixture
def sample_dog(sample_coordinates, fixed_now):
    return PetRecord(
        id="pet-dog-1",
        species="dog",
        last_seen_location=sample_coordinates["tokyo_station"],
        home_location=sample_coordinates["home"],
        lost_date=fixed_now - timedelta(hours=2),
        distinctive_features=("red collar",),
    )


@pytest.fixture
def sample_cat(sample_coordinates, fixed_now):
    return PetRecord(
        id="pet-cat-1",
        species="猫",
        last_seen_location=sample_coordinates["shibuya"],
        lost_date=fixed_now - timedelta(days=4),
    )
