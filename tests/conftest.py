from __future__ import annotations

import math
from datetime import UTC, datetime, timedelta
from typing import Callable

import pytest

from map_explore.datasets import sample_items, sample_points
from map_explore.models import EARTH_RADIUS_M, GeoPoint, Item, NamedPoint

CENTER = GeoPoint(longitude=55.2744, latitude=25.2048)
T0 = datetime(2024, 2, 1, 10, 0, tzinfo=UTC)


def north_of(origin: GeoPoint, meters: float) -> GeoPoint:
    """Point exactly ``meters`` north along the meridian (haversine-exact)."""

    return GeoPoint(longitude=origin.longitude, latitude=origin.latitude + math.degrees(meters / EARTH_RADIUS_M))


@pytest.fixture
def center() -> GeoPoint:
    return CENTER


@pytest.fixture
def north() -> Callable[[GeoPoint, float], GeoPoint]:
    return north_of


@pytest.fixture
def ring_items() -> list[Item]:
    """Items at 200 m, 480 m and 900 m north of CENTER."""

    return [
        Item(id=f"r{d}", coordinates=north_of(CENTER, d), timestamp=T0 + timedelta(minutes=i))
        for i, d in enumerate((200.0, 480.0, 900.0))
    ]


@pytest.fixture
def ring_points() -> list[NamedPoint]:
    return [
        NamedPoint(name="near", coordinates=north_of(CENTER, 250.0)),
        NamedPoint(name="far", coordinates=north_of(CENTER, 1500.0)),
    ]


@pytest.fixture
def items() -> list[Item]:
    return sample_items()


@pytest.fixture
def points() -> list[NamedPoint]:
    return sample_points()
