from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from map_explore.geo import distance
from map_explore.models import GeoPoint, Item
from map_explore.path import build_path, path_length_m

T0 = datetime(2024, 2, 1, 9, 0, tzinfo=UTC)
C1, C2, C3 = GeoPoint(55.10, 25.10), GeoPoint(55.11, 25.11), GeoPoint(55.12, 25.12)


def test_orders_by_timestamp() -> None:
    data = [
        Item(id="a", coordinates=C3, timestamp=T0 + timedelta(hours=3)),
        Item(id="a", coordinates=C1, timestamp=T0 + timedelta(hours=1)),
        Item(id="a", coordinates=C2, timestamp=T0 + timedelta(hours=2)),
    ]
    before = list(data)
    assert build_path(data) == [C1, C2, C3]
    assert data == before


def test_equal_timestamps_keep_input_order() -> None:
    data = [
        Item(id="a", coordinates=C2, timestamp=T0),
        Item(id="a", coordinates=C1, timestamp=T0),
        Item(id="a", coordinates=C3, timestamp=T0 - timedelta(minutes=1)),
    ]
    assert build_path(data) == [C3, C2, C1]


@pytest.mark.parametrize("n", [0, 1])
def test_needs_two_items(n: int) -> None:
    data = [Item(id="a", coordinates=C1, timestamp=T0)] * n
    assert build_path(data) is None


def test_path_length() -> None:
    assert path_length_m([C1, C2, C3]) == pytest.approx(distance(C1, C2) + distance(C2, C3))
    assert path_length_m(None) == 0.0
    assert path_length_m([C1]) == 0.0
