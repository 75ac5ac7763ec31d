from __future__ import annotations

from datetime import UTC, datetime

import pytest

from map_explore.geo import distance, is_inside_circle
from map_explore.models import CircleSelection, GeoPoint, Item, NamedPoint
from map_explore.query import (
    apply_filter,
    filter_items,
    is_nearby,
    member_distances,
    points_within_radius,
    proximity_match,
)

T = datetime(2024, 2, 1, tzinfo=UTC)


def test_within_radius_orders_items_then_points(center, ring_items, ring_points) -> None:
    members = points_within_radius(center, 500.0, ring_items, ring_points)
    assert members == [ring_items[0], ring_items[1], ring_points[0]]


def test_within_radius_boundary_is_inclusive(center, north) -> None:
    p = NamedPoint(name="edge", coordinates=north(center, 321.0))
    r = distance(center, p.coordinates)
    assert points_within_radius(center, r, [], [p]) == [p]


def test_within_radius_is_monotonic(center, ring_items, ring_points) -> None:
    small = points_within_radius(center, 480.0, ring_items, ring_points)
    for r in (500.0, 900.0, 5000.0):
        bigger = points_within_radius(center, r, ring_items, ring_points)
        assert all(m in bigger for m in small)


def test_within_radius_is_idempotent(items, points) -> None:
    c = GeoPoint(55.27, 25.20)
    first = points_within_radius(c, 3000.0, items, points)
    second = points_within_radius(c, 3000.0, items, points)
    assert first == second
    assert first


def test_zero_radius_only_matches_coincident(center, items, points) -> None:
    members = points_within_radius(center, 0.0, items, points)
    assert [m.kind for m in members] == ["item", "point"]
    assert members[1].name == "Burj Khalifa"


def test_within_radius_empty_inputs(center) -> None:
    assert points_within_radius(center, 1000.0, [], []) == []


def test_within_radius_agrees_with_circle_test(items, points) -> None:
    c = GeoPoint(55.27, 25.20)
    members = points_within_radius(c, 2500.0, items, points)
    expected = [m for m in (*items, *points) if is_inside_circle(m.coordinates, c, 2500.0)]
    assert members == expected


def test_is_nearby_is_a_strict_box() -> None:
    a = GeoPoint(55.0, 25.0)
    assert is_nearby(a, GeoPoint(55.0009, 24.9991), 0.001)
    assert not is_nearby(a, GeoPoint(55.0011, 25.0), 0.001)
    assert not is_nearby(a, GeoPoint(55.0, 25.002), 0.001)


def test_proximity_match_threshold_is_tunable() -> None:
    it = Item(id="x", coordinates=GeoPoint(55.0, 25.0), timestamp=T)
    p = NamedPoint(name="p", coordinates=GeoPoint(55.003, 25.003))
    assert proximity_match([it], [p]) == []
    assert proximity_match([it], [p], threshold_deg=0.005) == [p]


def test_proximity_match_keeps_point_order(items, points) -> None:
    matched = proximity_match(items, points)
    names = [p.name for p in matched]
    assert names == ["Burj Khalifa", "Dubai Marina"]
    assert proximity_match(items, points) == matched


def test_filter_items_is_case_insensitive_substring() -> None:
    data = [
        Item(id="Truck-01", coordinates=GeoPoint(0, 0), timestamp=T),
        Item(id="truck-02", coordinates=GeoPoint(0, 0), timestamp=T),
        Item(id="van-01", coordinates=GeoPoint(0, 0), timestamp=T),
    ]
    assert [it.id for it in filter_items(data, "TRUCK")] == ["Truck-01", "truck-02"]
    assert [it.id for it in filter_items(data, "01")] == ["Truck-01", "van-01"]
    assert filter_items(data, "  ") == data


def test_apply_filter_without_query_keeps_everything(items, points) -> None:
    res = apply_filter(items, points, None)
    assert not res.is_active
    assert list(res.filtered_items) == items
    assert list(res.matched_points) == points


def test_apply_filter_matches_nearby_points(items, points) -> None:
    res = apply_filter(items, points, "2")
    assert res.is_active
    assert len(res.filtered_items) == 3
    assert [p.name for p in res.matched_points] == ["Dubai Marina"]


def test_apply_filter_does_not_mutate_inputs(items, points) -> None:
    before = (list(items), list(points))
    apply_filter(items, points, "1")
    assert (items, points) == before


def test_member_distances(center, ring_items) -> None:
    sel = CircleSelection(center=center, radius_m=500.0, members=tuple(ring_items[:2]))
    pairs = member_distances(sel)
    assert [m for m, _ in pairs] == ring_items[:2]
    assert [d for _, d in pairs] == pytest.approx([200.0, 480.0])
