from __future__ import annotations

import pytest

from map_explore.features import (
    circle_collection,
    items_collection,
    member_properties,
    path_feature,
    points_collection,
    selection_rows,
)
from map_explore.models import CircleSelection, GeoPoint


def test_items_collection_properties(items) -> None:
    fc = items_collection(items[:1])
    assert fc["type"] == "FeatureCollection"
    feat = fc["features"][0]
    assert feat["geometry"] == {"type": "Point", "coordinates": [55.2744, 25.2048]}
    assert feat["properties"]["title"] == "Item 1"
    assert feat["properties"]["kind"] == "item"
    assert feat["properties"]["timestamp"].startswith("2024-02-01T10:00:00")


def test_points_collection_properties(points) -> None:
    props = points_collection(points)["features"][0]["properties"]
    assert props == {"kind": "point", "name": "Burj Khalifa", "timestamp": "", "title": "Burj Khalifa"}


def test_path_feature() -> None:
    assert path_feature(None) is None
    assert path_feature([GeoPoint(1.0, 2.0)]) is None
    feat = path_feature([GeoPoint(1.0, 2.0), GeoPoint(3.0, 4.0)])
    assert feat["geometry"]["coordinates"] == [[1.0, 2.0], [3.0, 4.0]]


def test_circle_collection_polygon_ring(center) -> None:
    fc = circle_collection(center, 500.0, segments=32)
    center_feat, circle_feat = fc["features"]
    assert center_feat["geometry"]["coordinates"] == center.as_lonlat()
    ring = circle_feat["geometry"]["coordinates"][0]
    assert len(ring) == 33
    assert ring[0] == ring[-1]


def test_circle_collection_guides(center, north) -> None:
    pointer = north(center, 1234.4)
    fc = circle_collection(center, 1234.4, pointer=pointer)
    line, marker = fc["features"][2:]
    assert line["geometry"]["coordinates"] == [center.as_lonlat(), pointer.as_lonlat()]
    assert marker["properties"] == {"type": "distance-marker", "distance": 1234}
    assert marker["geometry"]["coordinates"][1] == pytest.approx((center.latitude + pointer.latitude) / 2)


def test_selection_rows(center, ring_items, ring_points) -> None:
    sel = CircleSelection(center=center, radius_m=500.0, members=(ring_items[0], ring_points[0]))
    rows = selection_rows(sel)
    assert [(r["type"], r["label"], r["distance_m"]) for r in rows] == [
        ("Item", "r200.0", 200),
        ("Point", "near", 250),
    ]


def test_items_collection_renders_timestamps_in_zone(items) -> None:
    props = items_collection(items[:1], "Asia/Dubai")["features"][0]["properties"]
    assert props["timestamp"] == "2024-02-01T14:00:00+04:00"


def test_point_properties_fill_item_tooltip_fields(points) -> None:
    # both layers share the "{title}\n{timestamp}" tooltip
    props = points_collection(points)["features"][0]["properties"]
    assert {"title", "timestamp"} <= props.keys()


def test_member_properties_rejects_non_members() -> None:
    with pytest.raises(TypeError):
        member_properties(GeoPoint(1.0, 2.0))
