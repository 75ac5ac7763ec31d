"""GeoJSON rendering of items, points, paths and selection circles.

Everything here returns plain dicts shaped as GeoJSON so any map renderer
(pydeck, folium, a browser map) can consume it.
"""

from __future__ import annotations

from typing import Any, Iterable, Sequence

from map_explore.geo import circle_polygon, midpoint
from map_explore.models import (
    DEFAULT_CIRCLE_SEGMENTS,
    CircleSelection,
    GeoPoint,
    Item,
    Member,
    NamedPoint,
    member_label,
    member_type,
)
from map_explore.query import member_distances
from map_explore.timeutils import format_timestamp

Feature = dict[str, Any]


def _point_feature(point: GeoPoint, properties: dict[str, Any]) -> Feature:
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": point.as_lonlat()},
        "properties": properties,
    }


def feature_collection(features: Iterable[Feature]) -> dict[str, Any]:
    return {"type": "FeatureCollection", "features": list(features)}


def member_properties(member: Member, tz_name: str | None = None) -> dict[str, Any]:
    """Feature properties of an item or point, including a popup title.

    Item timestamps are rendered in ``tz_name`` when given. Points carry an
    empty ``timestamp`` so one tooltip template fits both layers.
    """

    match getattr(member, "kind", None):
        case "item":
            return {
                "kind": member.kind,
                "id": member.id,
                "timestamp": format_timestamp(member.timestamp, tz_name),
                "title": f"Item {member.id}",
            }
        case "point":
            return {"kind": member.kind, "name": member.name, "timestamp": "", "title": member.name}
    raise TypeError(f"未知成员类型：{member!r}")


def items_collection(items: Iterable[Item], tz_name: str | None = None) -> dict[str, Any]:
    return feature_collection(_point_feature(it.coordinates, member_properties(it, tz_name)) for it in items)


def points_collection(points: Iterable[NamedPoint]) -> dict[str, Any]:
    return feature_collection(_point_feature(p.coordinates, member_properties(p)) for p in points)


def path_feature(path: Sequence[GeoPoint] | None) -> Feature | None:
    """LineString feature for a trajectory (None if there is no path)."""

    if not path or len(path) < 2:
        return None
    return {
        "type": "Feature",
        "geometry": {"type": "LineString", "coordinates": [p.as_lonlat() for p in path]},
        "properties": {"type": "path"},
    }


def circle_collection(
    center: GeoPoint,
    radius_m: float,
    segments: int = DEFAULT_CIRCLE_SEGMENTS,
    pointer: GeoPoint | None = None,
) -> dict[str, Any]:
    """Center marker and circle polygon, plus drag guides while a pointer is given.

    Feature ``properties.type`` is one of ``center``, ``circle``,
    ``radius-line`` and ``distance-marker``.
    """

    ring = circle_polygon(center, radius_m, segments)
    features: list[Feature] = [
        _point_feature(center, {"type": "center"}),
        {
            "type": "Feature",
            "geometry": {"type": "Polygon", "coordinates": [[p.as_lonlat() for p in ring]]},
            "properties": {"type": "circle", "radius_m": radius_m},
        },
    ]
    if pointer is not None:
        features.append(
            {
                "type": "Feature",
                "geometry": {"type": "LineString", "coordinates": [center.as_lonlat(), pointer.as_lonlat()]},
                "properties": {"type": "radius-line"},
            }
        )
        features.append(
            _point_feature(
                midpoint(center, pointer),
                {"type": "distance-marker", "distance": round(radius_m)},
            )
        )
    return feature_collection(features)


def selection_rows(selection: CircleSelection) -> list[dict[str, Any]]:
    """Member table of a committed selection (type, name/id, distance)."""

    return [
        {
            "type": member_type(m),
            "label": member_label(m),
            "distance_m": round(d),
            "longitude": m.coordinates.longitude,
            "latitude": m.coordinates.latitude,
        }
        for m, d in member_distances(selection)
    ]
