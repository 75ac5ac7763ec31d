"""Geospatial utilities (no external dependencies)."""

from __future__ import annotations

import math

from map_explore.models import EARTH_RADIUS_M, METERS_PER_DEGREE, GeoPoint


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute Haversine distance in meters between two lat/lon points.

    Args:
        lat1: Latitude 1 in degrees.
        lon1: Longitude 1 in degrees.
        lat2: Latitude 2 in degrees.
        lon2: Longitude 2 in degrees.

    Returns:
        Distance in meters. NaN inputs give NaN.

    Notes:
        The longitude difference is used as-is (not wrapped), so points on
        both sides of the antimeridian are measured the long way round.
    """

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2.0) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2.0) ** 2
    # rounding can push a just above 1 for antipodal points
    if a > 1.0:
        a = 1.0
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return EARTH_RADIUS_M * c


def distance(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance in meters between two GeoPoints."""

    return haversine_m(a.latitude, a.longitude, b.latitude, b.longitude)


def is_inside_circle(point: GeoPoint, center: GeoPoint, radius_m: float) -> bool:
    """Check whether a point is inside or on the boundary of a circle."""

    return distance(center, point) <= radius_m


def circle_polygon(center: GeoPoint, radius_m: float, segments: int = 64) -> list[GeoPoint]:
    """Approximate a circle on the map as a closed ring.

    Vertices are sampled at ``i * 360 / segments`` degrees, starting north and
    going clockwise. Offsets use a flat local scale of ~111,320 m per degree,
    with longitude stretched by ``1 / cos(latitude)``.

    Args:
        center: Circle center.
        radius_m: Radius in meters. 0 collapses every vertex onto the center.
        segments: Number of distinct vertices.

    Returns:
        ``segments + 1`` points; the last repeats the first.

    Raises:
        ValueError: If segments < 3.
    """

    if segments < 3:
        raise ValueError(f"segments 至少为 3：{segments}")

    lat_scale = METERS_PER_DEGREE
    lon_scale = METERS_PER_DEGREE * math.cos(math.radians(center.latitude))

    ring: list[GeoPoint] = []
    for i in range(segments):
        theta = math.radians(i * 360.0 / segments)
        d_lat = radius_m / lat_scale * math.cos(theta)
        d_lon = radius_m / lon_scale * math.sin(theta)
        ring.append(GeoPoint(longitude=center.longitude + d_lon, latitude=center.latitude + d_lat))
    ring.append(ring[0])
    return ring


def midpoint(a: GeoPoint, b: GeoPoint) -> GeoPoint:
    """Planar midpoint in degrees (label placement only)."""

    return GeoPoint(longitude=(a.longitude + b.longitude) / 2.0, latitude=(a.latitude + b.latitude) / 2.0)
