"""Radius and proximity queries over items and points of interest."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from map_explore.geo import distance, is_inside_circle
from map_explore.models import (
    DEFAULT_PROXIMITY_DEG,
    CircleSelection,
    FilterResult,
    GeoPoint,
    Item,
    Member,
    NamedPoint,
)

logger = logging.getLogger(__name__)


def points_within_radius(
    center: GeoPoint,
    radius_m: float,
    items: Iterable[Item],
    points: Iterable[NamedPoint],
) -> list[Member]:
    """Collect every item and point within ``radius_m`` of ``center``.

    The disk is closed: an entity exactly ``radius_m`` away is included.

    Returns:
        Matching items in input order, followed by matching points in input order.
    """

    members: list[Member] = [it for it in items if is_inside_circle(it.coordinates, center, radius_m)]
    n_items = len(members)
    members.extend(p for p in points if is_inside_circle(p.coordinates, center, radius_m))
    logger.debug(
        "radius query r=%.1fm: items=%s points=%s",
        radius_m,
        n_items,
        len(members) - n_items,
    )
    return members


def is_nearby(a: GeoPoint, b: GeoPoint, threshold_deg: float = DEFAULT_PROXIMITY_DEG) -> bool:
    """Coarse "same place" test.

    Both the longitude and the latitude difference must be strictly below
    ``threshold_deg``. This is a box, not a metric radius: its east-west
    extent in meters shrinks with latitude.
    """

    return abs(a.longitude - b.longitude) < threshold_deg and abs(a.latitude - b.latitude) < threshold_deg


def proximity_match(
    filtered_items: Sequence[Item],
    all_points: Iterable[NamedPoint],
    threshold_deg: float = DEFAULT_PROXIMITY_DEG,
) -> list[NamedPoint]:
    """Points of interest lying near at least one of the filtered items."""

    return [
        p
        for p in all_points
        if any(is_nearby(it.coordinates, p.coordinates, threshold_deg) for it in filtered_items)
    ]


def filter_items(items: Iterable[Item], query: str) -> list[Item]:
    """Case-insensitive substring match on ``Item.id``.

    A blank query matches everything.
    """

    needle = query.strip().lower()
    if not needle:
        return list(items)
    return [it for it in items if needle in it.id.lower()]


def apply_filter(
    items: Sequence[Item],
    points: Sequence[NamedPoint],
    query: str | None,
    threshold_deg: float = DEFAULT_PROXIMITY_DEG,
) -> FilterResult:
    """Run the identifier filter and the proximity match in one go.

    With an empty query every item and every point is kept.
    """

    q = query or ""
    if not q.strip():
        return FilterResult(query=q, filtered_items=tuple(items), matched_points=tuple(points))

    filtered = filter_items(items, q)
    matched = proximity_match(filtered, points, threshold_deg)
    logger.debug("filter %r: items=%s points=%s", q, len(filtered), len(matched))
    return FilterResult(query=q, filtered_items=tuple(filtered), matched_points=tuple(matched))


def member_distances(selection: CircleSelection) -> list[tuple[Member, float]]:
    """Pair each selection member with its distance from the center."""

    return [(m, distance(selection.center, m.coordinates)) for m in selection.members]
