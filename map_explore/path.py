"""Trajectory reconstruction from timestamped items."""

from __future__ import annotations

from typing import Sequence

from map_explore.geo import distance
from map_explore.models import GeoPoint, Item


def build_path(items: Sequence[Item]) -> list[GeoPoint] | None:
    """Order items by time and return their coordinates.

    Callers are expected to pass items of a single id. Items with equal
    timestamps keep their relative input order (``sorted`` is stable).

    Args:
        items: Items (can be unsorted). Not modified.

    Returns:
        Coordinates in ascending timestamp order, or None if less than 2 items.
    """

    if len(items) < 2:
        return None
    pts = sorted(items, key=lambda it: it.timestamp)
    return [it.coordinates for it in pts]


def path_length_m(path: Sequence[GeoPoint] | None) -> float:
    """Total great-circle length of a path in meters."""

    if not path:
        return 0.0
    return sum(distance(path[i - 1], path[i]) for i in range(1, len(path)))
