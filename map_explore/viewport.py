"""Camera recommendations for a set of items."""

from __future__ import annotations

from typing import Sequence

from map_explore.models import (
    FOCUS_ZOOM,
    MULTI_ITEM_ZOOM,
    SINGLE_ITEM_ZOOM,
    DashboardConfig,
    GeoPoint,
    Item,
    Viewport,
)


def fit_bounds(
    items: Sequence[Item],
    single_zoom: float = SINGLE_ITEM_ZOOM,
    multi_zoom: float = MULTI_ITEM_ZOOM,
) -> Viewport | None:
    """Center on the middle of the items' bounding box.

    This is the box midpoint, not the centroid, and the zoom is one of two
    fixed levels rather than fitted to the box extent.

    Returns:
        Viewport, or None for empty input (callers fall back to their default).
    """

    if not items:
        return None
    lons = [it.coordinates.longitude for it in items]
    lats = [it.coordinates.latitude for it in items]
    center = GeoPoint(
        longitude=(min(lons) + max(lons)) / 2.0,
        latitude=(min(lats) + max(lats)) / 2.0,
    )
    zoom = single_zoom if len(items) == 1 else multi_zoom
    return Viewport(center=center, zoom=zoom)


def default_viewport(config: DashboardConfig) -> Viewport:
    return Viewport(center=config.default_point, zoom=config.default_zoom)


def focus(point: GeoPoint, zoom: float = FOCUS_ZOOM) -> Viewport:
    """Center the camera on a single position."""

    return Viewport(center=point, zoom=zoom)
