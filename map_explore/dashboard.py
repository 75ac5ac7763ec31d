"""Per-session dashboard state.

``MapDashboard`` wires the filter, path, viewport and circle selection
together. The UI holds one instance per user session, forwards events to it
and reads back the derived results. Derived values are rebuilt from scratch
on every event.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from map_explore import selection as sel
from map_explore.features import (
    circle_collection,
    items_collection,
    path_feature,
    points_collection,
    selection_rows,
)
from map_explore.models import (
    CircleSelection,
    DashboardConfig,
    DragState,
    FilterResult,
    GeoPoint,
    Item,
    Member,
    NamedPoint,
    Viewport,
)
from map_explore.path import build_path
from map_explore.query import apply_filter
from map_explore.viewport import default_viewport, fit_bounds, focus

logger = logging.getLogger(__name__)


class MapDashboard:
    """Filter + circle-selection session over one pair of datasets.

    The datasets are never modified.
    """

    def __init__(
        self,
        items: Sequence[Item],
        points: Sequence[NamedPoint],
        config: DashboardConfig | None = None,
    ) -> None:
        self._items = tuple(items)
        self._points = tuple(points)
        self._config = config or DashboardConfig()
        self._state: sel.SelectionState = sel.Idle()
        self._filter = apply_filter(self._items, self._points, "", self._config.proximity_deg)
        self._path: list[GeoPoint] | None = None
        self._viewport = default_viewport(self._config)

    @property
    def config(self) -> DashboardConfig:
        return self._config

    @property
    def items(self) -> tuple[Item, ...]:
        return self._items

    @property
    def points(self) -> tuple[NamedPoint, ...]:
        return self._points

    @property
    def filter_result(self) -> FilterResult:
        return self._filter

    @property
    def path(self) -> list[GeoPoint] | None:
        return self._path

    @property
    def viewport(self) -> Viewport:
        return self._viewport

    @property
    def state(self) -> sel.SelectionState:
        return self._state

    @property
    def circle_selection(self) -> CircleSelection | None:
        return sel.circle_selection(self._state)

    @property
    def drag_state(self) -> DragState | None:
        return sel.drag_state(self._state)

    @property
    def is_drawing(self) -> bool:
        return sel.is_drawing(self._state)

    # --- identifier filter -------------------------------------------------

    def set_filter(self, text: str | None) -> FilterResult:
        """Filter items by id and refresh path and viewport."""

        result = apply_filter(self._items, self._points, text, self._config.proximity_deg)
        self._filter = result
        if not result.is_active:
            self._path = None
            self._viewport = default_viewport(self._config)
            return result

        self._path = build_path(result.filtered_items)
        fitted = fit_bounds(
            result.filtered_items,
            single_zoom=self._config.single_item_zoom,
            multi_zoom=self._config.multi_item_zoom,
        )
        # no match: back to the default camera
        self._viewport = fitted if fitted is not None else default_viewport(self._config)
        logger.info(
            "filter %r: items=%s points=%s path=%s",
            result.query,
            len(result.filtered_items),
            len(result.matched_points),
            len(self._path) if self._path else 0,
        )
        return result

    def clear_filter(self) -> FilterResult:
        return self.set_filter("")

    # --- circle selection --------------------------------------------------

    def toggle_drawing(self) -> sel.SelectionState:
        self._state = sel.toggle_drawing(self._state)
        return self._state

    def pointer_down(self, location: GeoPoint) -> sel.SelectionState:
        self._state = sel.pointer_down(self._state, location)
        return self._state

    def pointer_move(self, location: GeoPoint) -> sel.SelectionState:
        self._state = sel.pointer_move(self._state, location)
        return self._state

    def pointer_up(self) -> sel.SelectionState:
        """Commit against the filter result in effect right now."""

        self._state = sel.pointer_up(
            self._state,
            self._filter.filtered_items,
            self._filter.matched_points,
        )
        return self._state

    def resize(self) -> sel.SelectionState:
        self._state = sel.resize(self._state)
        return self._state

    def clear_selection(self) -> sel.SelectionState:
        self._state = sel.clear(self._state)
        return self._state

    def focus_member(self, member: Member) -> Viewport:
        self._viewport = focus(member.coordinates, self._config.focus_zoom)
        return self._viewport

    # --- rendering ---------------------------------------------------------

    def selection_rows(self) -> list[dict[str, Any]]:
        current = self.circle_selection
        return selection_rows(current) if current is not None else []

    def feature_layers(self) -> dict[str, Any]:
        """Named GeoJSON layers for a renderer.

        Keys: ``items``, ``points``, ``path`` and ``circle`` (the last two may
        be None).
        """

        circle: dict[str, Any] | None = None
        state = self._state
        if isinstance(state, sel.Dragging):
            circle = circle_collection(
                state.drag.center,
                state.drag.radius_m,
                self._config.circle_segments,
                pointer=state.pointer,
            )
        elif isinstance(state, sel.Committed):
            circle = circle_collection(
                state.selection.center,
                state.selection.radius_m,
                self._config.circle_segments,
            )

        return {
            "items": items_collection(self._filter.filtered_items, self._config.tz_name),
            "points": points_collection(self._filter.matched_points),
            "path": path_feature(self._path),
            "circle": circle,
        }
