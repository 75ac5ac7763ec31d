"""Circle selection driven by pointer events.

The selection is a small state machine::

    Idle --toggle--> Placing --pointer_down--> Dragging --pointer_up--> Committed
                       |                          |  ^                     |
                       +------toggle/cancel-------+  +-------resize--------+
                                   |                                       |
                                   v                                       v
                                  Idle <--------------clear---------------+

States are immutable values. Every transition function takes the current
state and returns the next one; an event that does not apply to the current
state returns it unchanged. The caller owns the state object, so separate
sessions never share drag state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from map_explore.geo import distance
from map_explore.models import CircleSelection, DragState, GeoPoint, Item, NamedPoint
from map_explore.query import points_within_radius

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Idle:
    """No circle, drawing mode off."""


@dataclass(frozen=True, slots=True)
class Placing:
    """Drawing mode on, waiting for the center."""


@dataclass(frozen=True, slots=True)
class Dragging:
    """Center fixed, radius follows the pointer.

    Attributes:
        drag: Live circle definition.
        pointer: Last pointer position, None until the first move.
    """

    drag: DragState
    pointer: GeoPoint | None = None


@dataclass(frozen=True, slots=True)
class Committed:
    """A finished selection."""

    selection: CircleSelection


SelectionState = Idle | Placing | Dragging | Committed


def toggle_drawing(state: SelectionState) -> SelectionState:
    """The "Draw circle" / "Cancel" button.

    Turning drawing on from Idle or Committed starts a new circle (a committed
    selection is dropped). Turning it off mid-draw cancels without committing.
    """

    if isinstance(state, (Idle, Committed)):
        return enable_drawing(state)
    return cancel(state)


def enable_drawing(state: SelectionState) -> SelectionState:
    if isinstance(state, (Placing, Dragging)):
        return state
    logger.debug("drawing enabled (from %s)", type(state).__name__)
    return Placing()


def cancel(state: SelectionState) -> SelectionState:
    """Discard any in-flight drag or committed selection."""

    if isinstance(state, Idle):
        return state
    logger.debug("selection cancelled (from %s)", type(state).__name__)
    return Idle()


def pointer_down(state: SelectionState, location: GeoPoint) -> SelectionState:
    """Fix the circle center at ``location``.

    Only meaningful while Placing. During a resize the center is kept, so a
    press is ignored.
    """

    if not isinstance(state, Placing):
        return state
    return Dragging(drag=DragState(center=location, radius_m=0.0, resizing=False), pointer=location)


def pointer_move(state: SelectionState, location: GeoPoint) -> SelectionState:
    """Recompute the radius as the distance from the center to the pointer."""

    if not isinstance(state, Dragging):
        return state
    drag = state.drag
    radius = distance(drag.center, location)
    return Dragging(
        drag=DragState(center=drag.center, radius_m=radius, resizing=drag.resizing),
        pointer=location,
    )


def pointer_up(
    state: SelectionState,
    items: Iterable[Item],
    points: Iterable[NamedPoint],
) -> SelectionState:
    """Commit the drag.

    The query runs over ``items`` and ``points`` as passed now, so callers
    must hand in the currently filtered datasets, not ones captured when the
    drag started. A zero radius still commits; it selects only entities lying
    exactly on the center.
    """

    if not isinstance(state, Dragging):
        return state
    drag = state.drag
    members = points_within_radius(drag.center, drag.radius_m, items, points)
    selection = CircleSelection(center=drag.center, radius_m=drag.radius_m, members=tuple(members))
    logger.debug(
        "selection committed: center=(%.6f, %.6f) r=%.1fm members=%s resized=%s",
        drag.center.longitude,
        drag.center.latitude,
        drag.radius_m,
        len(members),
        drag.resizing,
    )
    return Committed(selection=selection)


def resize(state: SelectionState) -> SelectionState:
    """Re-open a committed circle for dragging, keeping its center and radius."""

    if not isinstance(state, Committed):
        return state
    sel = state.selection
    return Dragging(drag=DragState(center=sel.center, radius_m=sel.radius_m, resizing=True))


def clear(state: SelectionState) -> SelectionState:
    """Drop a committed selection."""

    if not isinstance(state, Committed):
        return state
    return Idle()


def is_drawing(state: SelectionState) -> bool:
    return isinstance(state, (Placing, Dragging))


def drag_state(state: SelectionState) -> DragState | None:
    return state.drag if isinstance(state, Dragging) else None


def circle_selection(state: SelectionState) -> CircleSelection | None:
    return state.selection if isinstance(state, Committed) else None
