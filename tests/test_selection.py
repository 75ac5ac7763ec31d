from __future__ import annotations

import pytest

from map_explore import selection as sel
from map_explore.models import DragState


def _commit(center, edge, items, points):
    state = sel.toggle_drawing(sel.Idle())
    state = sel.pointer_down(state, center)
    state = sel.pointer_move(state, edge)
    return sel.pointer_up(state, items, points)


def test_enable_drawing_enters_placing() -> None:
    state = sel.toggle_drawing(sel.Idle())
    assert isinstance(state, sel.Placing)
    assert sel.is_drawing(state)


def test_pointer_down_starts_zero_radius_drag(center) -> None:
    state = sel.pointer_down(sel.Placing(), center)
    assert isinstance(state, sel.Dragging)
    assert state.drag == DragState(center=center, radius_m=0.0, resizing=False)


def test_pointer_move_tracks_distance_not_history(center, north) -> None:
    state = sel.pointer_down(sel.Placing(), center)
    state = sel.pointer_move(state, north(center, 800.0))
    state = sel.pointer_move(state, north(center, 250.0))
    assert sel.drag_state(state).radius_m == pytest.approx(250.0)
    assert state.pointer == north(center, 250.0)


def test_commit_selects_items_within_radius(center, north, ring_items, ring_points) -> None:
    state = _commit(center, north(center, 500.0), ring_items, ring_points)

    assert isinstance(state, sel.Committed)
    assert not sel.is_drawing(state)
    selection = sel.circle_selection(state)
    assert selection.center == center
    assert selection.radius_m == pytest.approx(500.0)
    assert list(selection.members) == [ring_items[0], ring_items[1], ring_points[0]]
    assert selection.items == ring_items[:2]
    assert selection.points == ring_points[:1]


def test_cancel_mid_drag_produces_no_selection(center, north, ring_items, ring_points) -> None:
    state = sel.toggle_drawing(sel.Idle())
    state = sel.pointer_down(state, center)
    state = sel.pointer_move(state, north(center, 300.0))
    state = sel.toggle_drawing(state)

    assert isinstance(state, sel.Idle)
    assert sel.drag_state(state) is None
    assert sel.circle_selection(state) is None
    # a late pointer-up is ignored
    assert sel.pointer_up(state, ring_items, ring_points) is state


def test_cancel_while_placing() -> None:
    assert isinstance(sel.toggle_drawing(sel.Placing()), sel.Idle)


def test_resize_preserves_center(center, north, ring_items, ring_points) -> None:
    state = _commit(center, north(center, 300.0), ring_items, ring_points)
    assert sel.circle_selection(state).radius_m == pytest.approx(300.0)

    state = sel.resize(state)
    assert isinstance(state, sel.Dragging)
    assert state.drag.resizing
    assert state.drag.center == center
    assert state.drag.radius_m == pytest.approx(300.0)

    # pressing again does not move the center
    assert sel.pointer_down(state, north(center, 50.0)) is state

    state = sel.pointer_move(state, north(center, 600.0))
    state = sel.pointer_up(state, ring_items, ring_points)
    selection = sel.circle_selection(state)
    assert selection.center == center
    assert selection.radius_m == pytest.approx(600.0)
    assert list(selection.members) == [ring_items[0], ring_items[1], ring_points[0]]


def test_zero_radius_commit_keeps_coincident_members(center, items, points) -> None:
    state = sel.pointer_down(sel.Placing(), center)
    state = sel.pointer_up(state, items, points)
    selection = sel.circle_selection(state)
    assert selection.radius_m == 0.0
    assert [m.kind for m in selection.members] == ["item", "point"]


def test_clear_returns_to_idle(center, north, ring_items, ring_points) -> None:
    state = _commit(center, north(center, 300.0), ring_items, ring_points)
    assert isinstance(sel.clear(state), sel.Idle)


def test_new_draw_discards_committed_selection(center, north, ring_items, ring_points) -> None:
    state = _commit(center, north(center, 300.0), ring_items, ring_points)
    state = sel.toggle_drawing(state)
    assert isinstance(state, sel.Placing)
    assert sel.circle_selection(state) is None


@pytest.mark.parametrize(
    "state",
    [sel.Idle(), sel.Placing()],
)
def test_invalid_preconditions_are_noops(state, center) -> None:
    assert sel.resize(state) is state
    assert sel.clear(state) is state
    assert sel.pointer_move(state, center) is state
    assert sel.pointer_up(state, [], []) is state


def test_pointer_down_ignored_when_not_placing(center) -> None:
    idle = sel.Idle()
    assert sel.pointer_down(idle, center) is idle


def test_enable_drawing_while_drawing_is_noop(center) -> None:
    dragging = sel.pointer_down(sel.Placing(), center)
    assert sel.enable_drawing(dragging) is dragging
    assert isinstance(sel.cancel(dragging), sel.Idle)
