#!/usr/bin/env python3
"""
Tests for the polyline drawing state and its transitions
"""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from drawing.entities import DrawingMode, Point
from drawing.drawing_tools import (
    IDLE, Idle, Drawing, WallCommit, RoomCommit, DrawingStateMachine,
    add_point, commit, cancel,
)


P0, P1, P2 = Point(0, 0), Point(100, 0), Point(100, 100)


def test_first_click_starts_drawing():
    state = add_point(IDLE, DrawingMode.WALL, P0)
    assert state == Drawing(DrawingMode.WALL, (P0,))


def test_clicks_accumulate():
    state = IDLE
    for p in (P0, P1, P2):
        state = add_point(state, DrawingMode.WALL, p)
    assert state.points == (P0, P1, P2)


def test_repeated_point_is_ignored():
    state = add_point(add_point(IDLE, DrawingMode.ROOM, P0), DrawingMode.ROOM, P0)
    assert state.points == (P0,)


def test_single_click_modes_do_not_accumulate():
    for mode in (DrawingMode.SELECT, DrawingMode.DOOR, DrawingMode.TEXT):
        assert add_point(IDLE, mode, P0) is IDLE


def test_wall_commit_with_one_point_is_suppressed():
    state = Drawing(DrawingMode.WALL, (P0,))
    new_state, result = commit(state)
    assert result is None
    assert new_state == state


def test_wall_commit_emits_one_segment_per_pair():
    new_state, result = commit(Drawing(DrawingMode.WALL, (P0, P1, P2)))
    assert isinstance(new_state, Idle)
    assert result == WallCommit(((P0, P1), (P1, P2)))


def test_wall_commit_drops_zero_length_pairs():
    _, result = commit(Drawing(DrawingMode.WALL, (P0, P1, P1, P2)))
    assert result.segments == ((P0, P1), (P1, P2))

    state, result = commit(Drawing(DrawingMode.WALL, (P0, P0)))
    assert result is None
    assert state is IDLE


def test_room_commit_requires_three_points():
    state, result = commit(Drawing(DrawingMode.ROOM, (P0, P1)))
    assert result is None
    assert state is IDLE


def test_room_commit_drops_closing_point():
    _, result = commit(Drawing(DrawingMode.ROOM, (P0, P1, P2, P0)))
    assert result == RoomCommit((P0, P1, P2))


def test_cancel_discards_points():
    assert cancel(Drawing(DrawingMode.ROOM, (P0, P1, P2))) is IDLE


def test_commit_while_idle_is_noop():
    assert commit(IDLE) == (IDLE, None)


def test_machine_signals(qapp):
    machine = DrawingStateMachine(DrawingMode.WALL)
    finished = []
    machine.finished.connect(finished.append)

    for p in (P0, P1):
        machine.add_point(p)
    assert machine.is_drawing
    result = machine.commit()

    assert finished == [result]
    assert not machine.is_drawing
    assert machine.preview is None


def test_mode_switch_cancels_path(qapp):
    machine = DrawingStateMachine(DrawingMode.ROOM)
    modes = []
    machine.mode_changed.connect(modes.append)
    machine.add_point(P0)
    machine.add_point(P1)

    machine.set_mode(DrawingMode.WALL)

    assert machine.state is IDLE
    assert modes == ['wall']


def test_rescale_moves_path(qapp):
    machine = DrawingStateMachine(DrawingMode.WALL)
    machine.add_point(P1)
    machine.rescale(2.0)
    assert machine.points == (Point(200, 0),)
