#!/usr/bin/env python3
"""
Tests for the undo/redo snapshot history
"""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

import pytest

from drawing import FloorPlanHistory, DrawingMode, Point
from drawing.input_events import PointerDown, KeyPress


def _state(n):
    return {'walls': [{'id': f'wall-{n}'}]}


def test_undo_redo_walk():
    history = FloorPlanHistory({})
    history.save_state(_state(1))
    history.save_state(_state(2))

    assert history.can_undo and not history.can_redo
    assert history.undo() == _state(1)
    assert history.undo() == {}
    assert history.undo() is None
    assert history.redo() == _state(1)
    assert history.current_state == _state(1)


def test_save_after_undo_drops_redo_branch():
    history = FloorPlanHistory({})
    history.save_state(_state(1))
    history.save_state(_state(2))
    history.undo()
    history.save_state(_state(3))

    assert not history.can_redo
    assert history.undo() == _state(1)


def test_history_is_capped():
    history = FloorPlanHistory({}, limit=50)
    for n in range(60):
        history.save_state(_state(n))

    assert len(history) == 50
    assert history.current_state == _state(59)
    undos = 0
    while history.undo() is not None:
        undos += 1
    assert undos == 49
    assert history.current_state == _state(10)


def test_snapshots_are_copies():
    state = _state(1)
    history = FloorPlanHistory({})
    history.save_state(state)
    state['walls'].clear()
    assert history.current_state == _state(1)


def test_invalid_limit():
    with pytest.raises(ValueError):
        FloorPlanHistory({}, limit=0)


def test_restores_engine_snapshot(engine):
    history = FloorPlanHistory(engine.get_entities())
    engine.entities_changed.connect(lambda: history.save_state(engine.get_entities()))

    engine.set_mode(DrawingMode.WALL)
    engine.dispatch(PointerDown(Point(0, 0)))
    engine.dispatch(PointerDown(Point(100, 0)))
    engine.dispatch(KeyPress("Enter"))
    assert len(engine.walls) == 1

    engine.load_entities(history.undo())
    assert engine.walls == []
