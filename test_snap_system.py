#!/usr/bin/env python3
"""
Tests for magnetic and grid snapping
"""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

import pytest

from drawing.config import EngineConfig
from drawing.entities import Point, WallSegment, Room, PlacedProduct, Dimensions
from drawing.snap_system import SnapSystem


def _wall(x1, y1, x2, y2):
    return WallSegment(Point(x1, y1), Point(x2, y2))


def test_endpoint_beats_grid():
    snap = SnapSystem(scale=0.15, grid_size_mm=100)
    result = snap.snap_point(Point(5, 2), walls=[_wall(0, 0, 100, 0)])
    assert result.point == Point(0, 0)
    assert result.snapped
    assert result.source == 'endpoint'


def test_midpoint_when_no_endpoint_in_range():
    snap = SnapSystem()
    result = snap.snap_point(Point(52, 6), walls=[_wall(0, 0, 100, 0)])
    assert result.point == Point(50, 0)
    assert result.source == 'midpoint'


def test_endpoint_has_priority_over_closer_midpoint():
    # Short wall: its midpoint (10,0) is closer than the far endpoint of another wall
    walls = [_wall(0, 0, 20, 0), _wall(200, 0, 25, 0)]
    result = SnapSystem().snap_point(Point(12, 0), walls=walls)
    assert result.source == 'endpoint'
    assert result.point == Point(20, 0)


def test_threshold_is_exclusive():
    snap = SnapSystem(threshold_px=20, grid_enabled=False)
    result = snap.snap_point(Point(20, 0), walls=[_wall(0, 0, 300, 0)])
    assert not result.snapped
    assert result.point == Point(20, 0)


def test_tie_break_nearest():
    walls = [_wall(0, 0, 0, 300), _wall(10, 0, 10, 300)]
    result = SnapSystem(tie_break="nearest").snap_point(Point(8, 0), walls=walls)
    assert result.point == Point(10, 0)


def test_tie_break_first_in_insertion_order():
    walls = [_wall(0, 0, 0, 300), _wall(10, 0, 10, 300)]
    result = SnapSystem(tie_break="first").snap_point(Point(8, 0), walls=walls)
    assert result.point == Point(0, 0)


def test_unknown_tie_break_rejected():
    with pytest.raises(ValueError):
        SnapSystem(tie_break="random")


def test_grid_snap_rounds_each_axis():
    # 100 mm at 0.15 px/mm is a 15 px grid
    result = SnapSystem(scale=0.15, grid_size_mm=100).snap_point(Point(22, 37))
    assert result.point.x == pytest.approx(15)
    assert result.point.y == pytest.approx(30)
    assert result.snapped
    assert result.source == 'grid'


def test_grid_ties_round_up():
    snap = SnapSystem(scale=1.0, grid_size_mm=10)
    xs = [snap.snap_point(Point(x, 0)).point.x for x in (5, 15, 25, 35, -5)]
    assert xs == [10, 20, 30, 40, 0]


def test_grid_point_already_on_grid_is_not_snapped():
    result = SnapSystem(scale=0.15, grid_size_mm=100).snap_point(Point(30, 45))
    assert result.source == 'grid'
    assert not result.snapped


def test_grid_disabled_returns_raw():
    result = SnapSystem(grid_enabled=False).snap_point(Point(22, 37))
    assert result.point == Point(22, 37)
    assert not result.snapped
    assert result.source is None


def test_degenerate_grid_is_skipped():
    result = SnapSystem(scale=0.0).snap_point(Point(22, 37))
    assert result.point == Point(22, 37)
    assert not result.snapped


def test_threshold_does_not_depend_on_zoom():
    snap = SnapSystem(grid_enabled=False)
    snap.configure(scale=0.6)
    result = snap.snap_point(Point(15, 0), walls=[_wall(0, 0, 300, 0)])
    assert result.source == 'endpoint'


def test_object_snap_is_opt_in():
    product = PlacedProduct('bench', 'Bench', Point(200, 200), Dimensions(1000, 500))
    room = Room('Lab', [Point(400, 400), Point(500, 400), Point(500, 500)])

    off = SnapSystem(grid_enabled=False)
    assert not off.snap_point(Point(205, 195), products=[product]).snapped

    on = SnapSystem.from_config(EngineConfig(snap_to_objects=True, show_grid=False))
    assert on.snap_point(Point(205, 195), products=[product]).source == 'object'
    vertex = on.snap_point(Point(498, 404), rooms=[room], products=[product])
    assert vertex.source == 'vertex'
    assert vertex.point == Point(500, 400)
