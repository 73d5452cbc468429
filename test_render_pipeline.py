#!/usr/bin/env python3
"""
Tests for draw order, previews and the QPainter image surface
"""

import math
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

import pytest

from drawing.config import EngineConfig
from drawing.drawing_tools import Drawing
from drawing.entities import (
    DrawingMode, Point, SnapResult, WallSegment, Room, Door, TextAnnotation,
    PlacedProduct, Dimensions,
)
from drawing.render_pipeline import (
    RenderPipeline, Scene, Layer, Clear, Line, Polyline, Polygon, Rect, Arc, Circle, Text,
)


def _scene(**kwargs):
    defaults = dict(scale=1.0, grid_size_mm=50.0)
    defaults.update(kwargs)
    return Scene(**defaults)


def _full_scene():
    product = PlacedProduct('bench', 'Bench', Point(300, 300), Dimensions(100, 50))
    return _scene(
        walls=[WallSegment(Point(0, 0), Point(200, 0), thickness_mm=10)],
        rooms=[Room('Lab', [Point(0, 0), Point(100, 0), Point(100, 100)], area_mm2=5000)],
        doors=[Door(Point(50, 0), width_mm=80)],
        texts=[TextAnnotation(Point(10, 10), 'Note')],
        products=[product],
        selected_ids=[product.id],
        mode=DrawingMode.WALL,
        state=Drawing(DrawingMode.WALL, (Point(0, 200), Point(100, 200))),
        preview=SnapResult(Point(150, 250), False, None),
    )


def test_layers_are_in_fixed_order():
    commands = RenderPipeline().build(_full_scene())
    layers = [c.layer for c in commands]

    assert layers == sorted(layers)
    assert isinstance(commands[0], Clear)
    assert set(layers) == set(Layer)


def test_product_label_is_painted_after_its_fill():
    commands = RenderPipeline().build(_full_scene())
    product_cmds = [c for c in commands if c.layer == Layer.PRODUCTS]
    assert isinstance(product_cmds[0], Rect)
    assert isinstance(product_cmds[1], Text) and product_cmds[1].text == 'Bench'


def test_selected_product_is_highlighted():
    config = EngineConfig()
    commands = RenderPipeline(config).build(_full_scene())
    rect = next(c for c in commands if isinstance(c, Rect) and c.layer == Layer.PRODUCTS)
    outline = next(c for c in commands if c.layer == Layer.SELECTION)

    assert rect.fill == config.selected_product_fill
    assert rect.stroke == config.selected_product_stroke
    assert outline.fill is None
    assert outline.width == rect.width + 8


def test_wall_width_follows_thickness_and_scale():
    scene = _scene(walls=[WallSegment(Point(0, 0), Point(200, 0), thickness_mm=100)], scale=0.15)
    line = next(c for c in RenderPipeline().build(scene) if isinstance(c, Line) and c.layer == Layer.WALLS)
    assert line.width == pytest.approx(15)


def test_wall_measurement_label():
    scene = _scene(walls=[WallSegment(Point(0, 0), Point(150, 0))], scale=0.15, show_grid=False)
    labels = [c for c in RenderPipeline().build(scene) if isinstance(c, Text) and c.layer == Layer.WALLS]
    assert [l.text for l in labels] == ['1000mm']
    assert labels[0].position == (75, -5)

    scene.show_measurements = False
    assert not [c for c in RenderPipeline().build(scene) if isinstance(c, Text)]


def test_room_label_at_vertex_mean():
    room = Room('Lab', [Point(0, 0), Point(90, 0), Point(90, 90), Point(0, 90), Point(0, 45)])
    label = next(c for c in RenderPipeline().build(_scene(rooms=[room])) if isinstance(c, Text) and c.text == 'Lab')
    assert label.position == (36, 45)


def test_wall_preview_has_dashed_live_segment_and_labels():
    commands = RenderPipeline().build(_full_scene())
    preview = [c for c in commands if c.layer == Layer.PREVIEW]

    assert any(isinstance(c, Polyline) for c in preview)
    live = [c for c in preview if isinstance(c, Line) and c.dash]
    assert len(live) == 1
    assert live[0].start == (100, 200) and live[0].end == (150, 250)
    # Two segments (committed + live), each with distance and angle labels
    assert len([c for c in preview if isinstance(c, Text)]) == 4


def test_room_preview_marks_vertices():
    scene = _scene(mode=DrawingMode.ROOM,
                   state=Drawing(DrawingMode.ROOM, (Point(0, 0), Point(50, 0), Point(50, 50))))
    dots = [c for c in RenderPipeline().build(scene) if isinstance(c, Circle)]
    assert len(dots) == 3


def test_snap_indicator_only_for_magnetic_snaps():
    magnetic = _scene(mode=DrawingMode.WALL, preview=SnapResult(Point(10, 10), True, 'endpoint'))
    grid = _scene(mode=DrawingMode.WALL, preview=SnapResult(Point(10, 10), True, 'grid'))

    assert [c for c in RenderPipeline().build(magnetic) if isinstance(c, Circle)]
    assert not [c for c in RenderPipeline().build(grid) if isinstance(c, Circle)]


def test_door_arc_radius_is_half_width():
    scene = _scene(doors=[Door(Point(50, 50), width_mm=800, rotation=-math.pi / 2)], scale=0.15)
    arc = next(c for c in RenderPipeline().build(scene) if isinstance(c, Arc))
    assert arc.radius == pytest.approx(60)
    assert arc.end_angle - arc.start_angle == pytest.approx(math.pi)
    assert 0 <= arc.rotation < 2 * math.pi


def test_rotation_reduced_for_rendering_only():
    product = PlacedProduct('bench', 'Bench', Point(100, 100), Dimensions(100, 50), rotation=5 * math.pi)
    rect = next(c for c in RenderPipeline().build(_scene(products=[product])) if isinstance(c, Rect))
    assert rect.rotation == pytest.approx(math.pi)
    assert product.rotation == 5 * math.pi


def test_product_label_sits_above_rotated_shape():
    product = PlacedProduct('bench', 'Bench', Point(100, 100), Dimensions(100, 50), rotation=math.pi / 2)
    label = next(c for c in RenderPipeline().build(_scene(products=[product])) if isinstance(c, Text))
    assert label.position[1] == pytest.approx(100 - 50 - 15)


def test_grid_spacing_and_toggle():
    config = EngineConfig(canvas_width=100, canvas_height=60)
    lines = [c for c in RenderPipeline(config).build(_scene()) if c.layer == Layer.GRID]
    # 50 px spacing: x = 0, 50, 100 and y = 0, 50
    assert len(lines) == 5
    assert not [c for c in RenderPipeline(config).build(_scene(show_grid=False)) if c.layer == Layer.GRID]


def test_degenerate_scale_is_skipped():
    scene = _full_scene()
    scene.scale = 0.0
    commands = RenderPipeline().build(scene)
    assert not [c for c in commands if c.layer in (Layer.GRID, Layer.WALLS, Layer.DOORS, Layer.PRODUCTS)]

    scene.scale = math.inf
    RenderPipeline().build(scene)


def test_image_surface_paints_wall(qapp):
    from drawing.painter_backend import ImageSurface

    surface = ImageSurface(200, 100)
    scene = _scene(walls=[WallSegment(Point(20, 50), Point(180, 50), thickness_mm=10, color="#000000")],
                   show_grid=False, show_measurements=False)
    surface.present(RenderPipeline(EngineConfig(canvas_width=200, canvas_height=100)).build(scene))

    assert surface.pixel_color(100, 50).name() == "#000000"
    assert surface.pixel_color(100, 10).name() == "#ffffff"


def test_image_surface_executes_every_command_type(qapp):
    from drawing.painter_backend import ImageSurface

    surface = ImageSurface()
    commands = RenderPipeline().build(_full_scene())
    surface.present(commands)
    assert surface.last_commands == commands
    assert {type(c) for c in commands} >= {Clear, Line, Polyline, Polygon, Rect, Arc, Text}
