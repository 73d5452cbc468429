"""
Render Pipeline - Builds the ordered list of draw commands for one frame

The pipeline never touches a paint device. ``RenderPipeline.build`` turns a
``Scene`` snapshot into plain command values; a backend such as
``painter_backend.QPainterBackend`` executes them in list order. The list is
sorted by layer, so later layers always paint over earlier ones:

    background -> grid -> rooms -> walls -> preview -> doors -> text
    -> products -> selection
"""

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Sequence, Tuple, Union

from drawing.config import EngineConfig
from drawing.drawing_tools import Drawing, DrawingState, IDLE, POLYLINE_MODES
from drawing.entities import (
    Door, DrawingMode, PlacedProduct, Point, Room, SnapResult, TextAnnotation, WallSegment,
)
from drawing.scale_manager import mm_to_canvas, canvas_to_mm, format_measurement, format_area
from calculations.geometry import (
    polygon_centroid, rotated_rect_half_extent_y, segment_measure,
)


TWO_PI = 2.0 * math.pi

DASH = (5.0, 5.0)

GRID_COLOR = "#1a000000"        # black at 10% alpha
MEASUREMENT_COLOR = "#333333"
LABEL_COLOR = "#000000"
WALL_PREVIEW_COLOR = "#ff4444"
WALL_PATH_COLOR = "#3b82f6"
ROOM_PREVIEW_COLOR = "#2196f3"
SNAP_INDICATOR_COLOR = "#ff0000"

# Sources that count as a magnetic snap for the indicator
MAGNETIC_SOURCES = ('endpoint', 'midpoint', 'object', 'vertex')

SELECTION_PADDING_PX = 4.0
PRODUCT_LABEL_OFFSET_PX = 15.0


class Layer(IntEnum):
    BACKGROUND = 0
    GRID = 1
    ROOMS = 2
    WALLS = 3
    PREVIEW = 4
    DOORS = 5
    TEXT = 6
    PRODUCTS = 7
    SELECTION = 8


# --- Draw commands ---------------------------------------------------------

@dataclass(frozen=True)
class Clear:
    layer: Layer
    width: float
    height: float
    color: str = "#ffffff"


@dataclass(frozen=True)
class Line:
    layer: Layer
    start: Tuple[float, float]
    end: Tuple[float, float]
    color: str
    width: float = 1.0
    dash: Optional[Tuple[float, ...]] = None


@dataclass(frozen=True)
class Polyline:
    layer: Layer
    points: Tuple[Tuple[float, float], ...]
    color: str
    width: float = 1.0
    dash: Optional[Tuple[float, ...]] = None


@dataclass(frozen=True)
class Polygon:
    layer: Layer
    points: Tuple[Tuple[float, float], ...]
    fill: Optional[str]
    stroke: Optional[str]
    width: float = 1.0


@dataclass(frozen=True)
class Rect:
    """Rectangle of ``width x height`` centred on ``center`` and rotated by
    ``rotation`` radians (already reduced modulo 2*pi)."""
    layer: Layer
    center: Tuple[float, float]
    width: float
    height: float
    rotation: float
    fill: Optional[str]
    stroke: Optional[str]
    line_width: float = 1.0
    dash: Optional[Tuple[float, ...]] = None


@dataclass(frozen=True)
class Arc:
    """Circular arc. Angles are radians measured clockwise on screen
    (y points down), then rotated by ``rotation``."""
    layer: Layer
    center: Tuple[float, float]
    radius: float
    start_angle: float
    end_angle: float
    rotation: float
    color: str
    width: float = 1.0


@dataclass(frozen=True)
class Circle:
    layer: Layer
    center: Tuple[float, float]
    radius: float
    fill: Optional[str]
    stroke: Optional[str] = None
    width: float = 1.0


@dataclass(frozen=True)
class Text:
    layer: Layer
    position: Tuple[float, float]
    text: str
    size: float
    color: str
    align: str = "left"  # 'left' anchors at the baseline start, 'center' centres on position
    background: Optional[str] = None


DrawCommand = Union[Clear, Line, Polyline, Polygon, Rect, Arc, Circle, Text]


@dataclass
class Scene:
    """Everything one frame depends on"""
    walls: Sequence[WallSegment] = ()
    rooms: Sequence[Room] = ()
    doors: Sequence[Door] = ()
    texts: Sequence[TextAnnotation] = ()
    products: Sequence[PlacedProduct] = ()
    selected_ids: Sequence[str] = ()
    mode: DrawingMode = DrawingMode.SELECT
    state: DrawingState = IDLE
    preview: Optional[SnapResult] = None
    scale: float = 0.15
    grid_size_mm: float = 100.0
    show_grid: bool = True
    show_measurements: bool = True
    wall_thickness_mm: float = 100.0


def _xy(point) -> Tuple[float, float]:
    return (point.x, point.y)


def _usable(value) -> bool:
    return math.isfinite(value) and value > 0


class RenderPipeline:
    """Turns a Scene into draw commands"""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()

    def build(self, scene: Scene) -> List[DrawCommand]:
        commands: List[DrawCommand] = [
            Clear(Layer.BACKGROUND, self.config.canvas_width, self.config.canvas_height)
        ]
        if scene.show_grid:
            commands.extend(self.build_grid(scene))
        for room in scene.rooms:
            commands.extend(self.build_room(room, scene))
        for wall in scene.walls:
            commands.extend(self.build_wall(wall, scene))
        commands.extend(self.build_preview(scene))
        for door in scene.doors:
            commands.extend(self.build_door(door, scene))
        for text in scene.texts:
            commands.extend(self.build_text(text))
        selected = set(scene.selected_ids)
        for product in scene.products:
            commands.extend(self.build_product(product, product.id in selected, scene))
        for product in scene.products:
            if product.id in selected:
                commands.extend(self.build_selection(product, scene))

        # Stable sort keeps per-entity order within a layer
        commands.sort(key=lambda c: c.layer)
        return commands

    def build_grid(self, scene: Scene) -> List[DrawCommand]:
        spacing = mm_to_canvas(scene.grid_size_mm, scene.scale)
        if not math.isfinite(spacing) or spacing < self.config.min_grid_spacing_px:
            return []
        width = self.config.canvas_width
        height = self.config.canvas_height
        commands = []
        x = 0.0
        while x <= width:
            commands.append(Line(Layer.GRID, (x, 0.0), (x, float(height)), GRID_COLOR, 1.0))
            x += spacing
        y = 0.0
        while y <= height:
            commands.append(Line(Layer.GRID, (0.0, y), (float(width), y), GRID_COLOR, 1.0))
            y += spacing
        return commands

    def build_room(self, room: Room, scene: Scene) -> List[DrawCommand]:
        if len(room.points) < 3:
            return []
        commands = [
            Polygon(Layer.ROOMS, tuple(_xy(p) for p in room.points), room.color,
                    self.config.room_stroke_color, 2.0),
        ]
        cx, cy = polygon_centroid(room.points)
        commands.append(Text(Layer.ROOMS, (cx, cy), room.name, 14, LABEL_COLOR, 'center'))
        if scene.show_measurements and math.isfinite(room.area_mm2):
            commands.append(Text(Layer.ROOMS, (cx, cy + 16), format_area(room.area_mm2), 12,
                                 MEASUREMENT_COLOR, 'center'))
        return commands

    def build_wall(self, wall: WallSegment, scene: Scene) -> List[DrawCommand]:
        width = mm_to_canvas(wall.thickness_mm, scene.scale)
        if not _usable(width):
            return []
        commands = [Line(Layer.WALLS, _xy(wall.start), _xy(wall.end), wall.color, width)]
        if scene.show_measurements:
            length_mm = canvas_to_mm(wall.length_px, scene.scale)
            if math.isfinite(length_mm):
                mid = wall.midpoint
                commands.append(Text(Layer.WALLS, (mid.x, mid.y - 5), format_measurement(length_mm),
                                     12, MEASUREMENT_COLOR, 'center'))
        return commands

    def build_preview(self, scene: Scene) -> List[DrawCommand]:
        commands: List[DrawCommand] = []
        state = scene.state
        preview = scene.preview
        if isinstance(state, Drawing) and state.points:
            path = list(state.points)
            if state.mode == DrawingMode.WALL:
                width = mm_to_canvas(scene.wall_thickness_mm, scene.scale)
                if not _usable(width):
                    width = 1.0
                if len(path) > 1:
                    commands.append(Polyline(Layer.PREVIEW, tuple(_xy(p) for p in path), WALL_PATH_COLOR, width))
                live_color = WALL_PREVIEW_COLOR
            else:
                if len(path) > 1:
                    commands.append(Polyline(Layer.PREVIEW, tuple(_xy(p) for p in path), ROOM_PREVIEW_COLOR, 2.0))
                for p in path:
                    commands.append(Circle(Layer.PREVIEW, _xy(p), 4.0, ROOM_PREVIEW_COLOR))
                live_color = ROOM_PREVIEW_COLOR

            if preview is not None and preview.point != path[-1]:
                commands.append(Line(Layer.PREVIEW, _xy(path[-1]), _xy(preview.point), live_color, 2.0, DASH))
                path.append(preview.point)

            if scene.show_measurements:
                for a, b in zip(path, path[1:]):
                    commands.extend(self.build_segment_label(a, b, scene.scale))

        if scene.mode in POLYLINE_MODES and preview is not None and preview.snapped \
                and preview.source in MAGNETIC_SOURCES:
            commands.extend(self.build_snap_indicator(preview.point))
        return commands

    def build_segment_label(self, a: Point, b: Point, scale: float) -> List[DrawCommand]:
        measure = segment_measure(a, b, scale)
        if not math.isfinite(measure['distance_mm']):
            return []
        mx = (a.x + b.x) / 2.0
        my = (a.y + b.y) / 2.0
        return [
            Text(Layer.PREVIEW, (mx, my - 20), format_measurement(measure['distance_mm']), 12,
                 MEASUREMENT_COLOR, 'center', "#ffffff"),
            Text(Layer.PREVIEW, (mx, my + 20), f"{measure['angle_degrees']:.1f}°", 10,
                 MEASUREMENT_COLOR, 'center', "#ffffff"),
        ]

    def build_snap_indicator(self, point: Point) -> List[DrawCommand]:
        x, y = point.x, point.y
        return [
            Circle(Layer.PREVIEW, (x, y), 6.0, SNAP_INDICATOR_COLOR),
            Line(Layer.PREVIEW, (x - 3, y), (x + 3, y), "#ffffff", 2.0),
            Line(Layer.PREVIEW, (x, y - 3), (x, y + 3), "#ffffff", 2.0),
        ]

    def build_door(self, door: Door, scene: Scene) -> List[DrawCommand]:
        radius = mm_to_canvas(door.width_mm, scene.scale) / 2.0
        if not _usable(radius):
            return []
        return [
            Arc(Layer.DOORS, _xy(door.position), radius, 0.0, math.pi,
                door.rotation % TWO_PI, self.config.door_color, 3.0),
        ]

    def build_text(self, text: TextAnnotation) -> List[DrawCommand]:
        if not text.text:
            return []
        return [Text(Layer.TEXT, _xy(text.position), text.text, text.font_size, text.color)]

    def build_product(self, product: PlacedProduct, selected: bool, scene: Scene) -> List[DrawCommand]:
        width, height = product.footprint_px(scene.scale)
        if not (_usable(width) and _usable(height)):
            return []
        rotation = product.rotation % TWO_PI
        if selected:
            fill = self.config.selected_product_fill
            stroke = self.config.selected_product_stroke
            line_width = 3.0
        else:
            fill = product.color
            stroke = "#333333"
            line_width = 1.0
        label_y = product.position.y - rotated_rect_half_extent_y(width, height, rotation) - PRODUCT_LABEL_OFFSET_PX
        return [
            Rect(Layer.PRODUCTS, _xy(product.position), width, height, rotation, fill, stroke, line_width),
            Text(Layer.PRODUCTS, (product.position.x, label_y), product.name, 12, LABEL_COLOR, 'center'),
        ]

    def build_selection(self, product: PlacedProduct, scene: Scene) -> List[DrawCommand]:
        width, height = product.footprint_px(scene.scale)
        if not (_usable(width) and _usable(height)):
            return []
        pad = SELECTION_PADDING_PX * 2
        return [
            Rect(Layer.SELECTION, _xy(product.position), width + pad, height + pad,
                 product.rotation % TWO_PI, None, self.config.selected_product_stroke, 1.0, DASH),
        ]
