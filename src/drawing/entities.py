"""
Floor plan entities - walls, rooms, doors, text and placed products

All coordinates are canvas pixels. Millimetre quantities are derived through
the scale manager.
"""

import math
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class DrawingMode(Enum):
    """Available drawing modes"""
    SELECT = "select"
    WALL = "wall"
    ROOM = "room"
    DOOR = "door"
    TEXT = "text"


class WallType(Enum):
    EXTERIOR = "exterior"
    INTERIOR = "interior"


@dataclass(frozen=True)
class Point:
    """Canvas pixel coordinate"""
    x: float
    y: float

    @classmethod
    def of(cls, value) -> "Point":
        """Coerce a Point, (x, y) pair or {'x':, 'y':} mapping into a Point"""
        if isinstance(value, Point):
            return value
        if isinstance(value, dict):
            return cls(float(value.get('x', 0.0)), float(value.get('y', 0.0)))
        x, y = value
        return cls(float(x), float(y))

    def to_dict(self) -> Dict[str, float]:
        return {'x': self.x, 'y': self.y}

    def translated(self, dx: float, dy: float) -> "Point":
        return Point(self.x + dx, self.y + dy)

    def scaled(self, factor: float) -> "Point":
        return Point(self.x * factor, self.y * factor)


@dataclass(frozen=True)
class SnapResult:
    point: Point
    snapped: bool
    source: Optional[str] = None  # 'grid' | 'endpoint' | 'midpoint' | 'object' | 'vertex'


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


@dataclass
class WallSegment:
    """One straight wall section"""
    start: Point
    end: Point
    thickness_mm: float = 100.0
    type: WallType = WallType.INTERIOR
    color: str = "#666666"
    id: str = field(default_factory=lambda: new_id('wall'))

    @property
    def midpoint(self) -> Point:
        return Point((self.start.x + self.end.x) / 2, (self.start.y + self.end.y) / 2)

    @property
    def length_px(self) -> float:
        return math.hypot(self.end.x - self.start.x, self.end.y - self.start.y)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'start': self.start.to_dict(),
            'end': self.end.to_dict(),
            'thickness_mm': self.thickness_mm,
            'type': self.type.value,
            'color': self.color,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WallSegment":
        return cls(
            id=data.get('id') or new_id('wall'),
            start=Point.of(data['start']),
            end=Point.of(data['end']),
            thickness_mm=float(data.get('thickness_mm', data.get('thickness', 100.0))),
            type=WallType(data.get('type', WallType.INTERIOR.value)),
            color=data.get('color', "#666666"),
        )


@dataclass
class Room:
    """Closed polygon. Area and perimeter are computed at creation only."""
    name: str
    points: List[Point]
    area_mm2: float = 0.0
    perimeter_mm: float = 0.0
    color: str = "#e3f2fd"
    id: str = field(default_factory=lambda: new_id('room'))

    def recompute(self, scale: float) -> None:
        """Recalculate area and perimeter after the points were edited"""
        from calculations.geometry import polygon_area, polygon_perimeter
        from drawing.scale_manager import canvas_to_mm

        self.area_mm2 = canvas_to_mm(canvas_to_mm(polygon_area(self.points), scale), scale)
        self.perimeter_mm = canvas_to_mm(polygon_perimeter(self.points), scale)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'points': [p.to_dict() for p in self.points],
            'area_mm2': self.area_mm2,
            'perimeter_mm': self.perimeter_mm,
            'color': self.color,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Room":
        return cls(
            id=data.get('id') or new_id('room'),
            name=data.get('name', 'Room'),
            points=[Point.of(p) for p in data.get('points', [])],
            area_mm2=float(data.get('area_mm2', 0.0)),
            perimeter_mm=float(data.get('perimeter_mm', 0.0)),
            color=data.get('color', "#e3f2fd"),
        )


@dataclass
class Door:
    """Freestanding door, or a door embedded in a wall at a normalized offset"""
    position: Point
    width_mm: float = 800.0
    rotation: float = 0.0
    swing_direction: str = "inward"
    wall_id: Optional[str] = None
    wall_segment_id: Optional[str] = None
    wall_position: Optional[float] = None
    is_embedded: bool = False
    id: str = field(default_factory=lambda: new_id('door'))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'position': self.position.to_dict(),
            'width_mm': self.width_mm,
            'rotation': self.rotation,
            'swing_direction': self.swing_direction,
            'wall_id': self.wall_id,
            'wall_segment_id': self.wall_segment_id,
            'wall_position': self.wall_position,
            'is_embedded': self.is_embedded,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Door":
        return cls(
            id=data.get('id') or new_id('door'),
            position=Point.of(data['position']),
            width_mm=float(data.get('width_mm', 800.0)),
            rotation=float(data.get('rotation', 0.0)),
            swing_direction=data.get('swing_direction', 'inward'),
            wall_id=data.get('wall_id'),
            wall_segment_id=data.get('wall_segment_id'),
            wall_position=data.get('wall_position'),
            is_embedded=bool(data.get('is_embedded', False)),
        )


@dataclass
class TextAnnotation:
    position: Point
    text: str
    font_size: int = 14
    color: str = "#000000"
    id: str = field(default_factory=lambda: new_id('text'))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'position': self.position.to_dict(),
            'text': self.text,
            'font_size': self.font_size,
            'color': self.color,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TextAnnotation":
        return cls(
            id=data.get('id') or new_id('text'),
            position=Point.of(data['position']),
            text=str(data.get('text', '')),
            font_size=int(data.get('font_size', data.get('fontSize', 14))),
            color=data.get('color', "#000000"),
        )


@dataclass
class Dimensions:
    """Real-world product size in millimetres"""
    length: float
    width: float
    height: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {'length': self.length, 'width': self.width, 'height': self.height}

    @classmethod
    def of(cls, value) -> "Dimensions":
        """Accept a Dimensions, a mapping or a '750×550×880 mm' string"""
        if isinstance(value, Dimensions):
            return value
        if isinstance(value, str):
            from drawing.scale_manager import parse_dimension_string
            parsed = parse_dimension_string(value)
            if parsed is None:
                raise ValueError(f"Unrecognised dimension string: {value!r}")
            return cls(parsed['length'], parsed['width'], parsed['height'])
        if isinstance(value, dict):
            return cls(
                float(value['length']),
                float(value['width']),
                float(value.get('height', 0.0)),
            )
        raise ValueError(f"Unsupported dimensions value: {value!r}")


@dataclass
class PlacedProduct:
    """A catalog product placed on the plan as a rotated rectangle.

    The footprint is ``length x width``; ``height`` is carried for 3D preview
    and not used by the 2D engine. ``rotation`` is stored unmodified in
    radians.
    """
    product_id: str
    name: str
    position: Point
    dimensions: Dimensions
    category: str = ""
    rotation: float = 0.0
    scale: float = 1.0
    color: str = "#4caf50"
    model_path: Optional[str] = None
    thumbnail: Optional[str] = None
    id: str = field(default_factory=lambda: new_id('product'))

    def footprint_px(self, canvas_scale: float) -> Tuple[float, float]:
        """On-screen footprint (width along length axis, height along width axis)"""
        from drawing.scale_manager import mm_to_canvas
        return (
            mm_to_canvas(self.dimensions.length, canvas_scale) * self.scale,
            mm_to_canvas(self.dimensions.width, canvas_scale) * self.scale,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'product_id': self.product_id,
            'name': self.name,
            'category': self.category,
            'position': self.position.to_dict(),
            'rotation': self.rotation,
            'dimensions': self.dimensions.to_dict(),
            'scale': self.scale,
            'color': self.color,
            'model_path': self.model_path,
            'thumbnail': self.thumbnail,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlacedProduct":
        return cls(
            id=data.get('id') or new_id('product'),
            product_id=str(data.get('product_id', data.get('productId', ''))),
            name=str(data.get('name', '')),
            category=str(data.get('category', '')),
            position=Point.of(data['position']),
            rotation=float(data.get('rotation', 0.0)),
            dimensions=Dimensions.of(data['dimensions']),
            scale=float(data.get('scale', 1.0) or 1.0),
            color=data.get('color') or "#4caf50",
            model_path=data.get('model_path', data.get('modelPath')),
            thumbnail=data.get('thumbnail'),
        )

    @classmethod
    def from_payload(cls, payload: Dict[str, Any], position, default_color: str = "#4caf50") -> "PlacedProduct":
        """Create a placement from a catalog drag payload dropped at ``position``"""
        return cls(
            product_id=str(payload['id']),
            name=str(payload['name']),
            category=str(payload.get('category', '')),
            position=Point.of(position),
            dimensions=Dimensions.of(payload['dimensions']),
            color=payload.get('color') or default_color,
            model_path=payload.get('model_path', payload.get('modelPath')),
            thumbnail=payload.get('thumbnail'),
        )
