"""
Floor Plan Engine - Composition root of the 2D drawing engine

Owns the entity collections (walls, rooms, doors, text, products), routes
input events through snapping and the drawing state machine, and renders the
result onto whatever surface is attached. All mutation happens synchronously
on the calling (UI) thread.
"""

import json
import math
from typing import Any, Callable, Dict, List, Optional, Sequence

from PySide6.QtCore import QObject, Signal

from drawing.config import EngineConfig
from drawing.door_placement import DoorPlacementSystem
from drawing.drawing_tools import Drawing, DrawingStateMachine, POLYLINE_MODES, RoomCommit, WallCommit
from drawing.entities import (
    Door, DrawingMode, PlacedProduct, Point, Room, TextAnnotation, WallSegment, WallType, Dimensions,
)
from drawing.input_events import (
    DoubleClick, KeyPress, PointerDown, PointerMove, PointerUp, ProductDrop,
    KEY_BACKSPACE, KEY_DELETE, KEY_ENTER, KEY_ESCAPE, KEY_ROTATE,
)
from drawing.render_pipeline import RenderPipeline, Scene
from drawing.scale_manager import ScaleManager
from drawing.snap_system import SnapSystem
from calculations.geometry import is_product_within_room, point_in_rotated_rect
from calculations.debug_logger import debug_logger


# Fields of a PlacedProduct that update_product may change
_PRODUCT_PATCH_FIELDS = (
    'name', 'category', 'position', 'rotation', 'dimensions', 'scale', 'color', 'model_path', 'thumbnail',
)


class FloorPlanEngine(QObject):
    """Interactive floor plan model with snapping, drawing tools and rendering"""

    wall_completed = Signal(list)       # list[WallSegment] from one polyline run
    room_completed = Signal(object)     # Room
    product_dropped = Signal(object)    # PlacedProduct created from a catalog drop
    entities_changed = Signal()
    selection_changed = Signal(list)    # selected product ids
    mode_changed = Signal(str)

    def __init__(self, config: Optional[EngineConfig] = None, surface=None):
        super().__init__()
        self.config = config or EngineConfig()

        self.scale_manager = ScaleManager(self.config.default_scale)
        self.snap_system = SnapSystem.from_config(self.config)
        self.state_machine = DrawingStateMachine()
        self.door_system = DoorPlacementSystem(self.config.door_snap_threshold_px)
        self.pipeline = RenderPipeline(self.config)

        self.walls: List[WallSegment] = []
        self.rooms: List[Room] = []
        self.doors: List[Door] = []
        self.texts: List[TextAnnotation] = []
        self.products: List[PlacedProduct] = []
        self.selected_ids: List[str] = []

        self.grid_size_mm = self.config.default_grid_size_mm
        self.show_grid = self.config.show_grid
        self.show_measurements = self.config.show_measurements
        self.wall_thickness_mm = self.config.default_wall_thickness_mm
        self.wall_type = WallType.INTERIOR

        self.surface = surface
        self._text_provider: Callable[[Point], Optional[str]] = lambda point: self.config.default_text
        self._drag_last: Optional[Point] = None
        self._drag_moved = False

        self.state_machine.mode_changed.connect(self.mode_changed.emit)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def mode(self) -> DrawingMode:
        return self.state_machine.mode

    @property
    def state(self):
        return self.state_machine.state

    @property
    def scale(self) -> float:
        return self.scale_manager.scale

    @property
    def zoom(self) -> float:
        return self.scale_manager.zoom_factor

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def set_mode(self, mode):
        """Activate a drawing mode. Any polyline in progress is discarded."""
        mode = DrawingMode(mode)
        self.state_machine.set_mode(mode)
        self._drag_last = None
        self.render()

    def add_product(self, placement) -> PlacedProduct:
        """Add a placed product (a PlacedProduct or its dict form)"""
        product = placement if isinstance(placement, PlacedProduct) else PlacedProduct.from_dict(placement)
        if self.find_product(product.id) is not None:
            old_id = product.id
            product = PlacedProduct.from_dict({**product.to_dict(), 'id': None})
            debug_logger.warning('FloorPlanEngine', "Duplicate product id, assigned a new one",
                                 {'old_id': old_id, 'new_id': product.id})
        self.products.append(product)
        debug_logger.info('FloorPlanEngine', "Product added", {'id': product.id, 'position': product.position})
        self._entities_changed()
        return product

    def update_product(self, product_id: str, patch: Dict[str, Any]) -> Optional[PlacedProduct]:
        """Apply ``patch`` to a product in place. Returns None for an unknown id."""
        product = self.find_product(product_id)
        if product is None:
            debug_logger.debug('FloorPlanEngine', "update_product: unknown id", {'id': product_id})
            return None

        # Convert everything first so a bad value leaves the product untouched
        changes = {}
        for key, value in patch.items():
            if key not in _PRODUCT_PATCH_FIELDS:
                debug_logger.warning('FloorPlanEngine', f"update_product: ignoring field '{key}'")
                continue
            if key == 'position':
                value = Point.of(value)
            elif key == 'dimensions':
                value = Dimensions.of(value)
            elif key in ('rotation', 'scale'):
                value = float(value)
            changes[key] = value

        for key, value in changes.items():
            setattr(product, key, value)
        self._entities_changed()
        return product

    def delete_product(self, product_id: str) -> bool:
        product = self.find_product(product_id)
        if product is None:
            return False
        self.products.remove(product)
        self._prune_selection()
        self._entities_changed()
        return True

    def delete_entity(self, entity_id: str) -> bool:
        """Delete a wall, room, door, text annotation or product by id"""
        if self.find_product(entity_id) is not None:
            return self.delete_product(entity_id)
        for collection in (self.walls, self.rooms, self.doors, self.texts):
            for entity in collection:
                if entity.id == entity_id:
                    collection.remove(entity)
                    debug_logger.debug('FloorPlanEngine', "Entity deleted", {'id': entity_id})
                    self._entities_changed()
                    return True
        return False

    def complete_wall_polyline(self) -> List[WallSegment]:
        """Commit the wall run in progress. Returns the new segments."""
        state = self.state_machine.state
        if not (isinstance(state, Drawing) and state.mode == DrawingMode.WALL):
            return []
        result = self.state_machine.commit()
        if not isinstance(result, WallCommit):
            self.render()
            return []

        segments = [
            WallSegment(
                start=start,
                end=end,
                thickness_mm=self.wall_thickness_mm,
                type=self.wall_type,
                color=self.config.default_wall_color,
            )
            for start, end in result.segments
        ]
        self.walls.extend(segments)
        self.wall_completed.emit(segments)
        self._entities_changed()
        return segments

    def complete_room_polyline(self) -> Optional[Room]:
        """Commit the room outline in progress. Returns the new room or None."""
        state = self.state_machine.state
        if not (isinstance(state, Drawing) and state.mode == DrawingMode.ROOM):
            return None
        result = self.state_machine.commit()
        if not isinstance(result, RoomCommit):
            self.render()
            return None

        room = Room(
            name=f"Room {len(self.rooms) + 1}",
            points=list(result.points),
            color=self.config.default_room_color,
        )
        room.recompute(self.scale)
        self.rooms.append(room)
        self.room_completed.emit(room)
        self._entities_changed()
        return room

    def get_entities(self) -> Dict[str, List[Dict[str, Any]]]:
        """Serializable copy of every entity collection"""
        return {
            'walls': [w.to_dict() for w in self.walls],
            'rooms': [r.to_dict() for r in self.rooms],
            'doors': [d.to_dict() for d in self.doors],
            'texts': [t.to_dict() for t in self.texts],
            'products': [p.to_dict() for p in self.products],
        }

    def load_entities(self, snapshot: Dict[str, Any]):
        """Replace every collection from a ``get_entities()`` snapshot"""
        walls = []
        for data in snapshot.get('walls', []):
            wall = WallSegment.from_dict(data)
            if wall.start == wall.end:
                debug_logger.warning('FloorPlanEngine', "Skipping zero-length wall", {'id': wall.id})
                continue
            walls.append(wall)
        rooms = []
        for data in snapshot.get('rooms', []):
            room = Room.from_dict(data)
            if len(set(room.points)) < 3:
                debug_logger.warning('FloorPlanEngine', "Skipping room with fewer than 3 distinct points",
                                     {'id': room.id, 'points': len(room.points)})
                continue
            rooms.append(room)
        doors = [Door.from_dict(d) for d in snapshot.get('doors', [])]
        texts = [TextAnnotation.from_dict(d) for d in snapshot.get('texts', [])]
        products = [PlacedProduct.from_dict(d) for d in snapshot.get('products', [])]

        self.state_machine.cancel()
        self.walls, self.rooms, self.doors, self.texts, self.products = walls, rooms, doors, texts, products
        self._prune_selection()
        self._entities_changed()

    def clear_all(self):
        self.load_entities({})

    def on_wall_complete(self, callback: Callable[[List[WallSegment]], None]):
        self.wall_completed.connect(callback)

    def on_product_drop(self, callback: Callable[[PlacedProduct], None]):
        self.product_dropped.connect(callback)

    def set_text_provider(self, provider: Callable[[Point], Optional[str]]):
        """Callable asked for the content of a new text annotation; None cancels"""
        self._text_provider = provider

    # ------------------------------------------------------------------
    # View settings
    # ------------------------------------------------------------------

    def set_zoom(self, zoom_factor: float) -> bool:
        """Zoom about the canvas origin.

        Coordinates are stored in canvas pixels, so every stored point is
        re-projected by new_zoom / old_zoom. Millimetre values are unchanged.
        """
        if not math.isfinite(zoom_factor) or zoom_factor <= 0:
            return False
        ratio = zoom_factor / self.scale_manager.zoom_factor
        if ratio != 1.0:
            for wall in self.walls:
                wall.start = wall.start.scaled(ratio)
                wall.end = wall.end.scaled(ratio)
            for room in self.rooms:
                room.points = [p.scaled(ratio) for p in room.points]
            for door in self.doors:
                door.position = door.position.scaled(ratio)
            for text in self.texts:
                text.position = text.position.scaled(ratio)
            for product in self.products:
                product.position = product.position.scaled(ratio)
            self.state_machine.rescale(ratio)
            if self._drag_last is not None:
                self._drag_last = self._drag_last.scaled(ratio)

        self.scale_manager.set_zoom(zoom_factor)
        self.snap_system.configure(scale=self.scale)
        debug_logger.debug('FloorPlanEngine', "Zoom changed", {'zoom': zoom_factor, 'scale': self.scale})
        self.render()
        return True

    def set_scale(self, base_scale: float):
        """Change the calibrated pixels-per-mm scale. Stored points are not moved."""
        if not (math.isfinite(base_scale) and base_scale > 0):
            debug_logger.warning('FloorPlanEngine', "Degenerate scale, measurements will be skipped",
                                 {'scale': base_scale})
        self.scale_manager.set_base_scale(base_scale)
        self.snap_system.configure(scale=self.scale)
        self.render()

    def set_grid_size(self, grid_size_mm: float):
        self.grid_size_mm = grid_size_mm
        self.snap_system.configure(grid_size_mm=grid_size_mm)
        self.render()

    def toggle_grid(self, enabled: Optional[bool] = None) -> bool:
        self.show_grid = (not self.show_grid) if enabled is None else bool(enabled)
        self.snap_system.configure(grid_enabled=self.show_grid)
        self.render()
        return self.show_grid

    def toggle_measurements(self, enabled: Optional[bool] = None) -> bool:
        self.show_measurements = (not self.show_measurements) if enabled is None else bool(enabled)
        self.render()
        return self.show_measurements

    def set_wall_thickness(self, thickness_mm: float, wall_type: Optional[WallType] = None):
        """Thickness and type used for the next wall run"""
        self.wall_thickness_mm = thickness_mm
        if wall_type is not None:
            self.wall_type = WallType(wall_type)
        self.render()

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def find_product(self, product_id: str) -> Optional[PlacedProduct]:
        for product in self.products:
            if product.id == product_id:
                return product
        return None

    def hit_test_product(self, point: Point) -> Optional[PlacedProduct]:
        """First product in paint order whose rotated footprint contains ``point``"""
        for product in self.products:
            width, height = product.footprint_px(self.scale)
            if point_in_rotated_rect(point, product.position, product.rotation, width, height):
                return product
        return None

    def room_containing(self, product: PlacedProduct) -> Optional[Room]:
        """First room whose outline holds the product's whole footprint"""
        for room in self.rooms:
            if is_product_within_room(product, room.points, self.scale):
                return room
        return None

    def select(self, product_ids: Sequence[str]):
        known = {p.id for p in self.products}
        selection = []
        for product_id in product_ids:
            if product_id in known and product_id not in selection:
                selection.append(product_id)
        if selection != self.selected_ids:
            self.selected_ids = selection
            self.selection_changed.emit(list(selection))
        self.render()

    def clear_selection(self):
        self.select([])

    def move_selected(self, dx: float, dy: float):
        for product in self.selected_products():
            product.position = product.position.translated(dx, dy)
        self.render()

    def rotate_selected(self, angle: float = math.pi / 2):
        if not self.selected_ids:
            return
        for product in self.selected_products():
            product.rotation += angle
        self._entities_changed()

    def delete_selected(self) -> int:
        ids = list(self.selected_ids)
        for product_id in ids:
            self.products = [p for p in self.products if p.id != product_id]
        if ids:
            self._prune_selection()
            self._entities_changed()
        return len(ids)

    def selected_products(self) -> List[PlacedProduct]:
        selected = set(self.selected_ids)
        return [p for p in self.products if p.id in selected]

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def dispatch(self, event):
        """Route a normalized input event to the active mode"""
        if isinstance(event, PointerDown):
            self._pointer_down(Point.of(event.point), event.shift)
        elif isinstance(event, PointerMove):
            self._pointer_move(Point.of(event.point), event.buttons_down)
        elif isinstance(event, PointerUp):
            self._pointer_up()
        elif isinstance(event, DoubleClick):
            self._double_click(Point.of(event.point))
        elif isinstance(event, KeyPress):
            self._key_press(event.key)
        elif isinstance(event, ProductDrop):
            self.drop_product(event.payload, event.point)
        else:
            debug_logger.warning('FloorPlanEngine', f"Unhandled input event {type(event).__name__}")

    def snap(self, raw: Point):
        return self.snap_system.snap_point(raw, self.rooms, self.walls, self.products)

    def drop_product(self, payload, point) -> Optional[PlacedProduct]:
        """Place a catalog product dropped at ``point``. Bad payloads are logged and ignored."""
        try:
            data = json.loads(payload) if isinstance(payload, (str, bytes, bytearray)) else payload
            product = PlacedProduct.from_payload(data, Point.of(point), self.config.default_product_color)
        except (ValueError, TypeError, KeyError) as e:
            debug_logger.warning('FloorPlanEngine', f"Ignoring malformed product drop: {e}")
            return None

        if self.rooms and self.room_containing(product) is None:
            debug_logger.warning('FloorPlanEngine', "Product dropped outside every room",
                                 {'id': product.id, 'position': product.position})
        self.products.append(product)
        self.product_dropped.emit(product)
        self._entities_changed()
        return product

    def _pointer_down(self, point: Point, shift: bool):
        mode = self.mode
        if mode == DrawingMode.SELECT:
            self._select_click(point, shift)
        elif mode in POLYLINE_MODES:
            self.state_machine.add_point(self.snap(point).point)
            self.render()
        elif mode == DrawingMode.DOOR:
            self._place_door(point)
        elif mode == DrawingMode.TEXT:
            self._place_text(point)

    def _select_click(self, point: Point, shift: bool):
        # Hit-testing uses the raw pointer position
        hit = self.hit_test_product(point)
        if shift:
            if hit is None:
                return
            if hit.id in self.selected_ids:
                self.select([i for i in self.selected_ids if i != hit.id])
            else:
                self.select(self.selected_ids + [hit.id])
        else:
            self.select([hit.id] if hit is not None else [])

        if hit is not None and hit.id in self.selected_ids:
            self._drag_last = point
            self._drag_moved = False

    def _pointer_move(self, point: Point, buttons_down: bool):
        if self._drag_last is not None and buttons_down and self.mode == DrawingMode.SELECT:
            dx = point.x - self._drag_last.x
            dy = point.y - self._drag_last.y
            if dx or dy:
                self._drag_last = point
                self._drag_moved = True
                self.move_selected(dx, dy)
            return
        if self.mode in POLYLINE_MODES:
            self.state_machine.move(self.snap(point))
            self.render()

    def _pointer_up(self):
        if self._drag_last is not None:
            self._drag_last = None
            if self._drag_moved:
                self._drag_moved = False
                self._entities_changed()

    def _double_click(self, point: Point):
        if self.mode not in POLYLINE_MODES:
            return
        self.state_machine.add_point(self.snap(point).point)
        self._complete_active_polyline()

    def _key_press(self, key: str):
        key_upper = key.upper() if len(key) == 1 else key
        if key in (KEY_ENTER, "Return"):
            self._complete_active_polyline()
        elif key == KEY_ESCAPE:
            self.state_machine.cancel()
            if self.mode == DrawingMode.SELECT:
                self.clear_selection()
            else:
                self.render()
        elif key in (KEY_DELETE, KEY_BACKSPACE):
            self.delete_selected()
        elif key_upper == KEY_ROTATE:
            self.rotate_selected(math.pi / 2)

    def _complete_active_polyline(self):
        if self.mode == DrawingMode.WALL:
            self.complete_wall_polyline()
        elif self.mode == DrawingMode.ROOM:
            self.complete_room_polyline()

    def _place_door(self, point: Point):
        placement = None
        if self.config.embed_doors:
            placement = self.door_system.find_door_placement(point, self.walls)
        if placement is not None and placement.is_embedded:
            door = Door(
                position=placement.position,
                width_mm=self.config.default_door_width_mm,
                rotation=placement.rotation,
                wall_id=placement.wall_id,
                wall_segment_id=placement.wall_id,
                wall_position=placement.wall_position,
                is_embedded=True,
            )
            if not self.door_system.validate_door_placement(door, self.doors, self.scale):
                debug_logger.debug('FloorPlanEngine', "Door too close to another door on the same wall",
                                   {'wall_id': door.wall_id})
                return
        else:
            door = Door(position=self.snap(point).point, width_mm=self.config.default_door_width_mm)

        self.doors.append(door)
        self._entities_changed()

    def _place_text(self, point: Point):
        content = self._text_provider(point)
        if not content:
            return
        self.texts.append(TextAnnotation(
            position=self.snap(point).point,
            text=content,
            font_size=self.config.default_font_size,
            color=self.config.default_text_color,
        ))
        self._entities_changed()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def attach_surface(self, surface):
        """Attach an object with ``present(commands)``; None detaches"""
        self.surface = surface
        self.render()

    def scene(self) -> Scene:
        return Scene(
            walls=tuple(self.walls),
            rooms=tuple(self.rooms),
            doors=tuple(self.doors),
            texts=tuple(self.texts),
            products=tuple(self.products),
            selected_ids=tuple(self.selected_ids),
            mode=self.mode,
            state=self.state_machine.state,
            preview=self.state_machine.preview,
            scale=self.scale,
            grid_size_mm=self.grid_size_mm,
            show_grid=self.show_grid,
            show_measurements=self.show_measurements,
            wall_thickness_mm=self.wall_thickness_mm,
        )

    def render(self):
        """Build and present the frame. Without a surface this does nothing."""
        if self.surface is None:
            return []
        commands = self.pipeline.build(self.scene())
        self.surface.present(commands)
        return commands

    # ------------------------------------------------------------------

    def _prune_selection(self):
        known = {p.id for p in self.products}
        pruned = [i for i in self.selected_ids if i in known]
        if pruned != self.selected_ids:
            self.selected_ids = pruned
            self.selection_changed.emit(list(pruned))

    def _entities_changed(self):
        self.entities_changed.emit()
        self.render()
