"""
Engine Config - Named tunables for the floor plan engine
"""

from dataclasses import dataclass, asdict, fields

from drawing.scale_manager import GRID_SIZES, COMMON_DIMENSIONS


@dataclass
class EngineConfig:
    """Tunables passed into the engine at construction"""

    # Logical canvas frame in pixels
    canvas_width: int = 1000
    canvas_height: int = 600

    # Snapping
    snap_threshold_px: float = 20.0   # screen space, independent of zoom
    snap_tie_break: str = "nearest"   # "nearest" or "first"
    snap_to_objects: bool = False
    grid_snap_epsilon: float = 1e-6

    # Scale and grid
    default_scale: float = 0.15       # pixels per mm
    default_grid_size_mm: float = float(GRID_SIZES['planning'])
    min_grid_spacing_px: float = 2.0
    show_grid: bool = True
    show_measurements: bool = True

    # Walls
    default_wall_thickness_mm: float = float(COMMON_DIMENSIONS['wall_thickness'])
    default_wall_color: str = "#666666"

    # Rooms
    default_room_color: str = "#e3f2fd"
    room_stroke_color: str = "#333333"

    # Doors
    default_door_width_mm: float = float(COMMON_DIMENSIONS['door_width'])
    door_snap_threshold_px: float = 30.0
    embed_doors: bool = True
    door_color: str = "#8b4513"

    # Text
    default_text: str = "New Text"
    default_font_size: int = 14
    default_text_color: str = "#000000"

    # Products
    default_product_color: str = "#4caf50"
    selected_product_fill: str = "#ff6b6b"
    selected_product_stroke: str = "#ff0000"

    # Undo/redo collaborator
    history_limit: int = 50

    def to_dict(self):
        return asdict(self)

    @classmethod
    def from_dict(cls, data):
        """Build a config from a mapping, ignoring unknown keys"""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in (data or {}).items() if k in known})
