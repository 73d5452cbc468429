"""
Door Placement - Embeds doors into nearby walls
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from drawing.entities import Door, Point, WallSegment
from drawing.scale_manager import canvas_to_mm
from calculations.geometry import distance_to_segment, project_onto_segment


# Doors keep this margin from each wall end, as a fraction of the wall length
WALL_POSITION_MIN = 0.1
WALL_POSITION_MAX = 0.9

MIN_DOOR_DISTANCE_MM = 200.0


@dataclass(frozen=True)
class DoorPlacement:
    position: Point
    is_embedded: bool = False
    wall_id: Optional[str] = None
    wall_position: Optional[float] = None
    rotation: float = 0.0


class DoorPlacementSystem:
    """Finds where a clicked door should sit"""

    def __init__(self, snap_threshold_px=30.0):
        self.snap_threshold_px = snap_threshold_px

    def find_door_placement(self, point: Point, walls: Sequence[WallSegment]) -> DoorPlacement:
        """Project ``point`` onto the nearest wall within the threshold.

        Falls back to a freestanding door at ``point``.
        """
        wall = self.find_nearest_wall(point, walls)
        if wall is None:
            return DoorPlacement(point)

        _, t = project_onto_segment(point, wall.start, wall.end)
        t = max(WALL_POSITION_MIN, min(WALL_POSITION_MAX, t))
        position = Point(
            wall.start.x + t * (wall.end.x - wall.start.x),
            wall.start.y + t * (wall.end.y - wall.start.y),
        )
        rotation = math.atan2(wall.end.y - wall.start.y, wall.end.x - wall.start.x)
        return DoorPlacement(position, True, wall.id, t, rotation)

    def find_nearest_wall(self, point: Point, walls: Sequence[WallSegment]) -> Optional[WallSegment]:
        nearest = None
        min_distance = self.snap_threshold_px
        for wall in walls:
            if wall.length_px == 0:
                continue
            d = distance_to_segment(point, wall.start, wall.end)
            if d < min_distance:
                min_distance = d
                nearest = wall
        return nearest

    def validate_door_placement(self, new_door: Door, existing_doors: Sequence[Door], scale: float) -> bool:
        """Reject a door closer than MIN_DOOR_DISTANCE_MM to another door on the same wall"""
        if not new_door.wall_id:
            return True
        for door in existing_doors:
            if door.id == new_door.id or door.wall_id != new_door.wall_id:
                continue
            gap_px = math.hypot(new_door.position.x - door.position.x, new_door.position.y - door.position.y)
            if canvas_to_mm(gap_px, scale) < MIN_DOOR_DISTANCE_MM:
                return False
        return True
