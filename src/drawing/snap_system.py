"""
Snap System - Magnetic and grid snapping for pointer positions

Priority, first match wins:
  1. wall endpoints
  2. wall midpoints
  3. product centres and room vertices (only with snap_to_objects)
  4. grid (only when the grid is shown)

The magnetic threshold is in screen pixels and does not change with zoom, so
zooming out makes snapping looser in real-world terms.

Tie-break: with ``tie_break="nearest"`` the closest candidate within the
threshold wins; with ``tie_break="first"`` the first candidate in wall
insertion order wins.
"""

import math
from typing import Optional, Sequence

from drawing.entities import Point, SnapResult
from drawing.scale_manager import mm_to_canvas
from calculations.debug_logger import debug_logger


def _round_half_up(value, step):
    """Nearest multiple of ``step``; exact halves go up"""
    return math.floor(value / step + 0.5) * step

class SnapSystem:
    """Corrects raw pointer positions against existing geometry"""

    def __init__(self, threshold_px=20.0, tie_break="nearest", grid_size_mm=100.0,
                 scale=0.15, grid_enabled=True, snap_to_objects=False, epsilon=1e-6):
        if tie_break not in ("nearest", "first"):
            raise ValueError(f"Unknown snap tie-break rule: {tie_break!r}")
        self.threshold_px = threshold_px
        self.tie_break = tie_break
        self.grid_size_mm = grid_size_mm
        self.scale = scale
        self.grid_enabled = grid_enabled
        self.snap_to_objects = snap_to_objects
        self.epsilon = epsilon

    @classmethod
    def from_config(cls, config):
        return cls(
            threshold_px=config.snap_threshold_px,
            tie_break=config.snap_tie_break,
            grid_size_mm=config.default_grid_size_mm,
            scale=config.default_scale,
            grid_enabled=config.show_grid,
            snap_to_objects=config.snap_to_objects,
            epsilon=config.grid_snap_epsilon,
        )

    def configure(self, scale=None, grid_size_mm=None, grid_enabled=None):
        if scale is not None:
            self.scale = scale
        if grid_size_mm is not None:
            self.grid_size_mm = grid_size_mm
        if grid_enabled is not None:
            self.grid_enabled = grid_enabled

    def snap_point(self, raw, rooms=(), walls=(), products=()) -> SnapResult:
        """Return the corrected point for ``raw``"""
        raw = Point.of(raw)

        endpoints = []
        for wall in walls:
            endpoints.append(wall.start)
            endpoints.append(wall.end)
        hit = self._pick(raw, endpoints)
        if hit is not None:
            return SnapResult(hit, True, 'endpoint')

        hit = self._pick(raw, [wall.midpoint for wall in walls])
        if hit is not None:
            return SnapResult(hit, True, 'midpoint')

        if self.snap_to_objects:
            hit = self._pick(raw, [product.position for product in products])
            if hit is not None:
                return SnapResult(hit, True, 'object')
            hit = self._pick(raw, [p for room in rooms for p in room.points])
            if hit is not None:
                return SnapResult(hit, True, 'vertex')

        return self.snap_to_grid(raw)

    def snap_to_grid(self, raw) -> SnapResult:
        if not self.grid_enabled:
            return SnapResult(raw, False)

        grid_px = mm_to_canvas(self.grid_size_mm, self.scale)
        if not math.isfinite(grid_px) or grid_px <= 0:
            debug_logger.debug('SnapSystem', "Grid spacing unusable, skipping grid snap", {'grid_px': grid_px})
            return SnapResult(raw, False, 'grid')

        snapped = Point(_round_half_up(raw.x, grid_px), _round_half_up(raw.y, grid_px))
        moved = math.hypot(snapped.x - raw.x, snapped.y - raw.y) > self.epsilon
        return SnapResult(snapped if moved else raw, moved, 'grid')

    def _pick(self, raw: Point, candidates: Sequence[Point]) -> Optional[Point]:
        best = None
        best_dist = self.threshold_px
        for candidate in candidates:
            dist = math.hypot(raw.x - candidate.x, raw.y - candidate.y)
            if dist >= self.threshold_px:
                continue
            if self.tie_break == "first":
                return candidate
            if best is None or dist < best_dist:
                best = candidate
                best_dist = dist
        return best
