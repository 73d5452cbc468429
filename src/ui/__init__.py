"""
User interface for the Floor Planner
"""

from .floor_plan_canvas import FloorPlanCanvas
from .floor_planner_window import FloorPlannerWindow

__all__ = [
    'FloorPlanCanvas',
    'FloorPlannerWindow',
]
