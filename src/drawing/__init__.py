"""
Drawing components for the 2D floor plan engine
"""

from .config import EngineConfig
from .entities import (
    DrawingMode, WallType, Point, SnapResult, WallSegment, Room, Door,
    TextAnnotation, Dimensions, PlacedProduct,
)
from .scale_manager import ScaleManager
from .snap_system import SnapSystem
from .drawing_tools import DrawingStateMachine, Idle, Drawing, IDLE
from .render_pipeline import RenderPipeline, Scene, Layer
from .history import FloorPlanHistory
from .floor_plan_engine import FloorPlanEngine

__all__ = [
    'EngineConfig',
    'DrawingMode',
    'WallType',
    'Point',
    'SnapResult',
    'WallSegment',
    'Room',
    'Door',
    'TextAnnotation',
    'Dimensions',
    'PlacedProduct',
    'ScaleManager',
    'SnapSystem',
    'DrawingStateMachine',
    'Idle',
    'Drawing',
    'IDLE',
    'RenderPipeline',
    'Scene',
    'Layer',
    'FloorPlanHistory',
    'FloorPlanEngine',
]
