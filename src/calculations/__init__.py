"""
Geometry calculations and debug logging for the floor plan engine
"""

from .geometry import (
    distance,
    midpoint,
    polygon_area,
    polygon_perimeter,
    polygon_centroid,
    point_in_rotated_rect,
    rotated_rect_corners,
    segment_measure,
    project_onto_segment,
    distance_to_segment,
    point_in_polygon,
    is_product_within_room,
)
from .debug_logger import debug_logger

__all__ = [
    'distance',
    'midpoint',
    'polygon_area',
    'polygon_perimeter',
    'polygon_centroid',
    'point_in_rotated_rect',
    'rotated_rect_corners',
    'segment_measure',
    'project_onto_segment',
    'distance_to_segment',
    'point_in_polygon',
    'is_product_within_room',
    'debug_logger',
]
