"""
Scale Manager - Millimetre/pixel conversion and measurement formatting
"""

import math
import re
from PySide6.QtCore import QObject, Signal


# Grid size options in mm
GRID_SIZES = {
    'fine': 1,
    'medium': 5,
    'coarse': 10,
    'standard': 20,
    'planning': 100,
}

# Common architectural dimensions in mm
COMMON_DIMENSIONS = {
    'door_width': 800,
    'wall_thickness': 100,
}

# Millimetres per unit
_MM_PER_UNIT = {
    'mm': 1.0,
    'cm': 10.0,
    'm': 1000.0,
    'in': 25.4,
    'ft': 304.8,
}

_DIMENSION_RE = re.compile(r"(\d+(?:\.\d+)?)\s*[×xX]\s*(\d+(?:\.\d+)?)\s*[×xX]\s*(\d+(?:\.\d+)?)\s*mm")


def mm_to_canvas(mm, scale):
    """Convert real-world millimetres to canvas pixels"""
    return mm * scale


def canvas_to_mm(px, scale):
    """Convert canvas pixels to millimetres.

    ``scale`` must be > 0. A zero scale is not rejected; it yields an infinite
    (or NaN for 0/0) result that renderers skip.
    """
    try:
        return px / scale
    except ZeroDivisionError:
        if px == 0:
            return math.nan
        return math.copysign(math.inf, px)


def convert_to_mm(value, unit):
    return value * _MM_PER_UNIT.get(unit, 1.0)


def convert_from_mm(value, unit):
    return value / _MM_PER_UNIT.get(unit, 1.0)


def format_measurement(mm, unit='mm', precision=0, show_unit=True):
    """Format a millimetre quantity, e.g. 1500 -> '1500mm'"""
    converted = convert_from_mm(mm, unit)
    formatted = f"{converted:.{precision}f}"
    return f"{formatted}{unit}" if show_unit else formatted


def format_area(mm2, unit='m', precision=2, show_unit=True):
    """Format an area given in square millimetres, e.g. 12500000 -> '12.50m²'"""
    factor = _MM_PER_UNIT.get(unit, 1.0)
    converted = mm2 / (factor * factor)
    formatted = f"{converted:.{precision}f}"
    return f"{formatted}{unit}²" if show_unit else formatted


def parse_dimension_string(dimension_str):
    """Parse a catalog dimension string like '750×550×880 mm'.

    Returns {'length', 'width', 'height'} in mm, or None when the string does
    not match.
    """
    if not dimension_str:
        return None
    match = _DIMENSION_RE.search(dimension_str)
    if not match:
        return None
    return {
        'length': float(match.group(1)),
        'width': float(match.group(2)),
        'height': float(match.group(3)),
    }


def calculate_scale(canvas_width, real_width_mm):
    """Pixels per mm needed to fit ``real_width_mm`` into ``canvas_width`` pixels"""
    return canvas_width / real_width_mm


class ScaleManager(QObject):
    """Holds the live drawing scale (pixels per mm) and zoom factor"""

    scale_changed = Signal(float, str)  # scale, scale_string

    def __init__(self, base_scale=0.15, unit='mm', precision=0):
        super().__init__()
        self.base_scale = base_scale
        self.zoom_factor = 1.0
        self.unit = unit
        self.precision = precision

    @property
    def scale(self):
        return self.base_scale * self.zoom_factor

    @property
    def scale_string(self):
        if self.scale <= 0:
            return "invalid"
        # 1 px on screen corresponds to this many mm
        return f"1px:{canvas_to_mm(1, self.scale):.1f}mm"

    def set_base_scale(self, base_scale):
        """Set the calibrated scale without touching the zoom"""
        self.base_scale = base_scale
        self.scale_changed.emit(self.scale, self.scale_string)

    def set_zoom(self, zoom_factor):
        """Set zoom factor. Returns False for non-positive factors."""
        if zoom_factor <= 0:
            return False
        self.zoom_factor = zoom_factor
        self.scale_changed.emit(self.scale, self.scale_string)
        return True

    def set_scale_from_reference(self, pixel_distance, real_distance_mm):
        """Calibrate from a known measurement on the canvas"""
        if pixel_distance > 0 and real_distance_mm > 0:
            self.set_base_scale(pixel_distance / real_distance_mm / self.zoom_factor)
            return True
        return False

    def mm_to_canvas(self, mm):
        return mm_to_canvas(mm, self.scale)

    def canvas_to_mm(self, px):
        return canvas_to_mm(px, self.scale)

    def calculate_distance(self, x1, y1, x2, y2):
        """Real-world distance in mm between two pixel points"""
        return self.canvas_to_mm(math.hypot(x2 - x1, y2 - y1))

    def format_distance(self, mm):
        return format_measurement(mm, unit=self.unit, precision=self.precision, show_unit=True)

    def get_scale_info(self):
        return {
            'scale': self.scale,
            'base_scale': self.base_scale,
            'zoom_factor': self.zoom_factor,
            'scale_string': self.scale_string,
            'unit': self.unit,
            'mm_per_pixel': 1.0 / self.scale if self.scale > 0 else 0,
        }
