"""
Geometry utilities for the floor plan engine

Pure functions over canvas-pixel points. Points are anything exposing ``.x``
and ``.y`` attributes.
"""

import math
from typing import Dict, List, Sequence, Tuple


def distance(a, b) -> float:
	return math.hypot(b.x - a.x, b.y - a.y)


def midpoint(a, b) -> Tuple[float, float]:
	return ((a.x + b.x) / 2.0, (a.y + b.y) / 2.0)


def polygon_area(points: Sequence) -> float:
	"""Area in pixel^2 using the shoelace formula. Returns 0 for < 3 points."""
	n = len(points)
	if n < 3:
		return 0.0
	area2 = 0.0
	for i in range(n):
		p1 = points[i]
		p2 = points[(i + 1) % n]
		area2 += (p1.x * p2.y) - (p2.x * p1.y)
	return abs(area2) / 2.0


def polygon_perimeter(points: Sequence) -> float:
	"""Perimeter in pixels, wrapping last -> first."""
	n = len(points)
	if n < 2:
		return 0.0
	perim = 0.0
	for i in range(n):
		p1 = points[i]
		p2 = points[(i + 1) % n]
		perim += math.hypot(p2.x - p1.x, p2.y - p1.y)
	return perim


def polygon_centroid(points: Sequence) -> Tuple[float, float]:
	"""Label anchor: the mean of the vertices (not the area centroid)."""
	if not points:
		return (0.0, 0.0)
	n = float(len(points))
	return (sum(p.x for p in points) / n, sum(p.y for p in points) / n)


def point_in_rotated_rect(point, center, rotation: float, width: float, height: float) -> bool:
	"""Hit-test a rectangle of ``width x height`` rotated by ``rotation`` radians
	about ``center``. Boundaries count as inside.
	"""
	dx = point.x - center.x
	dy = point.y - center.y
	cos_r = math.cos(-rotation)
	sin_r = math.sin(-rotation)
	local_x = dx * cos_r - dy * sin_r
	local_y = dx * sin_r + dy * cos_r
	return abs(local_x) <= width / 2.0 and abs(local_y) <= height / 2.0


def rotated_rect_corners(center, width: float, height: float, rotation: float) -> List[Tuple[float, float]]:
	"""Corners of a rotated rectangle in drawing order."""
	cos_r = math.cos(rotation)
	sin_r = math.sin(rotation)
	hw = width / 2.0
	hh = height / 2.0
	corners = []
	for lx, ly in ((-hw, -hh), (hw, -hh), (hw, hh), (-hw, hh)):
		corners.append((
			center.x + lx * cos_r - ly * sin_r,
			center.y + lx * sin_r + ly * cos_r,
		))
	return corners


def rotated_rect_half_extent_y(width: float, height: float, rotation: float) -> float:
	"""Half height of the axis-aligned box enclosing a rotated rectangle."""
	return abs(width / 2.0 * math.sin(rotation)) + abs(height / 2.0 * math.cos(rotation))


def segment_measure(a, b, scale: float) -> Dict[str, float]:
	"""Length in mm and angle in degrees of the segment a -> b."""
	from drawing.scale_manager import canvas_to_mm

	dx = b.x - a.x
	dy = b.y - a.y
	return {
		'distance_mm': canvas_to_mm(math.hypot(dx, dy), scale),
		'angle_degrees': math.atan2(dy, dx) * 180.0 / math.pi,
	}


def project_onto_segment(point, start, end) -> Tuple[Tuple[float, float], float]:
	"""Project ``point`` onto the infinite line through start/end.

	Returns the projected point and the unclamped parameter t along the
	segment. Zero-length segments project onto ``start`` with t = 0.
	"""
	cx = end.x - start.x
	cy = end.y - start.y
	len_sq = cx * cx + cy * cy
	if len_sq == 0:
		return (start.x, start.y), 0.0
	t = ((point.x - start.x) * cx + (point.y - start.y) * cy) / len_sq
	return (start.x + t * cx, start.y + t * cy), t


def distance_to_segment(point, start, end) -> float:
	(px, py), t = project_onto_segment(point, start, end)
	if t < 0:
		return math.hypot(point.x - start.x, point.y - start.y)
	if t > 1:
		return math.hypot(point.x - end.x, point.y - end.y)
	return math.hypot(point.x - px, point.y - py)


def point_in_polygon(point, polygon: Sequence) -> bool:
	"""Ray casting test. Polygons with fewer than 3 points contain nothing."""
	n = len(polygon)
	if n < 3:
		return False
	inside = False
	j = n - 1
	for i in range(n):
		xi, yi = polygon[i].x, polygon[i].y
		xj, yj = polygon[j].x, polygon[j].y
		if ((yi > point.y) != (yj > point.y)) and (point.x < (xj - xi) * (point.y - yi) / (yj - yi) + xi):
			inside = not inside
		j = i
	return inside


def is_product_within_room(product, room_points: Sequence, canvas_scale: float) -> bool:
	"""True when every corner of the product footprint lies inside the room.

	An undefined room (< 3 points) places no constraint.
	"""
	if len(room_points) < 3:
		return True
	from drawing.entities import Point

	width, height = product.footprint_px(canvas_scale)
	corners = rotated_rect_corners(product.position, width, height, product.rotation)
	return all(point_in_polygon(Point(x, y), room_points) for x, y in corners)
