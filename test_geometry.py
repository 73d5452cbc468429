#!/usr/bin/env python3
"""
Tests for the pure geometry helpers
"""

import math
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

import pytest

from drawing.entities import Point, PlacedProduct, Dimensions
from calculations.geometry import (
    polygon_area, polygon_perimeter, polygon_centroid, point_in_rotated_rect,
    segment_measure, distance_to_segment, project_onto_segment, point_in_polygon,
    rotated_rect_corners, is_product_within_room,
)


SQUARE = [Point(0, 0), Point(100, 0), Point(100, 100), Point(0, 100)]


def test_shoelace_square():
    assert polygon_area(SQUARE) == 10000
    assert polygon_perimeter(SQUARE) == 400


def test_area_ignores_winding():
    assert polygon_area(list(reversed(SQUARE))) == 10000


def test_degenerate_polygon_has_no_area():
    assert polygon_area([Point(0, 0), Point(10, 10)]) == 0
    assert polygon_area([]) == 0


def test_centroid_is_vertex_mean():
    # An extra collinear vertex shifts the mean but not the area centroid
    points = SQUARE + [Point(0, 50)]
    assert polygon_centroid(SQUARE) == (50, 50)
    assert polygon_centroid(points) == (40, 50)


def test_rotated_hit_test():
    """A 100x50 footprint rotated 90 degrees stands upright"""
    center = Point(200, 200)
    rotation = math.pi / 2
    assert point_in_rotated_rect(Point(200, 225), center, rotation, 100, 50)
    assert not point_in_rotated_rect(Point(240, 200), center, rotation, 100, 50)
    # Same point hits the unrotated footprint
    assert point_in_rotated_rect(Point(240, 200), center, 0.0, 100, 50)


def test_rotated_hit_test_boundary_inclusive():
    assert point_in_rotated_rect(Point(250, 200), Point(200, 200), 0.0, 100, 50)


def test_segment_measure():
    result = segment_measure(Point(0, 0), Point(30, 40), 0.1)
    assert result['distance_mm'] == pytest.approx(500)
    assert result['angle_degrees'] == pytest.approx(math.degrees(math.atan2(40, 30)))

    down = segment_measure(Point(0, 0), Point(0, 10), 1.0)
    assert down['angle_degrees'] == pytest.approx(90)


def test_projection_and_distance_to_segment():
    (px, py), t = project_onto_segment(Point(50, 10), Point(0, 0), Point(100, 0))
    assert (px, py) == (50, 0)
    assert t == pytest.approx(0.5)
    assert distance_to_segment(Point(50, 10), Point(0, 0), Point(100, 0)) == pytest.approx(10)
    # Beyond the end the distance is to the endpoint
    assert distance_to_segment(Point(130, 40), Point(0, 0), Point(100, 0)) == pytest.approx(50)


def test_point_in_polygon():
    assert point_in_polygon(Point(50, 50), SQUARE)
    assert not point_in_polygon(Point(150, 50), SQUARE)
    assert not point_in_polygon(Point(0, 0), SQUARE[:2])


def test_rotated_rect_corners():
    corners = rotated_rect_corners(Point(0, 0), 20, 10, math.pi / 2)
    xs = sorted(round(x, 6) for x, _ in corners)
    ys = sorted(round(y, 6) for _, y in corners)
    assert xs[0] == -5 and xs[-1] == 5
    assert ys[0] == -10 and ys[-1] == 10


def test_product_within_room():
    product = PlacedProduct('bench', 'Bench', Point(50, 50), Dimensions(200, 100))
    # At scale 0.15 the footprint is 30x15 px
    assert is_product_within_room(product, SQUARE, 0.15)
    product.position = Point(95, 50)
    assert not is_product_within_room(product, SQUARE, 0.15)
    assert is_product_within_room(product, [], 0.15)
