#!/usr/bin/env python3
"""
Tests for millimetre/pixel conversion and measurement formatting
"""

import math
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

import pytest

from drawing.scale_manager import (
    ScaleManager, mm_to_canvas, canvas_to_mm, convert_to_mm, convert_from_mm,
    format_measurement, format_area, parse_dimension_string, calculate_scale,
)


@pytest.mark.parametrize('mm', [0.0, 1.0, 100.0, 1500.0, 12345.678])
@pytest.mark.parametrize('scale', [0.15, 0.5, 1.0, 3.7])
def test_round_trip_conversion(mm, scale):
    """canvas_to_mm(mm_to_canvas(mm)) returns the original value"""
    assert canvas_to_mm(mm_to_canvas(mm, scale), scale) == pytest.approx(mm)


def test_default_scale_values():
    assert mm_to_canvas(1000, 0.15) == pytest.approx(150.0)
    assert canvas_to_mm(150, 0.15) == pytest.approx(1000.0)


def test_zero_scale_yields_infinity_not_error():
    assert canvas_to_mm(10, 0) == math.inf
    assert canvas_to_mm(-10, 0) == -math.inf
    assert math.isnan(canvas_to_mm(0, 0))


def test_format_measurement():
    assert format_measurement(1500) == "1500mm"
    assert format_measurement(1500, unit='m', precision=2) == "1.50m"
    assert format_measurement(1500, show_unit=False) == "1500"
    assert format_measurement(254, unit='in', precision=1) == "10.0in"


def test_format_area():
    assert format_area(12_500_000) == "12.50m²"
    assert format_area(12_500_000, show_unit=False) == "12.50"


def test_unit_family():
    assert convert_to_mm(2, 'm') == 2000
    assert convert_to_mm(1, 'ft') == pytest.approx(304.8)
    assert convert_from_mm(250, 'cm') == 25


def test_parse_dimension_string():
    assert parse_dimension_string("750×550×880 mm") == {'length': 750.0, 'width': 550.0, 'height': 880.0}
    assert parse_dimension_string("1200 x 600 x 1800mm") == {'length': 1200.0, 'width': 600.0, 'height': 1800.0}
    assert parse_dimension_string("about a metre") is None
    assert parse_dimension_string("") is None


def test_calculate_scale():
    assert calculate_scale(1000, 10000) == pytest.approx(0.1)


def test_scale_manager_zoom(qapp):
    manager = ScaleManager(base_scale=0.15)
    changes = []
    manager.scale_changed.connect(lambda scale, text: changes.append(scale))

    assert manager.set_zoom(2.0)
    assert manager.scale == pytest.approx(0.3)
    assert changes == [pytest.approx(0.3)]
    assert not manager.set_zoom(0)
    assert manager.zoom_factor == 2.0

    assert manager.calculate_distance(0, 0, 30, 40) == pytest.approx(50 / 0.3)
    assert manager.format_distance(1234.4) == "1234mm"


def test_scale_manager_reference_calibration(qapp):
    manager = ScaleManager()
    assert manager.set_scale_from_reference(200, 1000)
    assert manager.scale == pytest.approx(0.2)
    assert not manager.set_scale_from_reference(0, 1000)
    assert manager.get_scale_info()['mm_per_pixel'] == pytest.approx(5.0)
