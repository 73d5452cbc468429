#!/usr/bin/env python3
"""
Tests for QSettings-backed configuration
"""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

import pytest
from PySide6.QtCore import QSettings

from drawing.config import EngineConfig
from utils.settings_manager import SettingsManager


@pytest.fixture
def settings_manager(tmp_path, qapp):
    settings = QSettings(str(tmp_path / "planner.ini"), QSettings.IniFormat)
    return SettingsManager(settings)


def test_defaults_when_nothing_stored(settings_manager):
    assert settings_manager.load_engine_config() == EngineConfig()


def test_engine_config_round_trip(settings_manager):
    config = EngineConfig(snap_threshold_px=12.5, snap_tie_break="first", show_grid=False,
                          default_font_size=18, default_wall_color="#123456")
    settings_manager.save_engine_config(config)

    assert settings_manager.load_engine_config() == config


def test_reset_engine_config(settings_manager):
    settings_manager.save_engine_config(EngineConfig(history_limit=5))
    settings_manager.reset_engine_config()
    assert settings_manager.load_engine_config().history_limit == 50


def test_database_path(settings_manager, tmp_path):
    assert settings_manager.get_database_path() is None

    path = tmp_path / "custom.db"
    settings_manager.set_database_path(path)
    assert settings_manager.is_using_custom_path()
    assert settings_manager.get_database_path() == str(path)

    settings_manager.clear_database_path()
    assert settings_manager.get_database_path() is None


def test_config_from_dict_ignores_unknown_keys():
    config = EngineConfig.from_dict({'canvas_width': 800, 'unknown': 1})
    assert config.canvas_width == 800
    assert config.to_dict()['canvas_height'] == 600


def test_config_defaults_follow_common_dimensions():
    from drawing.scale_manager import GRID_SIZES, COMMON_DIMENSIONS

    config = EngineConfig()
    assert config.default_door_width_mm == COMMON_DIMENSIONS['door_width']
    assert config.default_wall_thickness_mm == COMMON_DIMENSIONS['wall_thickness']
    assert config.default_grid_size_mm == GRID_SIZES['planning']
