"""
Settings Manager - Handles application settings persistence using QSettings
"""

import os
from dataclasses import fields
from PySide6.QtCore import QSettings

from drawing.config import EngineConfig


class SettingsManager:
    """Manages application settings using QSettings"""

    ORGANIZATION = "Lab Floor Planner"
    APPLICATION = "Floor Planner"

    # Settings keys
    KEY_DATABASE_CUSTOM_PATH = "database/custom_path"
    KEY_DATABASE_USE_CUSTOM_PATH = "database/use_custom_path"
    ENGINE_GROUP = "engine"

    def __init__(self, settings=None):
        """Initialize the settings manager

        Args:
            settings (QSettings, optional): settings store to use instead of the
                per-user application store (tests pass an INI-backed one)
        """
        if settings is None:
            settings = QSettings(SettingsManager.ORGANIZATION, SettingsManager.APPLICATION)
        self.settings = settings

    def get_database_path(self):
        """
        Get the custom database path from settings, or None if not set

        Returns:
            str or None: Custom database path, or None if using default
        """
        use_custom = self.settings.value(self.KEY_DATABASE_USE_CUSTOM_PATH, False, type=bool)
        if use_custom:
            custom_path = self.settings.value(self.KEY_DATABASE_CUSTOM_PATH, None, type=str)
            if custom_path and os.path.exists(os.path.dirname(custom_path)):
                return custom_path
        return None

    def set_database_path(self, db_path):
        """
        Set the custom database path in settings

        Args:
            db_path (str): Full path to the database file
        """
        if db_path:
            self.settings.setValue(self.KEY_DATABASE_CUSTOM_PATH, str(db_path))
            self.settings.setValue(self.KEY_DATABASE_USE_CUSTOM_PATH, True)
        else:
            # Clear custom path and use default
            self.settings.remove(self.KEY_DATABASE_CUSTOM_PATH)
            self.settings.setValue(self.KEY_DATABASE_USE_CUSTOM_PATH, False)
        self.settings.sync()

    def clear_database_path(self):
        """Clear the custom database path and revert to default"""
        self.settings.remove(self.KEY_DATABASE_CUSTOM_PATH)
        self.settings.setValue(self.KEY_DATABASE_USE_CUSTOM_PATH, False)
        self.settings.sync()

    def is_using_custom_path(self):
        return self.settings.value(self.KEY_DATABASE_USE_CUSTOM_PATH, False, type=bool)

    def load_engine_config(self):
        """
        Build an EngineConfig from stored values; missing keys keep defaults

        Returns:
            EngineConfig
        """
        defaults = EngineConfig()
        values = {}
        self.settings.beginGroup(self.ENGINE_GROUP)
        try:
            for f in fields(EngineConfig):
                if not self.settings.contains(f.name):
                    continue
                default = getattr(defaults, f.name)
                values[f.name] = self.settings.value(f.name, default, type=type(default))
        finally:
            self.settings.endGroup()
        return EngineConfig.from_dict(values)

    def save_engine_config(self, config):
        """Persist every field of ``config``"""
        self.settings.beginGroup(self.ENGINE_GROUP)
        try:
            for key, value in config.to_dict().items():
                self.settings.setValue(key, value)
        finally:
            self.settings.endGroup()
        self.settings.sync()

    def reset_engine_config(self):
        self.settings.remove(self.ENGINE_GROUP)
        self.settings.sync()


# Global instance
_settings_manager = None


def get_settings_manager():
    """Get the global settings manager instance"""
    global _settings_manager
    if _settings_manager is None:
        _settings_manager = SettingsManager()
    return _settings_manager
