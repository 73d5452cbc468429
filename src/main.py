#!/usr/bin/env python3
"""
Floor Planner - Main Application Entry Point
Desktop 2D floor plan editor for laboratory layouts
"""

import sys
import os
from PySide6.QtWidgets import QApplication, QStyleFactory

# Add src directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from drawing import FloorPlanEngine
from models import initialize_database, close_database
from utils.settings_manager import get_settings_manager
from ui.floor_planner_window import FloorPlannerWindow


class FloorPlannerApp(QApplication):
    """Main application class"""

    def __init__(self, argv):
        super().__init__(argv)
        self.setApplicationName("Floor Planner")
        self.setApplicationVersion("1.0.0")
        self.setOrganizationName("Lab Floor Planner")

        # Set application style
        self.setStyle(QStyleFactory.create('Fusion'))

        self.main_window = None

    def start(self):
        """Start the application"""
        initialize_database()
        config = get_settings_manager().load_engine_config()
        self.main_window = FloorPlannerWindow(FloorPlanEngine(config))
        self.main_window.show()
        try:
            return self.exec()
        finally:
            close_database()


def main():
    """Application entry point"""
    app = FloorPlannerApp(sys.argv)
    return app.start()


if __name__ == '__main__':
    sys.exit(main())
