"""
Debug logging framework for the floor plan engine
Centralizes and standardizes debug output across the drawing system
"""

import os
import logging
from typing import Any, Dict, Optional
import json


class PlannerDebugLogger:
    """Centralized debug logger for the floor plan engine"""

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if not self._initialized:
            self._setup_logger()
            PlannerDebugLogger._initialized = True

    def _setup_logger(self):
        """Initialize the logging configuration"""
        # Check environment variable for debug level
        env_val = str(os.environ.get("FLOORPLAN_DEBUG", "")).strip().lower()
        self.debug_enabled = env_val in {"1", "true", "yes", "on"}

        debug_level = os.environ.get("FLOORPLAN_DEBUG_LEVEL", "DEBUG" if self.debug_enabled else "WARNING").upper()

        self.logger = logging.getLogger('floorplan_debug')
        self.logger.setLevel(getattr(logging, debug_level, logging.WARNING))

        # Clear existing handlers
        self.logger.handlers.clear()

        if self.debug_enabled:
            console_handler = logging.StreamHandler()
            console_handler.setLevel(logging.DEBUG)

            # Format with timestamp and component
            formatter = logging.Formatter(
                '%(asctime)s [PLAN-%(levelname)s] %(component)s: %(message)s',
                datefmt='%H:%M:%S'
            )
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

            if os.environ.get("FLOORPLAN_DEBUG_FILE"):
                file_handler = logging.FileHandler(os.environ["FLOORPLAN_DEBUG_FILE"])
                file_handler.setLevel(logging.DEBUG)
                file_handler.setFormatter(formatter)
                self.logger.addHandler(file_handler)

    def _compose(self, message: str, data: Optional[Dict[str, Any]]) -> str:
        if data:
            return f"{message} {self._format_debug_data(data)}"
        return message

    def debug(self, component: str, message: str, data: Optional[Dict[str, Any]] = None):
        """Log debug message with component context"""
        if not self.debug_enabled:
            return
        self.logger.debug(self._compose(message, data), extra={'component': component})

    def info(self, component: str, message: str, data: Optional[Dict[str, Any]] = None):
        """Log info message with component context"""
        if not self.debug_enabled:
            return
        self.logger.info(self._compose(message, data), extra={'component': component})

    def warning(self, component: str, message: str, data: Optional[Dict[str, Any]] = None):
        """Log warning message. Always emitted, debug mode or not."""
        self.logger.warning(self._compose(message, data), extra={'component': component})

    def error(self, component: str, message: str, error: Optional[Exception] = None, data: Optional[Dict[str, Any]] = None):
        """Log error message. Always emitted, debug mode or not."""
        full_message = message
        if error:
            full_message += f" Error: {str(error)}"
        self.logger.error(self._compose(full_message, data), extra={'component': component})

    def _format_debug_data(self, data: Dict[str, Any]) -> str:
        """Format debug data for logging"""
        try:
            formatted = {}
            for key, value in data.items():
                if hasattr(value, 'x') and hasattr(value, 'y'):
                    # Points
                    formatted[key] = [round(float(value.x), 1), round(float(value.y), 1)]
                elif key.endswith('_mm') and isinstance(value, (int, float)):
                    formatted[key] = f"{float(value):.0f}mm"
                elif isinstance(value, float):
                    formatted[key] = round(value, 3)
                else:
                    formatted[key] = value

            return json.dumps(formatted, separators=(',', ':'), default=str)
        except Exception:
            # Fallback to string representation
            return str(data)

    def log_commit(self, component: str, entity_type: str, count: int, accepted: bool):
        """Log the outcome of a drawing commit"""
        data = {'entity_type': entity_type, 'count': count, 'accepted': accepted}
        if accepted:
            self.info(component, "Commit accepted", data)
        else:
            self.debug(component, "Commit rejected", data)


# Global logger instance
debug_logger = PlannerDebugLogger()
