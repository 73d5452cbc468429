"""
Shared test setup: src on the import path, headless Qt, one QApplication
"""

import os
import sys

# Add src directory to path
CURRENT_DIR = os.path.dirname(__file__)
SRC_DIR = os.path.join(CURRENT_DIR, 'src')
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

# Use offscreen platform for headless test environments
os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')

import pytest


@pytest.fixture(scope='session')
def qapp():
    from PySide6.QtWidgets import QApplication
    app = QApplication.instance() or QApplication([])
    yield app


class RecordingSurface:
    """Surface that keeps every frame it was asked to present"""

    def __init__(self):
        self.frames = []

    def present(self, commands):
        self.frames.append(list(commands))

    @property
    def last(self):
        return self.frames[-1] if self.frames else []


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def engine(qapp):
    from drawing import EngineConfig, FloorPlanEngine
    # Grid snapping off so clicked coordinates stay exact
    return FloorPlanEngine(EngineConfig(show_grid=False))
