"""
Floor Plan Canvas - Interactive QWidget surface for the floor plan engine
"""

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QPainter
from PySide6.QtWidgets import QWidget

from drawing.entities import Point
from drawing.input_events import (
    DoubleClick, KeyPress, PointerDown, PointerMove, PointerUp, ProductDrop,
    KEY_BACKSPACE, KEY_DELETE, KEY_ENTER, KEY_ESCAPE, KEY_ROTATE,
)
from drawing.painter_backend import QPainterBackend
from data.product_library import PRODUCT_MIME_TYPE
from calculations.debug_logger import debug_logger


_KEY_NAMES = {
    Qt.Key_Return: KEY_ENTER,
    Qt.Key_Enter: KEY_ENTER,
    Qt.Key_Escape: KEY_ESCAPE,
    Qt.Key_Delete: KEY_DELETE,
    Qt.Key_Backspace: KEY_BACKSPACE,
    Qt.Key_R: KEY_ROTATE,
}


class FloorPlanCanvas(QWidget):
    """Translates Qt input into engine events and paints the engine's frames"""

    coordinates_changed = Signal(float, float)

    def __init__(self, engine, parent=None):
        super().__init__(parent)
        self.engine = engine
        self._commands = []

        self.setFixedSize(engine.config.canvas_width, engine.config.canvas_height)
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.StrongFocus)
        self.setAcceptDrops(True)

        engine.attach_surface(self)

    # Surface protocol used by FloorPlanEngine.render
    def present(self, commands):
        self._commands = list(commands)
        # update() coalesces repeated requests into one paint per frame
        self.update()

    def paintEvent(self, event):
        painter = QPainter(self)
        try:
            QPainterBackend(painter).execute(self._commands)
        except Exception as e:
            debug_logger.error('FloorPlanCanvas', "Paint failed", e)
        finally:
            painter.end()

    # ---------------------- Mouse ----------------------
    @staticmethod
    def _point(event):
        pos = event.position()
        return Point(pos.x(), pos.y())

    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton:
            shift = bool(event.modifiers() & Qt.ShiftModifier)
            self.engine.dispatch(PointerDown(self._point(event), shift))
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event):
        point = self._point(event)
        self.coordinates_changed.emit(point.x, point.y)
        self.engine.dispatch(PointerMove(point, bool(event.buttons() & Qt.LeftButton)))

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.LeftButton:
            self.engine.dispatch(PointerUp(self._point(event)))

    def mouseDoubleClickEvent(self, event):
        if event.button() == Qt.LeftButton:
            self.engine.dispatch(DoubleClick(self._point(event)))

    def keyPressEvent(self, event):
        key = _KEY_NAMES.get(event.key())
        if key is None:
            super().keyPressEvent(event)
            return
        shift = bool(event.modifiers() & Qt.ShiftModifier)
        self.engine.dispatch(KeyPress(key, shift))

    # ---------------------- Drag and drop ----------------------
    def dragEnterEvent(self, event):
        if event.mimeData().hasFormat(PRODUCT_MIME_TYPE):
            event.acceptProposedAction()
        else:
            event.ignore()

    def dragMoveEvent(self, event):
        if event.mimeData().hasFormat(PRODUCT_MIME_TYPE):
            event.acceptProposedAction()

    def dropEvent(self, event):
        data = event.mimeData()
        if not data.hasFormat(PRODUCT_MIME_TYPE):
            event.ignore()
            return
        payload = bytes(data.data(PRODUCT_MIME_TYPE)).decode('utf-8', errors='replace')
        pos = event.position()
        self.engine.dispatch(ProductDrop(payload, Point(pos.x(), pos.y())))
        event.acceptProposedAction()
