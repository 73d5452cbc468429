"""
Painter Backend - Executes draw commands on a QPainter
"""

import math

from PySide6.QtCore import Qt, QPointF, QRectF
from PySide6.QtGui import QBrush, QColor, QFont, QFontMetricsF, QImage, QPainter, QPen, QPolygonF

from drawing.render_pipeline import Arc, Circle, Clear, Line, Polygon, Polyline, Rect, Text
from calculations.debug_logger import debug_logger


class QPainterBackend:
    """Thin adapter from draw commands to QPainter calls"""

    def __init__(self, painter: QPainter):
        self.painter = painter

    def execute(self, commands):
        painter = self.painter
        painter.setRenderHint(QPainter.Antialiasing, True)
        for command in commands:
            handler = self._handlers.get(type(command))
            if handler is None:
                debug_logger.warning('QPainterBackend', f"No handler for {type(command).__name__}")
                continue
            painter.save()
            try:
                handler(self, command)
            finally:
                painter.restore()

    # --- helpers -----------------------------------------------------------

    @staticmethod
    def _pen(color, width, dash=None):
        if color is None:
            return QPen(Qt.NoPen)
        pen = QPen(QColor(color))
        pen.setWidthF(width)
        pen.setCapStyle(Qt.FlatCap)
        if dash:
            # QPen dash pattern is in units of the pen width
            pen.setDashPattern([max(d / max(width, 1.0), 0.1) for d in dash])
        return pen

    @staticmethod
    def _brush(color):
        if color is None:
            return QBrush(Qt.NoBrush)
        return QBrush(QColor(color))

    # --- commands ----------------------------------------------------------

    def _clear(self, cmd: Clear):
        self.painter.fillRect(QRectF(0, 0, cmd.width, cmd.height), QColor(cmd.color))

    def _line(self, cmd: Line):
        self.painter.setPen(self._pen(cmd.color, cmd.width, cmd.dash))
        self.painter.drawLine(QPointF(*cmd.start), QPointF(*cmd.end))

    def _polyline(self, cmd: Polyline):
        pen = self._pen(cmd.color, cmd.width, cmd.dash)
        pen.setJoinStyle(Qt.MiterJoin)
        self.painter.setPen(pen)
        self.painter.drawPolyline(QPolygonF([QPointF(x, y) for x, y in cmd.points]))

    def _polygon(self, cmd: Polygon):
        self.painter.setPen(self._pen(cmd.stroke, cmd.width))
        self.painter.setBrush(self._brush(cmd.fill))
        self.painter.drawPolygon(QPolygonF([QPointF(x, y) for x, y in cmd.points]))

    def _rect(self, cmd: Rect):
        painter = self.painter
        painter.translate(*cmd.center)
        painter.rotate(math.degrees(cmd.rotation))
        painter.setPen(self._pen(cmd.stroke, cmd.line_width, cmd.dash))
        painter.setBrush(self._brush(cmd.fill))
        painter.drawRect(QRectF(-cmd.width / 2, -cmd.height / 2, cmd.width, cmd.height))

    def _arc(self, cmd: Arc):
        painter = self.painter
        painter.translate(*cmd.center)
        painter.rotate(math.degrees(cmd.rotation))
        painter.setPen(self._pen(cmd.color, cmd.width))
        painter.setBrush(Qt.NoBrush)
        r = cmd.radius
        # Qt angles are 1/16 degree, counter-clockwise
        start = int(round(-math.degrees(cmd.start_angle) * 16))
        span = int(round(-math.degrees(cmd.end_angle - cmd.start_angle) * 16))
        painter.drawArc(QRectF(-r, -r, 2 * r, 2 * r), start, span)

    def _circle(self, cmd: Circle):
        self.painter.setPen(self._pen(cmd.stroke, cmd.width))
        self.painter.setBrush(self._brush(cmd.fill))
        self.painter.drawEllipse(QPointF(*cmd.center), cmd.radius, cmd.radius)

    def _text(self, cmd: Text):
        painter = self.painter
        font = QFont("Arial")
        font.setPixelSize(max(1, int(round(cmd.size))))
        painter.setFont(font)
        metrics = QFontMetricsF(font)
        width = metrics.horizontalAdvance(cmd.text)
        x, y = cmd.position
        if cmd.align == 'center':
            x -= width / 2
            y += metrics.ascent() / 2 - metrics.descent() / 2
        if cmd.background:
            painter.fillRect(QRectF(x - 2, y - metrics.ascent() - 2, width + 4, metrics.height() + 4),
                             QColor(cmd.background))
        painter.setPen(QColor(cmd.color))
        painter.drawText(QPointF(x, y), cmd.text)

    _handlers = {
        Clear: _clear,
        Line: _line,
        Polyline: _polyline,
        Polygon: _polygon,
        Rect: _rect,
        Arc: _arc,
        Circle: _circle,
        Text: _text,
    }


class ImageSurface:
    """Offscreen rendering surface backed by a QImage"""

    def __init__(self, width=1000, height=600):
        self.image = QImage(int(width), int(height), QImage.Format_ARGB32)
        self.image.fill(QColor("#ffffff"))
        self.last_commands = []

    def present(self, commands):
        self.last_commands = list(commands)
        painter = QPainter(self.image)
        try:
            QPainterBackend(painter).execute(self.last_commands)
        finally:
            painter.end()

    def pixel_color(self, x, y) -> QColor:
        return self.image.pixelColor(int(x), int(y))

    def save(self, path) -> bool:
        return self.image.save(str(path))
