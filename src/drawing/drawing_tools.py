"""
Drawing Tools - Polyline state machine for the wall and room tools

The in-progress path is an explicit value, ``Idle`` or ``Drawing(mode, points)``,
advanced only through the pure transition functions ``add_point``, ``commit``
and ``cancel``. ``DrawingStateMachine`` wraps the current value in a QObject so
the canvas can listen for changes.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from PySide6.QtCore import QObject, Signal

from drawing.entities import DrawingMode, Point, SnapResult
from calculations.debug_logger import debug_logger


# Modes that accumulate several clicks before committing
POLYLINE_MODES = (DrawingMode.WALL, DrawingMode.ROOM)

MIN_WALL_POINTS = 2
MIN_ROOM_POINTS = 3


@dataclass(frozen=True)
class Idle:
    """No path in progress"""


IDLE = Idle()


@dataclass(frozen=True)
class Drawing:
    """A polyline being placed; ``points`` excludes the live pointer position"""
    mode: DrawingMode
    points: Tuple[Point, ...]


DrawingState = Union[Idle, Drawing]


@dataclass(frozen=True)
class WallCommit:
    """Consecutive point pairs of a finished wall run, zero-length pairs removed"""
    segments: Tuple[Tuple[Point, Point], ...]


@dataclass(frozen=True)
class RoomCommit:
    points: Tuple[Point, ...]


CommitResult = Union[WallCommit, RoomCommit]


def add_point(state: DrawingState, mode: DrawingMode, point: Point) -> DrawingState:
    """Click transition for the polyline modes.

    Other modes are single-click and leave the state unchanged. A click that
    repeats the last point (e.g. the second press of a double-click) is
    ignored.
    """
    if mode not in POLYLINE_MODES:
        return state
    if isinstance(state, Idle) or state.mode != mode:
        return Drawing(mode, (point,))
    if state.points and state.points[-1] == point:
        return state
    return Drawing(mode, state.points + (point,))


def commit(state: DrawingState) -> Tuple[DrawingState, Optional[CommitResult]]:
    """Finish the current path.

    Returns the next state and the commit result, or None when nothing was
    produced. A wall run with a single point is not finished at all: the state
    is returned unchanged so the user can keep clicking. Invalid rooms and
    wall runs made only of zero-length pairs reset to Idle without a result.
    """
    if isinstance(state, Idle):
        return state, None

    points = state.points

    if state.mode == DrawingMode.WALL:
        if len(points) < MIN_WALL_POINTS:
            return state, None
        segments = tuple(
            (a, b) for a, b in zip(points, points[1:]) if a != b
        )
        if not segments:
            return IDLE, None
        return IDLE, WallCommit(segments)

    if state.mode == DrawingMode.ROOM:
        # Clicking the first vertex again closes the outline; drop the repeat
        if len(points) > 1 and points[-1] == points[0]:
            points = points[:-1]
        if len(set(points)) < MIN_ROOM_POINTS:
            return IDLE, None
        return IDLE, RoomCommit(points)

    return IDLE, None


def cancel(state: DrawingState) -> DrawingState:
    return IDLE


class DrawingStateMachine(QObject):
    """Holds the active mode, the path in progress and the live preview point"""

    updated = Signal()  # Emitted when the path or preview changes
    finished = Signal(object)  # WallCommit or RoomCommit
    mode_changed = Signal(str)

    def __init__(self, mode: DrawingMode = DrawingMode.SELECT):
        super().__init__()
        self.mode = mode
        self.state: DrawingState = IDLE
        self.preview: Optional[SnapResult] = None

    @property
    def is_drawing(self) -> bool:
        return isinstance(self.state, Drawing)

    @property
    def points(self) -> Tuple[Point, ...]:
        return self.state.points if isinstance(self.state, Drawing) else ()

    def set_mode(self, mode: DrawingMode):
        """Switch tools. Any path in progress is discarded."""
        if self.is_drawing:
            self.cancel()
        if mode == self.mode:
            return
        self.mode = mode
        self.preview = None
        self.mode_changed.emit(mode.value)

    def add_point(self, point: Point):
        new_state = add_point(self.state, self.mode, point)
        if new_state is not self.state:
            self.state = new_state
            debug_logger.debug('DrawingStateMachine', "Point added", {
                'mode': self.mode.value, 'count': len(self.points), 'point': point,
            })
            self.updated.emit()

    def move(self, snap: Optional[SnapResult]):
        """Update the live preview position"""
        self.preview = snap
        if self.is_drawing:
            self.updated.emit()

    def commit(self) -> Optional[CommitResult]:
        previous = self.state
        self.state, result = commit(self.state)
        if isinstance(previous, Drawing):
            entity_type = previous.mode.value
            debug_logger.log_commit('DrawingStateMachine', entity_type, len(previous.points), result is not None)
        if self.state is not previous:
            self.preview = None
            self.updated.emit()
        if result is not None:
            self.finished.emit(result)
        return result

    def rescale(self, factor: float):
        """Re-project the path and preview after a zoom change"""
        if isinstance(self.state, Drawing):
            self.state = Drawing(self.state.mode, tuple(p.scaled(factor) for p in self.state.points))
        if self.preview is not None:
            self.preview = SnapResult(self.preview.point.scaled(factor), self.preview.snapped, self.preview.source)

    def cancel(self):
        if self.is_drawing:
            debug_logger.debug('DrawingStateMachine', "Path cancelled", {'count': len(self.points)})
        self.state = cancel(self.state)
        self.preview = None
        self.updated.emit()
