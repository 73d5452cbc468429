"""
Input Events - Surface-independent pointer and keyboard events

The canvas widget translates Qt events into these values and hands them to
FloorPlanEngine.dispatch, which keeps the engine testable without a window.
"""

from dataclasses import dataclass
from typing import Any, Union

from drawing.entities import Point


# Key names understood by the engine
KEY_ENTER = "Enter"
KEY_ESCAPE = "Escape"
KEY_DELETE = "Delete"
KEY_BACKSPACE = "Backspace"
KEY_ROTATE = "R"


@dataclass(frozen=True)
class PointerDown:
    point: Point
    shift: bool = False


@dataclass(frozen=True)
class PointerMove:
    point: Point
    buttons_down: bool = False


@dataclass(frozen=True)
class PointerUp:
    point: Point


@dataclass(frozen=True)
class DoubleClick:
    point: Point


@dataclass(frozen=True)
class KeyPress:
    key: str
    shift: bool = False


@dataclass(frozen=True)
class ProductDrop:
    """Catalog drag payload; ``payload`` is raw JSON text or an already parsed dict"""
    payload: Any
    point: Point


InputEvent = Union[PointerDown, PointerMove, PointerUp, DoubleClick, KeyPress, ProductDrop]
