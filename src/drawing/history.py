"""
Floor Plan History - Linear undo/redo over entity snapshots

Snapshots are the plain dictionaries produced by
``FloorPlanEngine.get_entities()``; restoring one is done with
``FloorPlanEngine.load_entities()``.
"""

import copy
from typing import Any, Dict, List, Optional


class FloorPlanHistory:
    """Keeps at most ``limit`` snapshots. Saving after an undo drops the redo branch."""

    def __init__(self, initial_state: Optional[Dict[str, Any]] = None, limit: int = 50):
        if limit < 1:
            raise ValueError("History limit must be at least 1")
        self.limit = limit
        self._states: List[Dict[str, Any]] = [copy.deepcopy(initial_state or {})]
        self._index = 0

    def save_state(self, state: Dict[str, Any]):
        del self._states[self._index + 1:]
        self._states.append(copy.deepcopy(state))
        if len(self._states) > self.limit:
            self._states.pop(0)
        self._index = len(self._states) - 1

    def undo(self) -> Optional[Dict[str, Any]]:
        if not self.can_undo:
            return None
        self._index -= 1
        return copy.deepcopy(self._states[self._index])

    def redo(self) -> Optional[Dict[str, Any]]:
        if not self.can_redo:
            return None
        self._index += 1
        return copy.deepcopy(self._states[self._index])

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._states) - 1

    @property
    def current_state(self) -> Dict[str, Any]:
        return copy.deepcopy(self._states[self._index])

    def __len__(self):
        return len(self._states)
