"""
Page Navigation State Machine — exactly one of four views is active.
"""
from __future__ import annotations

from collections import defaultdict
from enum import Enum
from typing import Callable, Dict, List

from notemap.logger import get_logger

log = get_logger("navigation")


class ActiveView(Enum):
    SEARCH = "search"
    UPLOAD = "upload"
    LEARNING = "learning"
    MINDMAP = "mindmap"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    ActiveView.SEARCH: "🔍 Search",
    ActiveView.UPLOAD: "📂 Upload Notes",
    ActiveView.LEARNING: "🧭 Learning Path",
    ActiveView.MINDMAP: "🧠 Mind Map",
}


class NavigationStateMachine:
    """Starts on Search; runs for the whole session, no terminal state."""

    def __init__(self, initial: ActiveView = ActiveView.SEARCH):
        self._active = initial
        self._on_enter: Dict[ActiveView, List[Callable[[], None]]] = defaultdict(list)

    @property
    def active(self) -> ActiveView:
        return self._active

    def on_enter(self, view: ActiveView, callback: Callable[[], None]) -> None:
        self._on_enter[view].append(callback)

    def is_visible(self, view: ActiveView) -> bool:
        return view is self._active

    def navigate(self, view: ActiveView) -> ActiveView:
        """
        Switch to ``view`` on explicit user selection, then run its entry hooks.
        Re-selecting the current view counts as entering it again.
        """
        if not isinstance(view, ActiveView):
            raise TypeError(f"unknown view: {view!r}")
        previous, self._active = self._active, view
        log.info(f"Navigate {previous.value} → {view.value}")
        for callback in self._on_enter[view]:
            callback()
        return self._active
