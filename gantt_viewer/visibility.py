from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Dict, Iterable, List, Mapping, Optional

from .models import Task

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class CollapseStrategy(str, Enum):
    # only the direct `project_id` is consulted; nested projects never hide
    SINGLE_LEVEL = "single-level"
    # every project up the `parent_project_id` chain must be expanded
    TRANSITIVE = "transitive"


class VisibilityController:
    """
    Expanded/collapsed flag per Project id.

    Every transition notifies the subscribed listeners, which is how the
    render session knows to relayout and redraw connectors. The map is
    cleared only when a new document is loaded.
    """

    def __init__(self, strategy: CollapseStrategy = CollapseStrategy.SINGLE_LEVEL):
        self.strategy = strategy
        self._states: Dict[str, bool] = {}
        self._listeners: List[Listener] = []

    # -------- state --------
    def register(self, project_id: str) -> None:
        self._states[project_id] = True

    def clear(self) -> None:
        self._states.clear()

    @property
    def states(self) -> Dict[str, bool]:
        return dict(self._states)

    @property
    def project_ids(self) -> List[str]:
        return list(self._states)

    def is_expanded(self, project_id: str) -> bool:
        return self._states.get(project_id, True)

    def restore(self, states: Mapping[str, bool]) -> None:
        """Re-apply a previously saved map; ids unknown to this document are ignored."""
        changed = False
        for project_id, expanded in states.items():
            if project_id in self._states and self._states[project_id] != bool(expanded):
                self._states[project_id] = bool(expanded)
                changed = True
        if changed:
            self._notify()

    # -------- transitions --------
    def toggle(self, project_id: str) -> bool:
        if project_id not in self._states:
            logger.warning("toggle: unknown project id %r", project_id)
            return False
        self._states[project_id] = not self._states[project_id]
        logger.debug("project %s -> %s", project_id, "expanded" if self._states[project_id] else "collapsed")
        self._notify()
        return self._states[project_id]

    def expand_all(self) -> None:
        self._set_all(True)

    def collapse_all(self) -> None:
        self._set_all(False)

    def _set_all(self, expanded: bool) -> None:
        for project_id in self._states:
            self._states[project_id] = expanded
        self._notify()

    # -------- listeners --------
    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    # -------- visibility rule --------
    def is_visible(self, task: Task, projects: Mapping[str, Task]) -> bool:
        if self.strategy is CollapseStrategy.SINGLE_LEVEL:
            if task.is_project or not task.project_id:
                return True
            return self.is_expanded(task.project_id)

        if task.is_project:
            return self._chain_expanded(task.parent_project_id, projects)
        if not task.project_id:
            return True
        return self._chain_expanded(task.project_id, projects)

    def _chain_expanded(self, project_id: Optional[str], projects: Mapping[str, Task]) -> bool:
        seen = set()
        while project_id and project_id not in seen:
            if not self.is_expanded(project_id):
                return False
            seen.add(project_id)
            parent = projects.get(project_id)
            project_id = parent.parent_project_id if parent is not None else None
        return True

    def visible_indices(self, tasks: Iterable[Task], projects: Mapping[str, Task]) -> List[int]:
        return [t.sequence_index for t in tasks if self.is_visible(t, projects)]
