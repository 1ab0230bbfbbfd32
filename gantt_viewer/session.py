from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .builder import TaskModelBuilder, projects_by_id
from .config import GanttConfig
from .layout import LayoutEngine
from .models import ChartLayout, Connector, Task, TimelineRange
from .services import DependencyService
from .timeline import TimelineCalculator
from .visibility import VisibilityController

logger = logging.getLogger(__name__)


class GanttSession:
    """
    State of one rendered chart: the task list and its visibility map.

    Owned by whoever renders the chart and passed explicitly to the layout
    engine and dependency resolver, so several charts can coexist. Layout
    and connectors are recomputed synchronously on load and on every
    visibility transition.
    """

    def __init__(self, config: Optional[GanttConfig] = None, today: Optional[date] = None):
        self.config = config or GanttConfig()
        self.today = today
        self.visibility = VisibilityController(self.config.collapse_strategy)
        self.builder = TaskModelBuilder(self.visibility)
        self.timeline_calc = TimelineCalculator.from_config(self.config)
        self.engine = LayoutEngine.from_config(self.config)
        self.dep = DependencyService.from_config(self.config)

        self.title: str = ""
        self.tasks: List[Task] = []
        self.projects: Dict[str, Task] = {}
        self.timeline: TimelineRange = self.timeline_calc.compute([], self._today())
        self.layout: ChartLayout = ChartLayout(timeline=self.timeline)
        self.connectors: List[Connector] = []
        self.visibility.subscribe(self.relayout)

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[Sequence[Any]],
        config: Optional[GanttConfig] = None,
        visibility: Optional[Mapping[str, bool]] = None,
        title: str = "",
        today: Optional[date] = None,
    ) -> "GanttSession":
        session = cls(config, today=today)
        session.load(rows, title=title)
        if visibility:
            session.visibility.restore(visibility)
        return session

    def _today(self) -> date:
        return self.today or date.today()

    # -------- document lifecycle --------
    def load(self, rows: Sequence[Sequence[Any]], title: str = "") -> None:
        """Replace the task list; the visibility map is rebuilt from scratch."""
        self.title = title
        self.tasks = self.builder.build(rows)
        self.projects = projects_by_id(self.tasks)
        self.timeline = self.timeline_calc.compute(self.tasks, self._today())
        self.relayout()

    def reset(self) -> None:
        self.load([])

    def relayout(self) -> None:
        self.layout = self.engine.compute(self.tasks, self.timeline, self.visibility, self.projects)
        self.redraw_dependencies()

    def redraw_dependencies(self) -> List[Connector]:
        self.connectors = self.dep.connectors(self.layout)
        logger.debug("%d connectors drawn", len(self.connectors))
        return self.connectors

    # -------- controller shortcuts --------
    def toggle(self, project_id: str) -> bool:
        return self.visibility.toggle(project_id)

    def expand_all(self) -> None:
        self.visibility.expand_all()

    def collapse_all(self) -> None:
        self.visibility.collapse_all()

    def scroll_to_today(self, viewport_width: int) -> int:
        return self.timeline_calc.scroll_to_today(self.timeline, viewport_width, self._today())
