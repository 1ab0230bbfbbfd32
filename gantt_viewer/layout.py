from __future__ import annotations

from typing import Mapping, Optional, Sequence

from .models import BarGeometry, ChartLayout, RowLayout, Task, TimelineRange
from .visibility import VisibilityController


class LayoutEngine:
    """
    Per-row vertical position and per-task bar geometry.

    Row slots are fixed at `sequence_index * row_height`; collapsed rows keep
    their slot and are only flagged not visible.
    """

    def __init__(self, day_width: int, row_height: int, placeholder_days: int):
        self.day_width = day_width
        self.row_height = row_height
        self.placeholder_days = placeholder_days

    @classmethod
    def from_config(cls, config) -> "LayoutEngine":
        return cls(config.day_width, config.row_height, config.placeholder_days)

    def bar(self, task: Task, timeline: TimelineRange) -> Optional[BarGeometry]:
        start, end = task.start_date, task.end_date
        if start is not None and end is not None:
            start_days = timeline.day_index(start)
            duration = max(1, (end - start).days + 1)
            placeholder = False
        elif start is not None:
            start_days = timeline.day_index(start)
            duration = self.placeholder_days
            placeholder = True
        elif end is not None:
            duration = self.placeholder_days
            start_days = timeline.day_index(end) - duration
            placeholder = True
        else:
            return None

        return BarGeometry(
            start_days=start_days,
            duration_days=duration,
            left=start_days * self.day_width,
            width=duration * self.day_width,
            placeholder=placeholder,
        )

    def compute(
        self,
        tasks: Sequence[Task],
        timeline: TimelineRange,
        visibility: VisibilityController,
        projects: Mapping[str, Task],
    ) -> ChartLayout:
        rows = [
            RowLayout(
                task=task,
                top=task.sequence_index * self.row_height,
                height=self.row_height,
                visible=visibility.is_visible(task, projects),
                bar=self.bar(task, timeline),
            )
            for task in tasks
        ]
        return ChartLayout(
            timeline=timeline,
            rows=rows,
            width=timeline.total_days * self.day_width,
            height=len(tasks) * self.row_height,
        )
