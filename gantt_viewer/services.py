from __future__ import annotations

import logging
import re
from typing import Dict, List, Sequence, Tuple

from .models import (
    ChartLayout, Connector, ParsedByBareCsv, ParsedByParenId, ParsedDependencies,
    RowLayout, Task, Unparsed,
)

logger = logging.getLogger(__name__)

_PAREN_ID = re.compile(r"\((\d+)\)")
_BARE_ID = re.compile(r"^\d+$")


class DependencyService:
    """Parse free-text predecessor fields and route connectors between bars."""

    def __init__(self, connector_offset: int, arrow_gap: int):
        self.connector_offset = connector_offset
        self.arrow_gap = arrow_gap

    @classmethod
    def from_config(cls, config) -> "DependencyService":
        return cls(config.connector_offset, config.arrow_gap)

    # -------- parsing --------
    @staticmethod
    def parse(text: str) -> ParsedDependencies:
        """`"Design (3), Build (5)"` wins over `"3, 5"`; anything else is Unparsed."""
        text = (text or "").strip()
        if not text:
            return Unparsed(text)

        paren_ids = _PAREN_ID.findall(text)
        if paren_ids:
            return ParsedByParenId(tuple(paren_ids))

        bare_ids = tuple(part.strip() for part in text.split(",") if _BARE_ID.match(part.strip()))
        if bare_ids:
            return ParsedByBareCsv(bare_ids)
        return Unparsed(text)

    def iter_dependencies(self, tasks: Sequence[Task]) -> List[Tuple[Task, Task]]:
        """(predecessor, successor) pairs; ids that match no task are dropped."""
        by_id: Dict[str, Task] = {}
        for task in tasks:
            if task.id and task.id not in by_id:
                by_id[task.id] = task

        deps: List[Tuple[Task, Task]] = []
        for task in tasks:
            for dep_id in self.parse(task.dependencies).ids:
                predecessor = by_id.get(dep_id)
                if predecessor is None:
                    logger.debug("task %r: dependency %r does not resolve, dropped", task.id, dep_id)
                    continue
                deps.append((predecessor, task))
        return deps

    # -------- routing --------
    def connectors(self, layout: ChartLayout) -> List[Connector]:
        """
        Regenerate every connector from the layout's own geometry.

        Edges whose endpoints lack a bar, lack the needed date or are hidden
        produce nothing; calling this repeatedly always yields the same list.
        """
        rows: Dict[int, RowLayout] = {row.task.sequence_index: row for row in layout.rows}
        drawn: List[Connector] = []
        for predecessor, successor in self.iter_dependencies([row.task for row in layout.rows]):
            if predecessor.end_date is None or successor.start_date is None:
                continue
            from_row = rows[predecessor.sequence_index]
            to_row = rows[successor.sequence_index]
            if not (from_row.visible and to_row.visible):
                continue
            if from_row.bar is None or to_row.bar is None:
                continue
            drawn.append(self.route(from_row, to_row))
        return drawn

    def route(self, from_row: RowLayout, to_row: RowLayout) -> Connector:
        from_x, from_y = from_row.bar.right, from_row.center
        to_x, to_y = to_row.bar.left, to_row.center
        mid_x = from_x + self.connector_offset
        points = (
            (from_x, from_y),
            (mid_x, from_y),
            (mid_x, to_y),
            (to_x - self.arrow_gap, to_y),
        )
        return Connector(
            from_id=from_row.task.id,
            to_id=to_row.task.id,
            points=points,
            title=f"{from_row.task.name} → {to_row.task.name}",
        )
