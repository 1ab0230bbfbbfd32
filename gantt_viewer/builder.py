from __future__ import annotations

import logging
import math
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from .models import Task
from .schema import TaskSchema, column_indices
from .visibility import VisibilityController

logger = logging.getLogger(__name__)


# =========================
# Cell parsing (never raises)
# =========================

def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def parse_date(value: Any) -> Optional[date]:
    """Native date values pass through; strings go through pandas' parser; anything else is None."""
    if is_blank(value):
        return None
    if isinstance(value, pd.Timestamp):
        return value.date()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        parsed = pd.to_datetime(str(value).strip(), errors="coerce")
    except (TypeError, ValueError, OverflowError):
        return None
    if parsed is None or pd.isna(parsed):
        return None
    return parsed.date()


def parse_int(value: Any) -> Optional[int]:
    if is_blank(value) or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
    try:
        number = pd.to_numeric(value, errors="coerce")
    except (TypeError, ValueError):
        return None
    if pd.isna(number) or not math.isfinite(float(number)):
        return None
    return int(number)


def parse_text(value: Any) -> str:
    if is_blank(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        # numeric ids read back from a workbook as 3.0
        return str(int(value))
    return str(value).strip()


# =========================
# Builder
# =========================

class TaskModelBuilder:
    """
    Turn a 2-D cell array (row 0 = headers) into the ordered task list.

      - headers are matched by exact string; missing columns give defaults
      - blank rows are skipped and do not consume a sequence index
      - each row's project is the nearest preceding Project row
      - Project rows are registered as expanded in the visibility map
    """

    def __init__(self, visibility: VisibilityController):
        self.visibility = visibility

    def build(self, rows: Optional[Sequence[Sequence[Any]]]) -> List[Task]:
        self.visibility.clear()
        rows = list(rows or [])
        if not rows:
            logger.info("empty document: no header row")
            return []

        cols = column_indices(rows[0])
        missing = [name for name, idx in cols.items() if idx < 0]
        if missing:
            logger.debug("columns not present, using defaults: %s", missing)

        tasks: List[Task] = []
        for row_number, row in enumerate(rows[1:], start=1):
            if not row or all(is_blank(cell) for cell in row):
                logger.debug("skipping blank row %d", row_number)
                continue
            task = self._make_task(row, cols, len(tasks))
            if task.is_project:
                if task.id:
                    task.project_id = task.id
                    self.visibility.register(task.id)
                task.parent_project_id = self._parent_project(task, tasks)
            else:
                task.project_id = self._enclosing_project(tasks)
            tasks.append(task)

        logger.info("built %d tasks (%d projects)", len(tasks), len(self.visibility.project_ids))
        return tasks

    def _make_task(self, row: Sequence[Any], cols: Dict[str, int], sequence_index: int) -> Task:
        def cell(col: str) -> Any:
            idx = cols[col]
            if idx < 0 or idx >= len(row):
                return None
            return row[idx]

        level = parse_int(cell(TaskSchema.COL_LEVEL)) or 0
        return Task(
            id=parse_text(cell(TaskSchema.COL_ID)),
            sequence_index=sequence_index,
            level=max(0, level),
            name=parse_text(cell(TaskSchema.COL_NAME)),
            type_text=parse_text(cell(TaskSchema.COL_TYPE)),
            start_date=parse_date(cell(TaskSchema.COL_START)),
            end_date=parse_date(cell(TaskSchema.COL_END)),
            duration_days=parse_int(cell(TaskSchema.COL_DAYS)),
            remaining_days=parse_int(cell(TaskSchema.COL_REMAINING)),
            assigned_to=parse_text(cell(TaskSchema.COL_ASSIGNED)),
            dependencies=parse_text(cell(TaskSchema.COL_DEPENDENCIES)),
            status=parse_text(cell(TaskSchema.COL_STATUS)),
            description=parse_text(cell(TaskSchema.COL_DESCRIPTION)),
        )

    @staticmethod
    def _enclosing_project(built: List[Task]) -> Optional[str]:
        for previous in reversed(built):
            if previous.is_project:
                return previous.id or None
        return None

    @staticmethod
    def _parent_project(project: Task, built: List[Task]) -> Optional[str]:
        # id-less projects are never parents
        for previous in reversed(built):
            if previous.is_project and previous.id and previous.level < project.level:
                return previous.id
        return None


def projects_by_id(tasks: Sequence[Task]) -> Dict[str, Task]:
    """First Project row for each referenceable id."""
    projects: Dict[str, Task] = {}
    for task in tasks:
        if task.is_project and task.id and task.id not in projects:
            projects[task.id] = task
    return projects
