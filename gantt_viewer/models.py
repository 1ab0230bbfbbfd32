"""Data models shared across the Gantt viewer."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional, Tuple, Union

from .constants import DUE_SOON_DAYS
from .schema import TYPE_PROJECT, TYPE_SUBTASK, TYPE_TASK


class TaskType(str, Enum):
    PROJECT = TYPE_PROJECT
    TASK = TYPE_TASK
    SUBTASK = TYPE_SUBTASK
    OTHER = ""

    @classmethod
    def from_text(cls, text: str) -> "TaskType":
        for member in (cls.PROJECT, cls.TASK, cls.SUBTASK):
            if text == member.value:
                return member
        return cls.OTHER


class Urgency(str, Enum):
    NORMAL = "normal"
    DUE_SOON = "due-soon"
    OVERDUE = "overdue"

    @classmethod
    def from_remaining(cls, remaining_days: Optional[int]) -> "Urgency":
        if remaining_days is None:
            return cls.NORMAL
        if remaining_days < 0:
            return cls.OVERDUE
        if remaining_days <= DUE_SOON_DAYS:
            return cls.DUE_SOON
        return cls.NORMAL


@dataclass
class Task:
    """One spreadsheet row."""

    id: str
    sequence_index: int
    level: int = 0
    name: str = ""
    type_text: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    duration_days: Optional[int] = None
    remaining_days: Optional[int] = None
    assigned_to: str = ""
    dependencies: str = ""
    status: str = ""
    description: str = ""
    project_id: Optional[str] = None
    # nearest enclosing Project with a smaller level (Project rows only)
    parent_project_id: Optional[str] = None

    @property
    def type(self) -> TaskType:
        return TaskType.from_text(self.type_text)

    @property
    def is_project(self) -> bool:
        return self.type is TaskType.PROJECT

    @property
    def urgency(self) -> Urgency:
        return Urgency.from_remaining(self.remaining_days)

    def has_dates(self) -> bool:
        return self.start_date is not None or self.end_date is not None


@dataclass(frozen=True)
class TimelineRange:
    min_date: date
    max_date: date

    @property
    def total_days(self) -> int:
        return (self.max_date - self.min_date).days

    def day_index(self, day: date) -> int:
        return (day - self.min_date).days


@dataclass(frozen=True)
class BarGeometry:
    start_days: int
    duration_days: int
    left: int
    width: int
    # only one of the two dates was present
    placeholder: bool = False

    @property
    def right(self) -> int:
        return self.left + self.width


@dataclass(frozen=True)
class RowLayout:
    task: Task
    top: int
    height: int
    visible: bool
    bar: Optional[BarGeometry] = None

    @property
    def center(self) -> int:
        return self.top + self.height // 2


@dataclass
class ChartLayout:
    timeline: TimelineRange
    rows: List[RowLayout] = field(default_factory=list)
    width: int = 0
    height: int = 0

    def visible_rows(self) -> List[RowLayout]:
        return [row for row in self.rows if row.visible]


@dataclass(frozen=True)
class Connector:
    """Elbow path from the right edge of one bar to the left edge of another."""

    from_id: str
    to_id: str
    points: Tuple[Tuple[int, int], ...]
    title: str = ""

    def path(self) -> str:
        head, *rest = self.points
        return " ".join([f"M {head[0]} {head[1]}"] + [f"L {x} {y}" for x, y in rest])


# =========================
# Dependency parse results
# =========================

@dataclass(frozen=True)
class ParsedByParenId:
    """`Name (12), Other (15)`: ids taken from parenthesized digits."""

    ids: Tuple[str, ...]


@dataclass(frozen=True)
class ParsedByBareCsv:
    """`12, 15`: purely numeric comma-separated fields."""

    ids: Tuple[str, ...]


@dataclass(frozen=True)
class Unparsed:
    raw: str = ""

    @property
    def ids(self) -> Tuple[str, ...]:
        return ()


ParsedDependencies = Union[ParsedByParenId, ParsedByBareCsv, Unparsed]
