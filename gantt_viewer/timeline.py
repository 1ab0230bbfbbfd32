from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, List, Optional

import pandas as pd

from .constants import MAX_DECORATED_DAYS, MONTH_NAMES
from .models import Task, TimelineRange

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonthSpan:
    label: str
    start_index: int
    days: int
    width: int


@dataclass(frozen=True)
class DayCell:
    index: int
    day: date
    weekend: bool
    today: bool


@dataclass(frozen=True)
class GridLine:
    left: int
    week: bool
    month: bool


def shift_days(day: date, days: int) -> date:
    """`day + days`, pinned to the calendar limits instead of overflowing."""
    try:
        return day + timedelta(days=days)
    except OverflowError:
        return date.max if days > 0 else date.min


def next_month(day: date) -> Optional[date]:
    """First day of the month after `day`, or None past the last representable month."""
    if day.month < 12:
        return date(day.year, day.month + 1, 1)
    if day.year >= date.max.year:
        return None
    return date(day.year + 1, 1, 1)


class TimelineCalculator:
    """Visible date window and the day -> pixel mapping."""

    def __init__(
        self,
        day_width: int,
        lead_padding_days: int,
        trail_padding_days: int,
        empty_window_months: int,
        max_decorated_days: int = MAX_DECORATED_DAYS,
    ):
        self.day_width = day_width
        self.lead_padding_days = lead_padding_days
        self.trail_padding_days = trail_padding_days
        self.empty_window_months = empty_window_months
        self.max_decorated_days = max_decorated_days

    @classmethod
    def from_config(cls, config) -> "TimelineCalculator":
        return cls(
            day_width=config.day_width,
            lead_padding_days=config.lead_padding_days,
            trail_padding_days=config.trail_padding_days,
            empty_window_months=config.empty_window_months,
        )

    def compute(self, tasks: Iterable[Task], today: Optional[date] = None) -> TimelineRange:
        today = today or date.today()
        dates = [d for t in tasks for d in (t.start_date, t.end_date) if d is not None]
        if not dates:
            max_date = (pd.Timestamp(today) + pd.DateOffset(months=self.empty_window_months)).date()
            logger.debug("no dated tasks, default window %s..%s", today, max_date)
            return TimelineRange(min_date=today, max_date=max_date)
        return TimelineRange(
            min_date=shift_days(min(dates), -self.lead_padding_days),
            max_date=shift_days(max(dates), self.trail_padding_days),
        )

    # -------- mapping --------
    def offset(self, timeline: TimelineRange, day: date) -> int:
        return timeline.day_index(day) * self.day_width

    def width(self, timeline: TimelineRange) -> int:
        return timeline.total_days * self.day_width

    def scroll_to_today(self, timeline: TimelineRange, viewport_width: int, today: Optional[date] = None) -> int:
        """Horizontal scroll position that centers today in the viewport."""
        today = today or date.today()
        return max(0, self.offset(timeline, today) - viewport_width // 2)

    # -------- header / grid --------
    def decorated(self, timeline: TimelineRange) -> bool:
        if timeline.total_days <= self.max_decorated_days:
            return True
        logger.debug("%d-day window, day decorations skipped", timeline.total_days)
        return False

    def day_cells(self, timeline: TimelineRange, today: Optional[date] = None) -> List[DayCell]:
        today = today or date.today()
        if not self.decorated(timeline):
            return []
        cells = []
        for i in range(timeline.total_days):
            day = timeline.min_date + timedelta(days=i)
            cells.append(DayCell(index=i, day=day, weekend=day.weekday() >= 5, today=day == today))
        return cells

    def month_spans(self, timeline: TimelineRange) -> List[MonthSpan]:
        spans: List[MonthSpan] = []
        total = timeline.total_days
        first, start = timeline.min_date, 0
        while start < total:
            following = next_month(first)
            end = total if following is None else min(timeline.day_index(following), total)
            spans.append(MonthSpan(
                label=f"{MONTH_NAMES[first.month - 1]} {first.year}",
                start_index=start,
                days=end - start,
                width=(end - start) * self.day_width,
            ))
            if following is None:
                break
            first, start = following, end
        return spans

    def grid_lines(self, timeline: TimelineRange) -> List[GridLine]:
        if not self.decorated(timeline):
            return []
        lines = []
        for i in range(timeline.total_days):
            day = timeline.min_date + timedelta(days=i)
            lines.append(GridLine(left=i * self.day_width, week=day.weekday() == 0, month=day.day == 1))
        return lines
