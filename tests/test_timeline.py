from datetime import date

from gantt_viewer.config import GanttConfig
from gantt_viewer.models import Task, TimelineRange
from gantt_viewer.timeline import TimelineCalculator


def _calc():
    return TimelineCalculator.from_config(GanttConfig())


def test_empty_task_list_defaults_to_six_months_from_today():
    timeline = _calc().compute([], today=date(2024, 3, 10))

    assert timeline == TimelineRange(date(2024, 3, 10), date(2024, 9, 10))


def test_six_month_default_uses_calendar_months():
    timeline = _calc().compute([], today=date(2024, 8, 31))

    assert timeline.max_date == date(2025, 2, 28)


def test_padding_around_observed_dates():
    tasks = [
        Task(id="1", sequence_index=0, start_date=date(2024, 1, 1)),
        Task(id="2", sequence_index=1, end_date=date(2024, 2, 10)),
        Task(id="3", sequence_index=2),
    ]
    timeline = _calc().compute(tasks, today=date(2030, 1, 1))

    assert timeline.min_date == date(2023, 12, 2)
    assert timeline.max_date == date(2024, 4, 10)
    assert timeline.total_days == 130


def test_padding_is_pinned_to_calendar_limits():
    tasks = [
        Task(id="1", sequence_index=0, start_date=date(1, 1, 10), end_date=date(2024, 1, 1)),
        Task(id="2", sequence_index=1, end_date=date(9999, 12, 31)),
    ]
    timeline = _calc().compute(tasks, today=date(2024, 1, 1))

    assert timeline.min_date == date.min
    assert timeline.max_date == date.max


def test_open_ended_task_keeps_decorations_bounded():
    calc = _calc()
    tasks = [Task(id="1", sequence_index=0, start_date=date(2024, 1, 1), end_date=date(9999, 12, 31))]
    timeline = calc.compute(tasks, today=date(2024, 1, 1))

    assert calc.day_cells(timeline) == []
    assert calc.grid_lines(timeline) == []
    spans = calc.month_spans(timeline)
    assert spans[-1].label == "Dic 9999"
    assert sum(s.days for s in spans) == timeline.total_days


def test_day_index_and_offset():
    calc = _calc()
    timeline = TimelineRange(date(2024, 1, 1), date(2024, 2, 1))

    assert timeline.day_index(date(2024, 1, 11)) == 10
    assert calc.offset(timeline, date(2024, 1, 11)) == 300
    assert calc.width(timeline) == 31 * 30


def test_month_spans_cover_whole_timeline():
    calc = _calc()
    timeline = TimelineRange(date(2024, 1, 20), date(2024, 3, 5))
    spans = calc.month_spans(timeline)

    assert [s.label for s in spans] == ["Ene 2024", "Feb 2024", "Mar 2024"]
    assert [s.days for s in spans] == [12, 29, 4]
    assert sum(s.width for s in spans) == calc.width(timeline)


def test_day_cells_and_grid_lines():
    calc = _calc()
    timeline = TimelineRange(date(2024, 1, 27), date(2024, 2, 3))
    cells = calc.day_cells(timeline, today=date(2024, 1, 29))

    assert [c.weekend for c in cells] == [True, True, False, False, False, False, False]
    assert [c.today for c in cells].index(True) == 2

    lines = calc.grid_lines(timeline)
    assert lines[2].week  # Monday 29th
    assert lines[5].month  # 1st of February
    assert lines[3].left == 90


def test_scroll_to_today_is_clamped():
    calc = _calc()
    timeline = TimelineRange(date(2024, 1, 1), date(2024, 6, 1))

    assert calc.scroll_to_today(timeline, 1000, today=date(2024, 1, 3)) == 0
    assert calc.scroll_to_today(timeline, 1000, today=date(2024, 3, 1)) == 60 * 30 - 500
