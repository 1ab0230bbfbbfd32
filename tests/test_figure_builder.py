from datetime import date

from gantt_viewer.figure_builder import GanttFigureBuilder, format_date, hover_text, task_table_rows
from gantt_viewer.session import GanttSession

from .conftest import HEADERS, make_row


def _figure(session):
    builder = GanttFigureBuilder(session.timeline_calc, session.config.label_min_width)
    return builder.build(session.layout, session.connectors, today=session.today, title="Plan")


def _kinds(fig):
    return [(tr.meta or {}).get("kind") for tr in fig.data]


def test_traces_follow_layout(sample_rows, today):
    session = GanttSession.from_rows(sample_rows, today=today)
    fig = _figure(session)

    assert _kinds(fig) == ["bar", "placeholder", "dep", "dep", "arrowhead"]
    bars = fig.data[0]
    assert list(bars.base) == [900, 930, 1230]
    assert list(bars.x) == [930, 270, 270]
    assert list(bars.y) == [14, 42, 70]
    assert fig.layout.title.text == "Plan"


def test_wide_bars_carry_their_name(sample_rows, today):
    fig = _figure(GanttSession.from_rows(sample_rows, today=today))

    assert list(fig.data[0].text) == ["Alpha", "Design", "Build"]
    assert list(fig.data[1].text) == ["Unit tests", "Plan"]


def test_collapsed_rows_are_not_drawn(sample_rows, today):
    session = GanttSession.from_rows(sample_rows, today=today)
    session.collapse_all()
    fig = _figure(session)

    assert _kinds(fig) == ["bar"]
    assert list(fig.data[0].y) == [14]
    assert list(fig.layout.yaxis.ticktext) == ["Alpha", "Beta"]


def test_today_line_and_weekends(sample_rows, today):
    fig = _figure(GanttSession.from_rows(sample_rows, today=today))
    lines = [s for s in fig.layout.shapes if s.type == "line"]

    # 2023-12-02 -> 2024-01-16
    assert lines[-1].x0 == 45 * 30
    assert any(a.text == "HOY" for a in fig.layout.annotations)
    assert len([s for s in fig.layout.shapes if s.type == "rect"]) > 0


def test_empty_session_renders(today):
    fig = _figure(GanttSession.from_rows([], today=today))

    assert _kinds(fig) == []


def test_table_rows(sample_rows, today):
    session = GanttSession.from_rows(sample_rows, today=today)
    session.toggle("5")
    rows = task_table_rows(session.layout, session.visibility)

    assert [r["id"] for r in rows] == ["1", "2", "3", "4", "5"]
    assert rows[0]["name"] == "▼ Alpha"
    assert rows[4]["name"] == "▶ Beta"
    assert rows[1]["name"] == "    Design"
    assert rows[1]["start"] == "02/01/2024"
    assert rows[1]["urgency"] == "overdue"
    assert rows[2]["assigned"] == "-"
    assert rows[4]["days"] == ""


def test_hover_text(sample_rows, today):
    session = GanttSession.from_rows(sample_rows, today=today)
    text = hover_text(session.tasks[1])

    assert "Vencido hace 2 días" in text
    assert "Luis" in text
    assert format_date(None) == ""


def test_open_ended_task_renders(today):
    rows = [HEADERS, make_row(0, "1", "Open ended", "2024-01-01", "9999-12-31")]
    session = GanttSession.from_rows(rows, today=today)
    fig = _figure(session)

    assert session.timeline.max_date == date.max
    assert _kinds(fig) == ["bar"]
    assert len([s for s in fig.layout.shapes if s.type == "rect"]) == 0
    assert len(fig.layout.xaxis.tickvals) <= 2 * 120
