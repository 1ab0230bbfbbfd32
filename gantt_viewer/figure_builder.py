from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import plotly.graph_objects as go

from .constants import (
    COLOR_CONNECTOR, COLOR_DUE_SOON, COLOR_OVERDUE, COLOR_PLACEHOLDER_OPACITY,
    COLOR_PROJECT, COLOR_SUBTASK, COLOR_TASK, COLOR_TODAY, ICON_COLLAPSED,
    ICON_EXPANDED, UI,
)
from .models import ChartLayout, Connector, RowLayout, Task, TaskType, Urgency
from .timeline import TimelineCalculator
from .visibility import VisibilityController

MAX_MONTH_TICKS = 120


def format_date(value: Optional[date]) -> str:
    return value.strftime("%d/%m/%Y") if value else ""


def hover_text(task: Task) -> str:
    lines = [f"<b>{task.name}</b>"]
    if task.description:
        lines.append(f"{UI['tip_description']} {task.description}")
    if task.assigned_to:
        lines.append(f"{UI['tip_assigned']} {task.assigned_to}")
    if task.start_date:
        lines.append(f"{UI['tip_start']} {format_date(task.start_date)}")
    if task.end_date:
        lines.append(f"{UI['tip_end']} {format_date(task.end_date)}")
    if task.duration_days:
        lines.append(f"{UI['tip_duration']} {task.duration_days} días")
    if task.remaining_days is not None:
        if task.remaining_days < 0:
            remaining = f"Vencido hace {abs(task.remaining_days)} días"
        else:
            remaining = f"{task.remaining_days} días restantes"
        lines.append(f"{UI['tip_remaining']} {remaining}")
    if task.status:
        lines.append(f"{UI['tip_status']} {task.status}")
    if task.dependencies:
        lines.append(f"{UI['tip_dependencies']} {task.dependencies}")
    return "<br>".join(lines)


def bar_color(task: Task) -> str:
    urgency = task.urgency
    if urgency is Urgency.OVERDUE:
        return COLOR_OVERDUE
    if urgency is Urgency.DUE_SOON:
        return COLOR_DUE_SOON
    if task.type is TaskType.PROJECT:
        return COLOR_PROJECT
    if task.type is TaskType.SUBTASK:
        return COLOR_SUBTASK
    return COLOR_TASK


def task_table_rows(layout: ChartLayout, visibility: VisibilityController) -> List[Dict[str, Any]]:
    """Left-panel rows for the visible tasks, in sequence order."""
    out: List[Dict[str, Any]] = []
    for row in layout.visible_rows():
        t = row.task
        name = ("    " * t.level) + t.name
        if t.is_project and t.id:
            icon = ICON_EXPANDED if visibility.is_expanded(t.id) else ICON_COLLAPSED
            name = f"{icon} {name}"
        out.append({
            "id": t.id,
            "index": t.sequence_index,
            "type": t.type.value or "other",
            "urgency": t.urgency.value,
            "name": name,
            "days": t.duration_days or "",
            "start": format_date(t.start_date),
            "end": format_date(t.end_date),
            "remaining": "" if t.remaining_days is None else t.remaining_days,
            "assigned": t.assigned_to or "-",
        })
    return out


class GanttFigureBuilder:
    """
    Plotly rendering of a computed layout:
      - bars from the layout engine's geometry (placeholder bars faded)
      - elbow connectors from the dependency service, with arrowheads
      - weekend bands, month ticks and the today line from the timeline

    Coordinates are the layout's own px-equivalent units; rows keep their
    reserved slot, so hidden rows leave their band empty.
    """

    def __init__(self, timeline_calc: TimelineCalculator, label_min_width: int):
        self.timeline_calc = timeline_calc
        self.label_min_width = label_min_width

    # -------- helpers --------
    def add_weekend_vrects(self, fig: go.Figure, layout: ChartLayout, today: date) -> None:
        day_width = self.timeline_calc.day_width
        for cell in self.timeline_calc.day_cells(layout.timeline, today):
            if not cell.weekend:
                continue
            fig.add_vrect(
                x0=cell.index * day_width,
                x1=(cell.index + 1) * day_width,
                fillcolor="rgba(200, 200, 200, 0.18)",
                line_width=0,
                layer="below",
            )

    def add_grid_lines(self, fig: go.Figure, layout: ChartLayout) -> None:
        for line in self.timeline_calc.grid_lines(layout.timeline):
            if line.month:
                fig.add_vline(x=line.left, line_width=1, line_color="rgba(0,0,0,0.25)", layer="below")
            elif line.week:
                fig.add_vline(x=line.left, line_width=1, line_color="rgba(0,0,0,0.08)", layer="below")

    def add_today_line(self, fig: go.Figure, layout: ChartLayout, today: date) -> None:
        if not (layout.timeline.min_date <= today <= layout.timeline.max_date):
            return
        x_today = self.timeline_calc.offset(layout.timeline, today)
        fig.add_shape(
            type="line",
            x0=x_today, x1=x_today,
            y0=0, y1=1,
            xref="x", yref="paper",
            line=dict(color=COLOR_TODAY, width=2),
            layer="above",
        )
        fig.add_annotation(
            x=x_today, y=1,
            xref="x", yref="paper",
            text=UI["today_label"],
            showarrow=False,
            font=dict(color=COLOR_TODAY),
            yanchor="bottom",
        )

    def _bar_trace(self, rows: Sequence[RowLayout], placeholder: bool) -> Optional[go.Bar]:
        if not rows:
            return None
        lefts = np.array([r.bar.left for r in rows])
        widths = np.array([r.bar.width for r in rows])
        return go.Bar(
            orientation="h",
            base=lefts,
            x=widths,
            y=[r.center for r in rows],
            width=[r.height * 0.64 for r in rows],
            marker=dict(color=[bar_color(r.task) for r in rows], opacity=COLOR_PLACEHOLDER_OPACITY if placeholder else 1.0),
            text=[r.task.name if r.bar.width > self.label_min_width else "" for r in rows],
            textposition="inside",
            insidetextanchor="start",
            customdata=np.stack([[r.task.id for r in rows], [r.task.sequence_index for r in rows]], axis=-1),
            hovertext=[hover_text(r.task) for r in rows],
            hoverinfo="text",
            showlegend=False,
            meta={"kind": "placeholder" if placeholder else "bar"},
        )

    # -------- main --------
    def build(
        self,
        layout: ChartLayout,
        connectors: Sequence[Connector],
        today: Optional[date] = None,
        title: str = "",
    ) -> go.Figure:
        today = today or date.today()
        fig = go.Figure()

        # 1) Bars
        drawn = [r for r in layout.visible_rows() if r.bar is not None]
        for placeholder in (False, True):
            trace = self._bar_trace([r for r in drawn if r.bar.placeholder == placeholder], placeholder)
            if trace is not None:
                fig.add_trace(trace)

        # 2) Connectors (line + arrowhead)
        for conn in connectors:
            xs = [x for x, _ in conn.points]
            ys = [y for _, y in conn.points]
            fig.add_trace(
                go.Scatter(
                    x=xs, y=ys,
                    mode="lines",
                    line=dict(width=1.5, color=COLOR_CONNECTOR),
                    hovertext=conn.title,
                    hoverinfo="text",
                    showlegend=False,
                    meta={"kind": "dep", "from": conn.from_id, "to": conn.to_id},
                )
            )
        if connectors:
            fig.add_trace(
                go.Scatter(
                    x=[c.points[-1][0] for c in connectors],
                    y=[c.points[-1][1] for c in connectors],
                    mode="markers",
                    marker=dict(size=8, symbol="triangle-right", color=COLOR_CONNECTOR),
                    hoverinfo="skip",
                    showlegend=False,
                    meta={"kind": "arrowhead"},
                )
            )

        # 3) Calendar decorations
        self.add_weekend_vrects(fig, layout, today)
        self.add_grid_lines(fig, layout)
        self.add_today_line(fig, layout, today)

        # Layout
        spans = self.timeline_calc.month_spans(layout.timeline)
        spans = spans[:: max(1, len(spans) // MAX_MONTH_TICKS)]
        visible = layout.visible_rows()
        fig.update_xaxes(
            range=[0, max(layout.width, 1)],
            tickmode="array",
            tickvals=[s.start_index * self.timeline_calc.day_width for s in spans],
            ticktext=[s.label for s in spans],
            side="top",
            showgrid=True,
        )
        fig.update_yaxes(
            range=[max(layout.height, 1), 0],
            tickmode="array",
            tickvals=[r.center for r in visible],
            ticktext=[r.task.name for r in visible],
            showgrid=False,
        )
        fig.update_layout(
            title=title or UI["title_default"],
            height=max(520, layout.height + 160),
            barmode="overlay",
            plot_bgcolor="white",
            margin=dict(l=20, r=20, t=80, b=20),
            uirevision="gantt",
        )
        return fig
