"""Spreadsheet-driven Gantt chart viewer."""
from __future__ import annotations

from .config import GanttConfig
from .session import GanttSession
from .visibility import CollapseStrategy, VisibilityController

__all__ = ["GanttConfig", "GanttSession", "CollapseStrategy", "VisibilityController"]
