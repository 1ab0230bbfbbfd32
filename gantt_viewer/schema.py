from __future__ import annotations

from typing import Dict, List


class TaskSchema:
    """Spreadsheet column headers (matched by exact string)."""

    COL_LEVEL = "Level"
    COL_ID = "ID"
    COL_NAME = "Task Name"
    COL_DESCRIPTION = "Descripción"
    COL_START = "Start Date"
    COL_END = "End Date"
    COL_DAYS = "Días"
    COL_REMAINING = "Restante"
    COL_ASSIGNED = "Assigned To"
    COL_DEPENDENCIES = "Dependencies"
    COL_STATUS = "Status"
    COL_TYPE = "Type"

    RECOGNIZED: List[str] = [
        COL_LEVEL, COL_ID, COL_NAME, COL_DESCRIPTION,
        COL_START, COL_END, COL_DAYS, COL_REMAINING,
        COL_ASSIGNED, COL_DEPENDENCIES, COL_STATUS, COL_TYPE,
    ]


def column_indices(headers) -> Dict[str, int]:
    """Map each recognized header to its position; missing headers map to -1."""
    labels = list(headers or [])
    indices: Dict[str, int] = {}
    for col in TaskSchema.RECOGNIZED:
        indices[col] = labels.index(col) if col in labels else -1
    return indices


# =========================
# Type values
# =========================

TYPE_PROJECT = "Project"
TYPE_TASK = "Task"
TYPE_SUBTASK = "Subtask"
