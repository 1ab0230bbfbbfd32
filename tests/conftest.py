from datetime import date

import pytest

from gantt_viewer.schema import TaskSchema


HEADERS = list(TaskSchema.RECOGNIZED)


def make_row(level, task_id, name, start=None, end=None, days=None, remaining=None,
             assigned="", deps="", status="", type_="Task", description=""):
    values = {
        TaskSchema.COL_LEVEL: level,
        TaskSchema.COL_ID: task_id,
        TaskSchema.COL_NAME: name,
        TaskSchema.COL_DESCRIPTION: description,
        TaskSchema.COL_START: start,
        TaskSchema.COL_END: end,
        TaskSchema.COL_DAYS: days,
        TaskSchema.COL_REMAINING: remaining,
        TaskSchema.COL_ASSIGNED: assigned,
        TaskSchema.COL_DEPENDENCIES: deps,
        TaskSchema.COL_STATUS: status,
        TaskSchema.COL_TYPE: type_,
    }
    return [values[h] for h in HEADERS]


@pytest.fixture
def today():
    return date(2024, 1, 16)


@pytest.fixture
def sample_rows():
    """Two projects; Design -> Build -> Unit tests chain plus an unresolvable edge."""
    return [
        HEADERS,
        make_row(0, "1", "Alpha", "2024-01-01", "2024-01-31", 31, 10, "Ana", type_="Project"),
        make_row(1, "2", "Design", date(2024, 1, 2), date(2024, 1, 10), 9, -2, "Luis", status="Done"),
        make_row(1, "3", "Build", "2024-01-12", "2024-01-20", 9, 2, deps="Design (2)"),
        make_row(2, "4", "Unit tests", "2024-01-15", None, deps="3", type_="Subtask"),
        make_row(0, "5", "Beta", type_="Project"),
        make_row(1, "6", "Plan", None, "2024-02-10", deps="2, 99"),
        make_row(1, "7", "Notes"),
    ]


@pytest.fixture
def nested_rows():
    return [
        HEADERS,
        make_row(0, "10", "Program", "2024-03-01", "2024-03-31", type_="Project"),
        make_row(1, "11", "Sub project", "2024-03-01", "2024-03-15", type_="Project"),
        make_row(2, "12", "Leaf", "2024-03-02", "2024-03-05"),
        make_row(0, "13", "Other program", type_="Project"),
    ]
