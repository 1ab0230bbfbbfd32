from __future__ import annotations

import io
import logging
import zipfile
from datetime import date, datetime
from pathlib import Path
from typing import Any, List, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from .constants import DEFAULT_SHEET_NAME

logger = logging.getLogger(__name__)

Source = Union[bytes, str, Path]


class ExcelTaskRepository:
    """Read a workbook into the 2-D cell array the task builder expects."""

    def __init__(self, sheet_name: str = DEFAULT_SHEET_NAME):
        self.sheet_name = sheet_name

    def load(self, source: Source) -> Tuple[str, List[List[Any]]]:
        """Return (sheet name, rows); row 0 holds the headers."""
        handle = io.BytesIO(source) if isinstance(source, (bytes, bytearray)) else Path(source)
        try:
            with pd.ExcelFile(handle) as xls:
                name = self.sheet_name if self.sheet_name in xls.sheet_names else xls.sheet_names[0]
                df = xls.parse(name, header=None, dtype=object)
        except (ValueError, OSError, KeyError, IndexError, zipfile.BadZipFile) as exc:
            raise ValueError(f"Unreadable workbook: {exc}") from exc

        rows = self.to_rows(df)
        logger.info("read sheet %r: %d rows", name, len(rows))
        return name, rows

    @staticmethod
    def to_rows(df: pd.DataFrame) -> List[List[Any]]:
        d = df.astype(object)
        d = d.where(pd.notna(d), None)
        return d.values.tolist()


def serialize_rows(rows: Sequence[Sequence[Any]]) -> List[List[Any]]:
    """JSON-safe copy of a cell array: dates as ISO strings, numpy scalars unwrapped."""
    return [[_json_cell(cell) for cell in row] for row in rows]


def _json_cell(cell: Any) -> Any:
    if cell is None:
        return None
    if isinstance(cell, (pd.Timestamp, datetime)):
        return None if pd.isna(cell) else cell.date().isoformat()
    if isinstance(cell, date):
        return cell.isoformat()
    if isinstance(cell, np.generic):
        cell = cell.item()
    if isinstance(cell, float) and np.isnan(cell):
        return None
    return cell
