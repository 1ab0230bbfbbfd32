from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Mapping, Optional, TypeVar

from .constants import (
    ARROW_GAP, CONNECTOR_OFFSET, DAY_WIDTH, DEFAULT_SHEET_NAME, DOCUMENT_KEY,
    EMPTY_WINDOW_MONTHS, LABEL_MIN_WIDTH, LEAD_PADDING_DAYS, PLACEHOLDER_DAYS,
    ROW_HEIGHT, TRAIL_PADDING_DAYS,
)
from .visibility import CollapseStrategy

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class GanttConfig:
    """Layout constants plus the settings of the served page."""

    day_width: int = DAY_WIDTH
    row_height: int = ROW_HEIGHT
    placeholder_days: int = PLACEHOLDER_DAYS
    lead_padding_days: int = LEAD_PADDING_DAYS
    trail_padding_days: int = TRAIL_PADDING_DAYS
    empty_window_months: int = EMPTY_WINDOW_MONTHS
    connector_offset: int = CONNECTOR_OFFSET
    arrow_gap: int = ARROW_GAP
    label_min_width: int = LABEL_MIN_WIDTH
    collapse_strategy: CollapseStrategy = CollapseStrategy.SINGLE_LEVEL
    sheet_name: str = DEFAULT_SHEET_NAME
    storage_dir: Path = Path("gantt-chart-files")
    document_key: str = DOCUMENT_KEY
    host: str = "127.0.0.1"
    port: int = 8050
    debug: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GanttConfig":
        env = os.environ if environ is None else environ
        base = cls()
        return replace(
            base,
            storage_dir=Path(env.get("GANTT_STORAGE_DIR", str(base.storage_dir))),
            document_key=env.get("GANTT_DOCUMENT_KEY", base.document_key),
            day_width=_read(env, "GANTT_DAY_WIDTH", int, base.day_width),
            collapse_strategy=_read(env, "GANTT_COLLAPSE_STRATEGY", CollapseStrategy, base.collapse_strategy),
            host=env.get("GANTT_HOST", base.host),
            port=_read(env, "GANTT_PORT", int, base.port),
            debug=_read(env, "GANTT_DEBUG", _parse_bool, base.debug),
        )


def _read(env: Mapping[str, str], name: str, parse: Callable[[str], T], default: T) -> T:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return parse(raw.strip())
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %r", name, raw, default)
        return default


def _parse_bool(raw: str) -> bool:
    value = raw.lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ValueError(raw)
