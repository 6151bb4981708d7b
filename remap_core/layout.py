from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional

from .types import Cell
from .config import WIDTH_PADDING, OUTPUT_PREFIX, OUTPUT_EXT, TIMESTAMP_LEN


def column_widths(table: Iterable[Iterable[Any]]) -> List[int]:
    """Display width per column: longest rendered value plus fixed padding."""
    longest: List[int] = []
    for row in table:
        for idx, val in enumerate(row):
            n = len(Cell.of(val).text())
            if idx >= len(longest):
                longest.extend([0] * (idx + 1 - len(longest)))
            if n > longest[idx]:
                longest[idx] = n
    return [n + WIDTH_PADDING for n in longest]


def timestamp(now: Optional[datetime] = None) -> str:
    # 2024-05-01T12:30:45.123+00:00 -> 2024-05-01T1230
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    iso = now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"
    return iso.replace(":", "").replace(".", "")[:TIMESTAMP_LEN]


def output_filename(now: Optional[datetime] = None) -> str:
    return f"{OUTPUT_PREFIX}{timestamp(now)}{OUTPUT_EXT}"
