"""Helpers to export the per-run letter legend in JSON/CSV formats."""
from __future__ import annotations

from typing import Any, Dict, List
import csv
import io

from openpyxl.utils import get_column_letter

from .types import ColumnMapping, RemapResult

_FIELDS: tuple[str, ...] = (
    "column",
    "header",
    "value",
    "letter",
    "is_key",
)


def _header_label(column: int) -> str:
    return get_column_letter(column + 1)


def _column_entry(m: ColumnMapping) -> Dict[str, Any]:
    return {
        "column": m.column,
        "header": _header_label(m.column),
        "key_value": m.key_value,
        "key_letter": m.key_letter,
        "codes": dict(m.codes),
        "collisions": [list(g) for g in m.collisions],
    }


def to_json(result: RemapResult) -> Dict[str, Any]:
    """Return a JSON-safe payload describing every column's letter assignment."""

    columns = [_column_entry(result.mappings[c]) for c in sorted(result.mappings)]
    return {
        "answer_key": result.answer_key,
        "respondents": result.respondents,
        "columns": columns,
    }


def to_csv(result: RemapResult) -> str:
    """Render the legend as CSV with a fixed header, one row per (column, value)."""

    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=_FIELDS)
    writer.writeheader()
    for col in sorted(result.mappings):
        m = result.mappings[col]
        rows: List[Dict[str, Any]] = []
        for value, letter in m.codes.items():
            rows.append({
                "column": col,
                "header": _header_label(col),
                "value": value,
                "letter": letter,
                "is_key": int(value == m.key_value),
            })
        writer.writerows(rows)
    return buf.getvalue()


__all__ = ["to_json", "to_csv"]
