from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

CellKind = Literal["text", "number", "bool", "date", "empty"]


@dataclass(frozen=True)
class Cell:
    """One decoded spreadsheet value with an explicit kind.

    ``text()`` is the single stringification rule used for mapping keys and
    column widths: empty cells render as ``""``, numbers never carry locale
    separators and integral floats drop their ``.0``.
    """

    kind: CellKind
    value: Any = None

    @classmethod
    def of(cls, raw: Any) -> "Cell":
        if isinstance(raw, Cell):
            return raw
        if raw is None or raw == "":
            return EMPTY
        if isinstance(raw, bool):
            return cls("bool", raw)
        if isinstance(raw, (int, float)):
            return cls("number", raw)
        if isinstance(raw, (datetime, date, time)):
            return cls("date", raw)
        return cls("text", str(raw))

    @classmethod
    def code(cls, letter: str) -> "Cell":
        return cls("text", letter) if letter else EMPTY

    @property
    def is_empty(self) -> bool:
        return self.kind == "empty"

    def text(self) -> str:
        if self.kind == "empty":
            return ""
        if self.kind == "bool":
            return "true" if self.value else "false"
        if self.kind == "number":
            v = self.value
            if isinstance(v, float) and v.is_integer():
                return str(int(v))
            return str(v)
        if self.kind == "date":
            return self.value.isoformat()
        return self.value

    def raw(self) -> Any:
        """Value handed back to the workbook writer."""
        if self.kind == "empty" or (self.kind == "text" and self.value == ""):
            return None
        return self.value


EMPTY = Cell("empty")

Row = List[Cell]
Table = List[Row]


@dataclass
class ColumnMapping:
    column: int
    key_value: Optional[str]
    key_letter: Optional[str]
    codes: Dict[str, str] = field(default_factory=dict)
    collisions: List[List[str]] = field(default_factory=list)

    def lookup(self, value: Any) -> str:
        return self.codes.get(Cell.of(value).text(), "")


@dataclass
class RemapResult:
    table: Table
    mappings: Dict[int, ColumnMapping] = field(default_factory=dict)
    answer_key: str = ""
    scores: List[str] = field(default_factory=list)
    column_widths: List[int] = field(default_factory=list)

    @property
    def respondents(self) -> int:
        return max(0, len(self.table) - 1)


class JobStatus(str, Enum):
    IDLE = "idle"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
