# remap_core/remapper.py
from __future__ import annotations
from typing import Any, Dict, Iterable, List, Sequence
import logging

from .types import Cell, ColumnMapping, EMPTY, RemapResult, Row, Table
from .mapping import build_column_mapping
from .layout import column_widths
from .config import (
    LETTERS,
    ID_COLUMNS,
    SCORE_LABEL,
    COMBINED_HEADER,
    STRICT_SHAPE,
    OVERFLOW,
)


log = logging.getLogger(__name__)


class TableShapeError(ValueError):
    """Raised in strict mode when the sheet does not have the expected layout."""


def combined_answer(codes: Iterable[str]) -> str:
    """Concatenate the codes of one row, keeping only A-E letters."""
    return "".join(c for c in codes if c in LETTERS)


def score(codes: Sequence[str], key_codes: Sequence[str]) -> str:
    """``"<correct>/<total>"`` with column-wise comparison against the key row."""
    correct = sum(1 for got, want in zip(codes, key_codes) if got in LETTERS and got == want)
    return f"{correct}/{len(combined_answer(codes))}"


def _as_rows(table: Iterable[Iterable[Any]]) -> Table:
    rows = [[Cell.of(v) for v in (row or [])] for row in table]
    if rows:
        # blank cells past the header do not make a row wider
        width = len(rows[0])
        for row in rows[1:]:
            while len(row) > width and row[-1].is_empty:
                row.pop()
    return rows


def _pad(row: Row, width: int) -> Row:
    if len(row) >= width:
        return list(row)
    return list(row) + [EMPTY] * (width - len(row))


class AnswerKeyRemapper:
    def __init__(
        self,
        rng: Any = None,
        combined_header: bool = COMBINED_HEADER,
        score_label: str = SCORE_LABEL,
        strict: bool = STRICT_SHAPE,
        overflow: str = OVERFLOW,
    ):
        self.rng = rng
        self.combined_header = combined_header
        self.score_label = score_label
        self.strict = strict
        self.overflow = overflow

    @classmethod
    def from_config(cls, cfg: Dict[str, Any], rng: Any = None) -> "AnswerKeyRemapper":
        return cls(
            rng=rng,
            combined_header=bool(cfg.get("COMBINED_HEADER", COMBINED_HEADER)),
            score_label=str(cfg.get("SCORE_LABEL") or SCORE_LABEL),
            strict=bool(cfg.get("STRICT_SHAPE", STRICT_SHAPE)),
            overflow=str(cfg.get("OVERFLOW") or OVERFLOW),
        )

    def _check_shape(self, rows: Table) -> None:
        if not rows:
            raise TableShapeError("sheet is empty")
        width = len(rows[0])
        if width <= ID_COLUMNS:
            raise TableShapeError(
                f"header has {width} column(s); expected {ID_COLUMNS} identity columns plus at least one question"
            )
        for idx, row in enumerate(rows[1:], start=2):
            if len(row) > width:
                raise TableShapeError(f"row {idx} has {len(row)} cells but the header only has {width}")

    def build_mappings(self, rows: Table) -> Dict[int, ColumnMapping]:
        header = rows[0]
        body = rows[1:]
        mappings: Dict[int, ColumnMapping] = {}
        for col in range(ID_COLUMNS, len(header)):
            values = [row[col] if col < len(row) else EMPTY for row in body]
            mappings[col] = build_column_mapping(
                values,
                key_value=header[col],
                rng=self.rng,
                overflow=self.overflow,
                column=col,
            )
        return mappings

    def transform(self, table: Iterable[Iterable[Any]]) -> RemapResult:
        """Rewrite the sheet with letter codes and append the answer and score columns.

        The caller's table is not modified. Row 0 is the answer key; columns
        before ``ID_COLUMNS`` pass through untouched.
        """
        rows = _as_rows(table)
        if self.strict:
            self._check_shape(rows)
        if not rows:
            return RemapResult(table=[])

        width = max(len(rows[0]), ID_COLUMNS)
        header = _pad(rows[0], width)
        questions = range(ID_COLUMNS, width)
        mappings = self.build_mappings(rows)

        key_codes = [mappings[c].key_letter or "" for c in questions]
        answer_key = combined_answer(key_codes)
        out_header: Row = header[:ID_COLUMNS] + [Cell.code(k) for k in key_codes]
        out_header.append(Cell.code(answer_key) if self.combined_header else EMPTY)
        out_header.append(Cell("text", self.score_label))
        out: Table = [out_header]

        scores: List[str] = []
        overflowed = 0
        for raw in rows[1:]:
            row = _pad(raw, width)
            codes = [mappings[c].lookup(row[c]) for c in questions]
            result = score(codes, key_codes)
            scores.append(result)
            extra = row[width:]
            if extra:
                overflowed += 1
            out.append(
                row[:ID_COLUMNS]
                + [Cell.code(c) for c in codes]
                + [Cell.code(combined_answer(codes)), Cell("text", result)]
                + extra
            )

        if overflowed:
            log.warning("%d row(s) wider than the header; extra cells moved after the score column", overflowed)
        log.info("remapped %d respondent row(s) across %d question column(s)", len(scores), len(key_codes))

        return RemapResult(
            table=out,
            mappings=mappings,
            answer_key=answer_key,
            scores=scores,
            column_widths=column_widths(out),
        )


__all__ = ["AnswerKeyRemapper", "TableShapeError", "combined_answer", "score"]
