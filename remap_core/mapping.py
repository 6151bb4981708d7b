# remap_core/mapping.py
from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional
import logging, random

from .types import Cell, ColumnMapping
from .config import LETTERS, OVERFLOW_MODES


log = logging.getLogger(__name__)


class ColumnOverflowError(ValueError):
    """More distinct answers in a column than free letters, with overflow="error"."""

    def __init__(self, column: int | None, distinct: int, capacity: int):
        self.column = column
        self.distinct = distinct
        self.capacity = capacity
        where = f"column {column}" if column is not None else "column"
        super().__init__(f"{where} has {distinct} distinct answers but only {capacity} letters are free")


def distinct_values(values: Iterable[Any]) -> List[str]:
    """Stringified non-empty values in first-seen order."""
    seen: Dict[str, None] = {}
    for v in values:
        txt = Cell.of(v).text()
        if txt == "":
            continue
        seen.setdefault(txt, None)
    return list(seen)


def _collisions(codes: Dict[str, str], key_text: Optional[str]) -> List[List[str]]:
    by_letter: Dict[str, List[str]] = {}
    for txt, letter in codes.items():
        if txt == key_text:
            continue
        by_letter.setdefault(letter, []).append(txt)
    return [group for group in by_letter.values() if len(group) > 1]


def build_column_mapping(
    values: Iterable[Any],
    key_value: Any = None,
    rng: Any = None,
    overflow: str = "wrap",
    column: int | None = None,
) -> ColumnMapping:
    """Assign a letter code to every distinct answer in one question column.

    With a key the key letter is drawn uniformly from A-E and the other four
    letters go to the remaining answers in first-seen order, cycling modulo 4.
    Without a key (blank header cell) answers take A-E in order, modulo 5.
    Cycling gives two answers the same letter; those groups are reported in
    ``collisions``.
    """
    if overflow not in OVERFLOW_MODES:
        raise ValueError(f"unknown overflow mode: {overflow!r}")
    rng = rng if rng is not None else random
    key_text = Cell.of(key_value).text() or None
    uniques = distinct_values(values)

    if key_text is None:
        letters = list(LETTERS)
        key_letter = None
        others = uniques
        codes: Dict[str, str] = {}
    else:
        key_letter = rng.choice(LETTERS)
        letters = [l for l in LETTERS if l != key_letter]
        others = [v for v in uniques if v != key_text]
        codes = {key_text: key_letter}

    if len(others) > len(letters):
        if overflow == "error":
            raise ColumnOverflowError(column, len(others), len(letters))
        log.warning(
            "column %s: %d distinct answers for %d free letters, codes will repeat",
            column, len(others), len(letters),
        )

    for i, txt in enumerate(others):
        codes[txt] = letters[i % len(letters)]

    return ColumnMapping(
        column=column if column is not None else -1,
        key_value=key_text,
        key_letter=key_letter,
        codes=codes,
        collisions=_collisions(codes, key_text),
    )


__all__ = ["ColumnOverflowError", "build_column_mapping", "distinct_values"]
