from __future__ import annotations

from io import BytesIO
from typing import Any, Iterable, List

import pytest
from openpyxl import Workbook


class FixedChoice:
    """Random source stub: returns the queued letters in order, then repeats the last."""

    def __init__(self, *letters: str):
        self.letters = list(letters) or ["A"]
        self.calls = 0

    def choice(self, seq):
        letter = self.letters[min(self.calls, len(self.letters) - 1)]
        self.calls += 1
        assert letter in seq
        return letter


def build_quiz_table(
    *,
    keys: list[str] | None = None,
    answers: list[list[Any]] | None = None,
) -> list[list[Any]]:
    """Header row of answer keys followed by one row per respondent."""

    keys = keys if keys is not None else ["Paris", "4", "Blue"]
    answers = answers if answers is not None else [
        ["Paris", "4", "Blue"],
        ["London", "4", "Red"],
        ["Rome", "5", None],
    ]
    header: list[Any] = ["Name", "Class", *keys]
    rows: list[list[Any]] = [header]
    for idx, ans in enumerate(answers):
        rows.append([f"Student {idx + 1}", "X", *ans])
    return rows


def build_xlsx(rows: Iterable[Iterable[Any]], *, extra_sheet: bool = False) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Form Responses 1"
    for row in rows:
        ws.append(list(row))
    if extra_sheet:
        other = wb.create_sheet("Ignored")
        other.append(["Should", "not", "be", "read"])
    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()


def values(table) -> List[List[Any]]:
    return [[cell.text() for cell in row] for row in table]


@pytest.fixture
def quiz_table() -> list[list[Any]]:
    return build_quiz_table()


@pytest.fixture
def quiz_xlsx(quiz_table) -> bytes:
    return build_xlsx(quiz_table)
