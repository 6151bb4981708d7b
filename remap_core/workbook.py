"""Read the first sheet of an uploaded workbook and write the processed one back."""
from __future__ import annotations

from io import BytesIO
from typing import List, Optional, Sequence
import logging
import zipfile

from openpyxl import Workbook, load_workbook
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import InvalidFileException

from .types import Cell, Row, Table
from .config import SHEET_NAME


log = logging.getLogger(__name__)


class WorkbookError(ValueError):
    """The uploaded bytes could not be decoded as a workbook."""


def _trim(row: Sequence[object]) -> Row:
    cells = [Cell.of(v) for v in row]
    while cells and cells[-1].is_empty:
        cells.pop()
    return cells


def read_table(data: bytes) -> Table:
    """Decode the first worksheet into rows of cells.

    Trailing empty cells are dropped from each row and trailing empty rows
    from the sheet, so row lengths follow the data actually present.
    """
    try:
        wb = load_workbook(BytesIO(data), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as e:
        raise WorkbookError(f"not a readable .xlsx workbook: {e}") from e

    try:
        if not wb.worksheets:
            raise WorkbookError("workbook has no sheets")
        ws = wb.worksheets[0]
        # stored <dimension> can be stale; scan the sheet data instead
        ws.reset_dimensions()
        rows: Table = [_trim(r) for r in ws.iter_rows(values_only=True)]
    finally:
        wb.close()

    while rows and not rows[-1]:
        rows.pop()
    log.info("read %d row(s) from sheet %r", len(rows), ws.title)
    return rows


def write_table(table: Table, widths: Optional[List[int]] = None, sheet_name: str = SHEET_NAME) -> bytes:
    """Encode ``table`` as a single-sheet workbook and return the file bytes."""
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name

    for row in table:
        ws.append([Cell.of(v).raw() for v in row])

    for idx, width in enumerate(widths or [], start=1):
        ws.column_dimensions[get_column_letter(idx)].width = width

    output = BytesIO()
    wb.save(output)
    return output.getvalue()


__all__ = ["WorkbookError", "read_table", "write_table"]
