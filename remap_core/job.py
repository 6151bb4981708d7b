# remap_core/job.py
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional
import logging, threading

from .types import JobStatus, RemapResult
from .remapper import AnswerKeyRemapper
from .workbook import read_table, write_table
from .layout import output_filename
from .config import GENERIC_ERROR, SHEET_NAME


log = logging.getLogger(__name__)


class ProcessingError(RuntimeError):
    """Single user-facing failure for anything that goes wrong in a run."""

    def __init__(self, message: str = GENERIC_ERROR):
        super().__init__(message)
        self.message = message


class JobBusyError(RuntimeError):
    pass


@dataclass
class JobOutput:
    filename: str
    content: bytes
    result: RemapResult


class RemapJob:
    """Decode -> remap -> encode for one uploaded workbook at a time."""

    def __init__(self, remapper: Optional[AnswerKeyRemapper] = None, sheet_name: str = SHEET_NAME):
        self.remapper = remapper or AnswerKeyRemapper()
        self.sheet_name = sheet_name
        self.status: JobStatus = JobStatus.IDLE
        self.filename: Optional[str] = None
        self.error: Optional[str] = None
        self._lock = threading.Lock()

    def snapshot(self) -> dict[str, Any]:
        return {"status": self.status.value, "filename": self.filename, "error": self.error}

    def reset(self) -> None:
        with self._lock:
            if self.status is JobStatus.PROCESSING:
                raise JobBusyError("processing in progress")
            self.status = JobStatus.IDLE
            self.filename = None
            self.error = None

    def _begin(self) -> None:
        with self._lock:
            if self.status is JobStatus.PROCESSING:
                raise JobBusyError("processing in progress")
            self.status = JobStatus.PROCESSING
            self.filename = None
            self.error = None

    def run(self, data: bytes, now: Optional[datetime] = None, remapper: Optional[AnswerKeyRemapper] = None) -> JobOutput:
        self._begin()
        done = False
        try:
            table = read_table(data)
            result = (remapper or self.remapper).transform(table)
            content = write_table(result.table, result.column_widths, sheet_name=self.sheet_name)
            filename = output_filename(now)
            done = True
        except Exception as e:
            log.exception("Error processing file")
            raise ProcessingError() from e
        finally:
            # never left in PROCESSING, whatever escaped the run
            if done:
                self.filename = filename
                self.status = JobStatus.SUCCEEDED
            else:
                self.error = GENERIC_ERROR
                self.status = JobStatus.FAILED
        log.info("processed %d respondent(s) into %s", result.respondents, filename)
        return JobOutput(filename=filename, content=content, result=result)
