from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path

from ..models.error_record import FILE_LEVEL_ROW, VALIDATION_ERROR, ErrorRecord

"""Run error log.

Rejected records and files that could not be processed are collected during a
run and written once, as JSON Lines, to ``logs/errors-YYYYMMDD-HHMMSS.log``
(UTC stamp of the first write). Nothing is created for a clean run.
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    """Collects ErrorRecords for one run; ``flush`` appends them to the log file."""

    def __init__(self, logs_dir: Path | None = None) -> None:
        self._logs_dir = logs_dir or LOGS_DIR
        self._pending: list[ErrorRecord] = []
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"errors-{stamp}.log"
        return self._file_path

    @property
    def records(self) -> tuple[ErrorRecord, ...]:
        """Records not yet flushed."""
        return tuple(self._pending)

    def append(self, record: ErrorRecord) -> None:
        self._pending.append(record)

    def file_failed(self, file_name: str, error_type: str, message: str) -> ErrorRecord:
        record = ErrorRecord.create(file_name, FILE_LEVEL_ROW, error_type, message)
        self.append(record)
        return record

    def record_rejected(self, file_name: str, row: int, errors: Sequence[str]) -> ErrorRecord:
        record = ErrorRecord.create(file_name, row, VALIDATION_ERROR, "; ".join(errors))
        self.append(record)
        return record

    def counts_by_type(self) -> Counter[str]:
        return Counter(r.error_type for r in self._pending)

    def __len__(self) -> int:
        return len(self._pending)

    def flush(self) -> Path | None:
        """Append pending records to the log file; None when there was nothing to write."""
        if not self._pending:
            return None
        path = self.file_path
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as f:
            f.writelines(r.to_json_line() + "\n" for r in self._pending)
        self._pending.clear()
        return path
