from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""Error log line model.

Exactly five keys per JSON line: timestamp, file, row, error_type, message.
``row`` is the 1-based data row of a rejected record, or FILE_LEVEL_ROW when
the whole file failed.
"""

__all__ = [
    "ErrorRecord",
    "FILE_LEVEL_ROW",
    "FILE_READ_ERROR",
    "PARSE_ERROR",
    "MAPPING_ERROR",
    "VALIDATION_ERROR",
]

FILE_LEVEL_ROW = -1

FILE_READ_ERROR = "FILE_READ_ERROR"
PARSE_ERROR = "PARSE_ERROR"
MAPPING_ERROR = "MAPPING_ERROR"
VALIDATION_ERROR = "VALIDATION_ERROR"


def _utc_stamp() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class ErrorRecord:
    timestamp: str  # ISO8601 UTC, 'Z' suffix
    file: str
    row: int
    error_type: str  # one of the *_ERROR constants
    message: str  # validation errors joined by '; '

    @classmethod
    def create(cls, file: str, row: int, error_type: str, message: str) -> ErrorRecord:
        return cls(timestamp=_utc_stamp(), file=file, row=row, error_type=error_type, message=message)

    @property
    def is_file_level(self) -> bool:
        return self.row == FILE_LEVEL_ROW

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
