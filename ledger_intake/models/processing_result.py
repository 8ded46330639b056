from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Processing result models for directory intake runs.

FileStat holds the outcome of one input file; ProcessingResult aggregates a
whole run and feeds the SUMMARY line.
"""


@dataclass(frozen=True)
class FileStat:
    """Per-file processing statistics."""
    file_name: str
    status: str  # success/failed
    total_records: int
    valid_records: int
    invalid_records: int
    duplicate_groups: int
    warnings: int
    quality_score: int | None  # None when the file could not be parsed
    elapsed_seconds: float
    report: str | None = None  # validation report text
    error: str | None = None  # parse failure reason


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results for one intake run."""
    success_files: int
    failed_files: int
    total_records: int
    valid_records: int
    invalid_records: int
    duplicate_groups: int
    warnings: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] | None = None
