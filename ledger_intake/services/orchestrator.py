from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import UTC, date, datetime
from pathlib import Path

from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import IntakeConfig
from ..models.error_record import FILE_READ_ERROR, MAPPING_ERROR, PARSE_ERROR
from ..models.financial import AccountRef, EntityRef
from ..models.processing_result import FileStat, ProcessingResult
from ..parsing.errors import ParsingError
from ..parsing.pipeline import parse_file
from ..validation.batch import validate_batch
from ..validation.duplicates import detect_duplicates
from ..validation.record import sanitize_fact
from .extraction import MappingError, extract_candidate_rows
from .progress import ProgressTracker
from .report import generate_validation_report

"""Service orchestration for directory intake runs.

process_all scans the source directory and runs every file through
parse -> extract -> sanitize -> validate -> duplicate detection -> report.
A file that cannot be read, parsed or mapped is recorded as failed and the run
continues with the next file. Rejected records go to the error log.
"""

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Fatal error that prevents a run from starting."""


def scan_input_files(directory: Path, extensions: Sequence[str]) -> list[Path]:
    """List input files in ``directory`` (non-recursive), sorted by name.

    Raises:
        ProcessingError: If the directory doesn't exist or can't be read
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")
    wanted = {ext.lower() for ext in extensions}
    try:
        return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in wanted)
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def _failed_stat(path: Path, error: str, elapsed: float, error_log: ErrorLogBuffer, error_type: str) -> FileStat:
    logger.warning(f"{path.name}: {error}")
    error_log.file_failed(path.name, error_type, error)
    return FileStat(
        file_name=path.name,
        status="failed",
        total_records=0,
        valid_records=0,
        invalid_records=0,
        duplicate_groups=0,
        warnings=0,
        quality_score=None,
        elapsed_seconds=elapsed,
        error=error,
    )


def process_file(
    path: Path,
    config: IntakeConfig,
    error_log: ErrorLogBuffer,
    existing_entities: Sequence[EntityRef] = (),
    existing_accounts: Sequence[AccountRef] = (),
    today: date | None = None,
) -> FileStat:
    """Run one input file through the whole pipeline."""
    start = datetime.now(UTC)

    def elapsed() -> float:
        return (datetime.now(UTC) - start).total_seconds()

    try:
        content = path.read_bytes()
    except OSError as e:
        return _failed_stat(path, f"cannot read file: {e}", elapsed(), error_log, FILE_READ_ERROR)
    try:
        parsed = parse_file(content, path.name, config.parsing)
    except ParsingError as e:
        return _failed_stat(path, str(e), elapsed(), error_log, PARSE_ERROR)
    try:
        rows = extract_candidate_rows(parsed, config.columns, config.defaults)
    except MappingError as e:
        return _failed_stat(path, str(e), elapsed(), error_log, MAPPING_ERROR)

    row_numbers = [row_number for row_number, _ in rows]
    candidates = [sanitize_fact(candidate) for _, candidate in rows]

    batch = validate_batch(
        candidates, config.validation, existing_entities, existing_accounts, today=today
    )
    duplicates = detect_duplicates(candidates)

    for item in batch.invalid_data:
        error_log.record_rejected(path.name, row_numbers[item.index], item.errors)

    summary = batch.summary
    logger.info(
        f"{path.name}: records={summary.total} valid={summary.valid} invalid={summary.invalid} "
        f"duplicates={len(duplicates.duplicates)} quality={parsed.metadata.quality.score}"
    )
    return FileStat(
        file_name=path.name,
        status="success",
        total_records=summary.total,
        valid_records=summary.valid,
        invalid_records=summary.invalid,
        duplicate_groups=len(duplicates.duplicates),
        warnings=summary.warnings,
        quality_score=parsed.metadata.quality.score,
        elapsed_seconds=elapsed(),
        report=generate_validation_report(batch, duplicates),
    )


def process_all(
    config: IntakeConfig,
    existing_entities: Sequence[EntityRef] = (),
    existing_accounts: Sequence[AccountRef] = (),
    *,
    error_log: ErrorLogBuffer | None = None,
    today: date | None = None,
) -> ProcessingResult:
    """Process every input file in the configured directory.

    Raises:
        ProcessingError: For fatal errors that prevent processing
    """
    start_time = datetime.now(UTC)
    error_log = error_log if error_log is not None else ErrorLogBuffer()
    file_paths = scan_input_files(Path(config.source_directory), config.extensions)

    file_stats: list[FileStat] = []
    with ProgressTracker(len(file_paths), description="Validating files") as progress:
        for file_path in file_paths:
            progress.start_file(file_path)
            stat = process_file(
                file_path, config, error_log, existing_entities, existing_accounts, today
            )
            file_stats.append(stat)
            progress.finish_file(stat)

    counts = error_log.counts_by_type()
    log_path = error_log.flush()
    if log_path is not None:
        detail = " ".join(f"{t}={n}" for t, n in sorted(counts.items()))
        logger.info(f"error log written: {log_path} ({detail})")

    end_time = datetime.now(UTC)
    return ProcessingResult(
        success_files=sum(1 for s in file_stats if s.status == "success"),
        failed_files=sum(1 for s in file_stats if s.status == "failed"),
        total_records=sum(s.total_records for s in file_stats),
        valid_records=sum(s.valid_records for s in file_stats),
        invalid_records=sum(s.invalid_records for s in file_stats),
        duplicate_groups=sum(s.duplicate_groups for s in file_stats),
        warnings=sum(s.warnings for s in file_stats),
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_stats=file_stats,
    )
