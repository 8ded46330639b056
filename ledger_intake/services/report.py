from __future__ import annotations

import json
from collections import Counter

from ..models.financial import BatchValidationResult, DuplicateGroups
from ..models.processing_result import ProcessingResult
from ..models.table import ParsedTable

"""Plain-text report rendering.

- generate_validation_report: batch validation + duplicate groups
- generate_parsing_report: parsed table metadata and quality
- render_summary_line: one SUMMARY line for a whole intake run

Pure formatting; nothing here logs or writes files.
"""

__all__ = [
    "generate_validation_report",
    "generate_parsing_report",
    "render_summary_line",
    "error_category",
]

MAX_DUPLICATE_GROUPS_SHOWN = 5
CATEGORY_PREFIX_LENGTH = 30
LOW_QUALITY_THRESHOLD = 70
HIGH_QUALITY_THRESHOLD = 90


def _percent(part: int, total: int) -> str:
    if total == 0:
        return "0.0"
    return f"{part / total * 100:.1f}"


def error_category(error: str) -> str:
    """Text before the first colon, or the first 30 characters without one."""
    head, sep, _ = error.partition(":")
    if sep and head:
        return head
    return error[:CATEGORY_PREFIX_LENGTH]


def generate_validation_report(results: BatchValidationResult, duplicates: DuplicateGroups) -> str:
    summary = results.summary
    groups = duplicates.duplicates
    lines: list[str] = ["=== VALIDATION REPORT ===", ""]

    lines += [
        "SUMMARY:",
        f"- Total records: {summary.total}",
        f"- Valid records: {summary.valid} ({_percent(summary.valid, summary.total)}%)",
        f"- Invalid records: {summary.invalid} ({_percent(summary.invalid, summary.total)}%)",
        f"- Total warnings: {summary.warnings}",
        f"- Duplicate groups: {len(groups)}",
        "",
    ]

    if results.invalid_data:
        categories = Counter(
            error_category(error) for item in results.invalid_data for error in item.errors
        )
        lines.append("ERROR CATEGORIES:")
        # most_common keeps first-seen order among equal counts
        for category, count in categories.most_common():
            lines.append(f"- {category}: {count} occurrences")
        lines.append("")

    if groups:
        lines.append("DUPLICATES DETECTED:")
        for index, group in enumerate(groups[:MAX_DUPLICATE_GROUPS_SHOWN], start=1):
            first = group[0]
            lines.append(
                f"{index}. Entity: {first.entity_code or 'N/A'}, Account: {first.account_code or 'N/A'}, "
                f"Date: {first.month}/{first.year}, Value: {first.value} ({len(group)} duplicates)"
            )
        if len(groups) > MAX_DUPLICATE_GROUPS_SHOWN:
            lines.append(f"... and {len(groups) - MAX_DUPLICATE_GROUPS_SHOWN} more duplicate groups")
        lines.append("")

    lines.append("RECOMMENDATIONS:")
    if summary.invalid > 0:
        lines.append(f"- Fix {summary.invalid} invalid records before importing")
    if groups:
        lines.append(f"- Review and resolve {len(groups)} duplicate groups")
    if summary.warnings > 0:
        lines.append(f"- Review {summary.warnings} warnings for data quality issues")
    if summary.valid == summary.total and summary.warnings == 0 and not groups:
        lines.append("- All data is valid and ready for import!")

    return "\n".join(lines) + "\n"


def generate_parsing_report(parsed: ParsedTable) -> str:
    meta = parsed.metadata
    structure = meta.structure
    quality = meta.quality
    lines: list[str] = ["=== FILE PARSING REPORT ===", ""]

    lines.append(f"FILE TYPE: {meta.file_type.value.upper()}")
    lines.append(f"ENCODING: {meta.encoding}")
    if meta.delimiter:
        lines.append(f"DELIMITER: {meta.delimiter!r}")
    if meta.active_sheet:
        lines.append(f"SHEET: {meta.active_sheet} (of {meta.sheet_count})")
    lines += [
        f"ROWS: {meta.row_count}",
        f"COLUMNS: {meta.column_count}",
        f"HEADERS: {'Yes' if meta.has_headers else 'No'}",
        f"QUALITY SCORE: {quality.score}/100",
        "",
    ]

    # rows are reported 1-based
    lines.append("STRUCTURE:")
    if structure.header_row_index is not None:
        lines.append(f"- Header row: {structure.header_row_index + 1}")
    lines.append(f"- Data rows: {structure.data_start_row + 1} to {structure.data_end_row + 1}")
    if structure.empty_row_indices:
        lines.append(f"- Empty rows: {len(structure.empty_row_indices)}")
    if structure.merged_regions:
        lines.append(f"- Merged cells: {', '.join(structure.merged_regions)}")
    lines.append("")

    lines.append("COLUMNS ANALYSIS:")
    for number, col in enumerate(meta.columns, start=1):
        lines.append(f"{number}. {col.name} ({col.inferred_type.value})")
        lines.append(f"   - Null values: {col.null_count}/{meta.row_count}")
        lines.append(f"   - Unique values: {col.unique_count}")
        if col.sample_values:
            samples = ", ".join(
                json.dumps(s, default=str, ensure_ascii=False) for s in col.sample_values[:3]
            )
            lines.append(f"   - Samples: {samples}")
    lines.append("")

    if quality.issues:
        lines.append("ISSUES:")
        lines += [f"- {issue}" for issue in quality.issues]
        lines.append("")
    if quality.warnings:
        lines.append("WARNINGS:")
        lines += [f"- {warning}" for warning in quality.warnings]
        lines.append("")

    lines.append("RECOMMENDATIONS:")
    if quality.score < LOW_QUALITY_THRESHOLD:
        lines.append(f"- Data quality is below acceptable threshold ({quality.score}/100)")
    if quality.issues:
        lines.append(f"- Fix {len(quality.issues)} critical issues before processing")
    if not meta.has_headers:
        lines.append("- Consider adding proper column headers")
    empty_columns = sum(1 for c in meta.columns if c.null_count == meta.row_count)
    if empty_columns:
        lines.append(f"- Remove {empty_columns} empty columns")
    if quality.score >= HIGH_QUALITY_THRESHOLD:
        lines.append("- Data quality is excellent! Ready for processing")

    return "\n".join(lines) + "\n"


def render_summary_line(total_files: int, result: ProcessingResult) -> str:
    """Render the SUMMARY line for an intake run.

    Format:
    SUMMARY files={total}/{total} success={success} failed={failed} records={records}
    valid={valid} invalid={invalid} duplicates={groups} warnings={warnings} elapsed_sec={elapsed}
    """
    if result.elapsed_seconds == int(result.elapsed_seconds):
        elapsed_str = str(int(result.elapsed_seconds))
    elif result.elapsed_seconds < 0.01:
        # avoid scientific notation
        elapsed_str = f"{result.elapsed_seconds:.6f}".rstrip("0").rstrip(".")
    else:
        elapsed_str = f"{result.elapsed_seconds:.3f}".rstrip("0").rstrip(".")

    return (
        f"SUMMARY files={total_files}/{total_files} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"records={result.total_records} "
        f"valid={result.valid_records} "
        f"invalid={result.invalid_records} "
        f"duplicates={result.duplicate_groups} "
        f"warnings={result.warnings} "
        f"elapsed_sec={elapsed_str}"
    )
