from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from ..models.cells import RawTable
from ..models.table import ColumnProfile, ColumnType, QualityReport, StructureInfo

"""Quality scoring for parsed tables.

The score starts at 100 and every finding subtracts a fixed or capped penalty.
Penalties are independent of each other; the total is floored at 0.
"""

__all__ = [
    "score_quality",
]

NO_DATA_PENALTY = 50
NO_HEADER_PENALTY = 10
EMPTY_COLUMN_PENALTY = 5
INCONSISTENT_ROW_PENALTY = 2
INCONSISTENT_ROW_CAP = 30
MIXED_COLUMN_PENALTY = 3
EMPTY_ROW_CAP = 10
DUPLICATE_HEADER_PENALTY = 5


def score_quality(
    headers: Sequence[str],
    rows: RawTable,
    has_headers: bool,
    columns: Sequence[ColumnProfile],
    structure: StructureInfo,
) -> QualityReport:
    issues: list[str] = []
    warnings: list[str] = []
    penalty = 0

    if not rows:
        issues.append("No data rows found")
        penalty += NO_DATA_PENALTY

    if not has_headers:
        warnings.append("No headers detected - using auto-generated column names")
        penalty += NO_HEADER_PENALTY

    empty_columns = [c for c in columns if c.null_count == len(rows)]
    if empty_columns:
        warnings.append(f"{len(empty_columns)} completely empty columns found")
        penalty += len(empty_columns) * EMPTY_COLUMN_PENALTY

    inconsistent = sum(1 for row in rows if len(row) != len(headers))
    if inconsistent:
        issues.append(f"{inconsistent} rows have inconsistent column count")
        penalty += min(inconsistent * INCONSISTENT_ROW_PENALTY, INCONSISTENT_ROW_CAP)

    mixed = [c for c in columns if c.inferred_type is ColumnType.MIXED]
    if mixed:
        warnings.append(f"{len(mixed)} columns have mixed data types")
        penalty += len(mixed) * MIXED_COLUMN_PENALTY

    empty_rows = len(structure.empty_row_indices)
    if empty_rows:
        warnings.append(f"{empty_rows} empty rows found")
        penalty += min(empty_rows, EMPTY_ROW_CAP)

    duplicated = [name for name, count in Counter(headers).items() if count > 1]
    if duplicated:
        warnings.append(f"Duplicate headers found: {', '.join(duplicated)}")
        penalty += len(duplicated) * DUPLICATE_HEADER_PENALTY

    return QualityReport(
        score=max(0, 100 - penalty),
        issues=tuple(issues),
        warnings=tuple(warnings),
    )
