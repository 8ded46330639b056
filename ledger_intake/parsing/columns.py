from __future__ import annotations

from collections.abc import Callable, Sequence

from ..models.cells import DEFAULT_DATE_FORMATS, Cell, CellKind, RawTable, infer_value_kind, is_blank
from ..models.table import ColumnProfile, ColumnType

"""Column analysis: inferred type, samples, null and unique counts.

Type inference looks at the first 100 non-null values of a column through a
``KindClassifier`` (``infer_value_kind`` by default). One kind maps to that
column type, several kinds make the column ``mixed``, no values make it
``text``.
"""

__all__ = [
    "KindClassifier",
    "analyze_columns",
    "infer_column_type",
]

KindClassifier = Callable[[Cell, Sequence[str]], CellKind]

SAMPLE_SIZE = 10
TYPE_SAMPLE_SIZE = 100

_KIND_TO_TYPE = {
    CellKind.TEXT: ColumnType.TEXT,
    CellKind.NUMBER: ColumnType.NUMBER,
    CellKind.DATE: ColumnType.DATE,
    CellKind.BOOLEAN: ColumnType.BOOLEAN,
}


def infer_column_type(
    values: Sequence[Cell],
    date_formats: Sequence[str] = DEFAULT_DATE_FORMATS,
    classifier: KindClassifier = infer_value_kind,
) -> ColumnType:
    kinds = {classifier(v, date_formats) for v in values[:TYPE_SAMPLE_SIZE]}
    kinds.discard(CellKind.NULL)
    if not kinds:
        return ColumnType.TEXT
    if len(kinds) > 1:
        return ColumnType.MIXED
    return _KIND_TO_TYPE[kinds.pop()]


def analyze_columns(
    headers: Sequence[str],
    rows: RawTable,
    date_formats: Sequence[str] = DEFAULT_DATE_FORMATS,
    classifier: KindClassifier = infer_value_kind,
) -> tuple[ColumnProfile, ...]:
    """Profile every header column over the data rows."""
    profiles: list[ColumnProfile] = []
    for index, name in enumerate(headers):
        values = [
            row[index] for row in rows
            if index < len(row) and not is_blank(row[index])
        ]
        profiles.append(
            ColumnProfile(
                index=index,
                name=name,
                inferred_type=infer_column_type(values, date_formats, classifier),
                sample_values=tuple(values[:SAMPLE_SIZE]),
                null_count=len(rows) - len(values),
                unique_count=len(set(values)),
            )
        )
    return tuple(profiles)
