from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .cells import Cell, RawTable

"""Parsed table models.

Phase: parsing pipeline output. A ParsedTable is the grid produced by the
tabular parser together with everything the structure detector, column
analyzer and quality scorer derived from it.
"""

__all__ = [
    "FileType",
    "ColumnType",
    "StructureInfo",
    "ColumnProfile",
    "QualityReport",
    "FileMetadata",
    "ParsedTable",
]


class FileType(Enum):
    """Input container detected for a file."""
    WORKBOOK = "workbook"
    DELIMITED = "delimited"


class ColumnType(Enum):
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    MIXED = "mixed"


@dataclass(frozen=True)
class StructureInfo:
    """Header / data boundaries of a RawTable (all indices 0-based).

    Invariants:
    - data_start_row <= data_end_row + 1 (empty data range allowed)
    - header_row_index set -> data_start_row == header_row_index + 1
    """
    data_start_row: int
    data_end_row: int
    empty_row_indices: frozenset[int] = frozenset()
    header_row_index: int | None = None
    merged_regions: tuple[str, ...] | None = None  # A1 ranges, workbook input only

    def __post_init__(self) -> None:
        if self.data_start_row > self.data_end_row + 1:
            raise ValueError(
                f"data_start_row {self.data_start_row} beyond data_end_row {self.data_end_row} + 1"
            )
        if self.header_row_index is not None and self.data_start_row != self.header_row_index + 1:
            raise ValueError("data_start_row must follow header_row_index")


@dataclass(frozen=True)
class ColumnProfile:
    index: int
    name: str
    inferred_type: ColumnType
    sample_values: tuple[Cell, ...]  # first 10 non-null values
    null_count: int
    unique_count: int


@dataclass(frozen=True)
class QualityReport:
    score: int  # 0-100
    issues: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class FileMetadata:
    file_type: FileType
    encoding: str
    has_headers: bool
    row_count: int  # data rows
    column_count: int
    structure: StructureInfo
    columns: tuple[ColumnProfile, ...]
    quality: QualityReport
    delimiter: str | None = None  # delimited input only
    sheet_count: int | None = None  # workbook input only
    active_sheet: str | None = None  # workbook input only


@dataclass(frozen=True)
class ParsedTable:
    """Output of ``parse_file``: headers, data rows and metadata."""
    headers: tuple[str, ...]
    rows: RawTable  # data rows only
    metadata: FileMetadata
    raw: RawTable = ()  # full grid as read
