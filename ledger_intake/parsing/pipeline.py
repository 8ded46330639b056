from __future__ import annotations

import logging

from ..models.cells import Cell, RawTable, infer_value_kind, is_blank
from ..models.config_models import ParsingConfig
from ..models.table import FileMetadata, ParsedTable, StructureInfo
from .columns import KindClassifier, analyze_columns
from .quality import score_quality
from .reader import read_table
from .structure import HeaderStrategy, detect_header_row, detect_structure

"""Parse pipeline: bytes -> ParsedTable.

read_table -> detect_structure -> headers / data rows -> analyze_columns ->
score_quality. Raises ParsingError subclasses for files that cannot be read.
"""

__all__ = [
    "parse_file",
    "extract_headers",
    "extract_data_rows",
]

logger = logging.getLogger(__name__)


def _header_name(cell: Cell, index: int) -> str:
    if is_blank(cell):
        return f"Column_{index + 1}"
    return str(cell).strip()


def extract_headers(table: RawTable, structure: StructureInfo) -> tuple[str, ...]:
    """Header names from the header row, or Column_N names sized on the first data row."""
    if structure.header_row_index is not None:
        row = table[structure.header_row_index]
        return tuple(_header_name(cell, i) for i, cell in enumerate(row))
    if structure.data_start_row < len(table):
        width = len(table[structure.data_start_row])
        return tuple(f"Column_{i + 1}" for i in range(width))
    return ()


def extract_data_rows(table: RawTable, structure: StructureInfo) -> RawTable:
    return table[structure.data_start_row: structure.data_end_row + 1]


def parse_file(
    content: bytes,
    file_name: str,
    config: ParsingConfig | None = None,
    *,
    header_strategy: HeaderStrategy = detect_header_row,
    classifier: KindClassifier = infer_value_kind,
) -> ParsedTable:
    """Parse a workbook or delimited text file held in memory.

    Parameters
    ----------
    content: file bytes (reading the file is the caller's job)
    file_name: used for extension hints only
    config: parsing options; defaults apply when omitted
    header_strategy / classifier: replaceable detection heuristics
    """
    config = config or ParsingConfig()
    logger.debug(f"parsing file: {file_name}")

    read = read_table(content, file_name, config)
    structure = detect_structure(
        read.table, config, merged_regions=read.merged_regions, header_strategy=header_strategy
    )
    headers = extract_headers(read.table, structure)
    rows = extract_data_rows(read.table, structure)
    columns = analyze_columns(headers, rows, config.date_formats, classifier)
    has_headers = structure.header_row_index is not None
    quality = score_quality(headers, rows, has_headers, columns, structure)

    metadata = FileMetadata(
        file_type=read.file_type,
        encoding=read.encoding,
        delimiter=read.delimiter,
        has_headers=has_headers,
        row_count=len(rows),
        column_count=len(headers),
        structure=structure,
        columns=columns,
        quality=quality,
        sheet_count=read.sheet_count,
        active_sheet=read.active_sheet,
    )
    logger.info(
        f"parsed {file_name}: type={metadata.file_type.value} rows={metadata.row_count} "
        f"columns={metadata.column_count} quality={quality.score}"
    )
    return ParsedTable(headers=headers, rows=rows, metadata=metadata, raw=read.table)
