from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import numpy as np
import openpyxl
import pandas as pd

from ..models.cells import Cell, RawTable, is_blank
from ..models.config_models import ParsingConfig
from ..models.table import FileType
from .detection import (
    ZIP_SIGNATURE,
    decode_text,
    detect_delimiter,
    detect_encoding,
    detect_file_type,
)
from .errors import DelimiterNotFoundError, ParsingError, SheetNotFoundError

"""Tabular reader: raw bytes -> RawTable.

Workbooks are read with pandas (openpyxl for OOXML, xlrd for legacy .xls) with
no header applied; header detection happens later on the raw grid. Merged
regions are collected with openpyxl for OOXML workbooks. Delimited text is
split with the csv module so that ragged rows survive and can be reported by
the quality scorer.

Cells are converted to native Python values: NaN/NaT -> None, numpy scalars ->
int/float/bool, pandas Timestamps -> datetime.
"""

__all__ = [
    "TableRead",
    "read_table",
    "read_workbook",
    "read_delimited",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TableRead:
    """RawTable plus what the reader learned about the container."""
    table: RawTable
    file_type: FileType
    encoding: str
    delimiter: str | None = None
    sheet_count: int | None = None
    active_sheet: str | None = None
    merged_regions: tuple[str, ...] | None = None


def _to_native(value: Any, trim: bool) -> Cell:
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, pd.Timestamp):
        return None if pd.isna(value) else value.to_pydatetime()
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float) and pd.isna(value):
        return None
    if isinstance(value, str):
        if trim:
            value = value.strip()
        return value if value != "" else None
    if isinstance(value, (bool, int, float, datetime)):
        return value
    # time / timedelta and other exotic cells are kept as text
    return str(value)


def _collect_rows(rows: Iterable[Iterable[Any]], config: ParsingConfig) -> RawTable:
    out: list[tuple[Cell, ...]] = []
    for raw in rows:
        if config.max_rows is not None and len(out) >= config.max_rows:
            break
        row = tuple(_to_native(v, config.trim_whitespace) for v in raw)
        if config.skip_empty_rows and all(is_blank(c) for c in row):
            continue
        out.append(row)
    return tuple(out)


def read_workbook(content: bytes, config: ParsingConfig) -> TableRead:
    """Read the configured (or first) sheet of a workbook into a RawTable."""
    try:
        xls = pd.ExcelFile(io.BytesIO(content))
    except Exception as e:
        raise ParsingError(f"Failed to open workbook: {e}") from e

    with xls:
        sheet_names = [str(name) for name in xls.sheet_names]
        if not sheet_names:
            raise ParsingError("Workbook contains no sheets")
        sheet_name = config.sheet_name or sheet_names[0]
        if sheet_name not in sheet_names:
            raise SheetNotFoundError(f"Sheet '{sheet_name}' not found")
        try:
            # max_rows is applied while reading, before blank rows are dropped
            df = xls.parse(sheet_name, header=None, nrows=config.max_rows)
        except Exception as e:
            raise ParsingError(f"Failed to read sheet '{sheet_name}': {e}") from e

    df = df.astype(object)
    table = _collect_rows(df.itertuples(index=False, name=None), config)

    merged: tuple[str, ...] | None = None
    if content.startswith(ZIP_SIGNATURE):
        try:
            wb = openpyxl.load_workbook(io.BytesIO(content))
        except Exception as e:
            raise ParsingError(f"Failed to read merged regions: {e}") from e
        try:
            merged = tuple(str(r) for r in wb[sheet_name].merged_cells.ranges)
        finally:
            wb.close()

    logger.debug(f"workbook sheet={sheet_name} rows={len(table)} merged={merged}")
    return TableRead(
        table=table,
        file_type=FileType.WORKBOOK,
        encoding="utf-8",
        sheet_count=len(sheet_names),
        active_sheet=sheet_name,
        merged_regions=merged,
    )


def read_delimited(content: bytes, config: ParsingConfig) -> TableRead:
    """Decode delimited text and split it into a RawTable."""
    encoding = detect_encoding(content) if config.auto_detect_encoding else "utf-8"
    text = decode_text(content, encoding)

    if config.auto_detect_delimiter:
        delimiter = detect_delimiter(text, config.custom_delimiters)
        if delimiter is None:
            raise DelimiterNotFoundError("Could not detect delimiter")
    else:
        delimiter = config.custom_delimiters[0] if config.custom_delimiters else ","

    try:
        reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter)
        table = _collect_rows(reader, config)
    except csv.Error as e:
        raise ParsingError(f"Failed to split delimited text: {e}") from e

    logger.debug(f"delimited encoding={encoding} delimiter={delimiter!r} rows={len(table)}")
    return TableRead(
        table=table,
        file_type=FileType.DELIMITED,
        encoding=encoding,
        delimiter=delimiter,
    )


def read_table(content: bytes, file_name: str, config: ParsingConfig | None = None) -> TableRead:
    """Dispatch on the detected file type and read the content."""
    config = config or ParsingConfig()
    file_type = detect_file_type(content, file_name)
    if file_type is FileType.WORKBOOK:
        return read_workbook(content, config)
    return read_delimited(content, config)
