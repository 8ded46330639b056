from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from ..models.cells import Cell, CellKind, RawTable, infer_value_kind, is_blank
from ..models.config_models import ParsingConfig
from ..models.table import StructureInfo

"""Structure detection: header row, data range and empty rows of a RawTable.

Header detection is a best-effort score over the first few row pairs. It is a
plain callable (``HeaderStrategy``) so another heuristic can be passed to
``detect_structure`` without touching the rest of the pipeline.
"""

__all__ = [
    "HeaderStrategy",
    "HEADER_KEYWORDS",
    "detect_structure",
    "detect_header_row",
    "find_empty_rows",
    "score_header_pair",
]

logger = logging.getLogger(__name__)

HeaderStrategy = Callable[[RawTable, Sequence[str]], int | None]

# Portuguese and English column words
HEADER_KEYWORDS: tuple[str, ...] = (
    "nome", "name",
    "código", "code",
    "valor", "value",
    "data", "date",
    "descrição", "description",
)
HEADER_SCAN_PAIRS = 5
HEADER_ACCEPT_RATIO = 0.5


def find_empty_rows(table: RawTable) -> frozenset[int]:
    return frozenset(i for i, row in enumerate(table) if all(is_blank(c) for c in row))


def score_header_pair(
    header_row: Sequence[Cell], data_row: Sequence[Cell], date_formats: Sequence[str]
) -> tuple[int, int]:
    """Score how header-like ``header_row`` looks above ``data_row``.

    Returns (score, columns considered). Columns with a blank header cell are
    not considered.
    """
    score = 0
    considered = 0
    for header_cell, data_cell in zip(header_row, data_row):
        header_kind = infer_value_kind(header_cell, date_formats)
        if header_kind is CellKind.NULL:
            continue
        considered += 1
        if header_kind is not CellKind.TEXT:
            continue
        data_kind = infer_value_kind(data_cell, date_formats)
        if data_kind is CellKind.NUMBER:
            score += 2
        if data_kind is not CellKind.TEXT:
            score += 1
        text = str(header_cell).lower()
        if any(word in text for word in HEADER_KEYWORDS):
            score += 1
    return score, considered


def detect_header_row(table: RawTable, date_formats: Sequence[str]) -> int | None:
    """Return the first row that scores as a header over the row below it."""
    for i in range(min(HEADER_SCAN_PAIRS, len(table) - 1)):
        current, following = table[i], table[i + 1]
        if len(current) != len(following):
            continue
        score, considered = score_header_pair(current, following, date_formats)
        if considered and score / considered > HEADER_ACCEPT_RATIO:
            logger.debug(f"header row {i} accepted (score={score} columns={considered})")
            return i
    return None


def detect_structure(
    table: RawTable,
    config: ParsingConfig | None = None,
    merged_regions: tuple[str, ...] | None = None,
    header_strategy: HeaderStrategy = detect_header_row,
) -> StructureInfo:
    """Infer header row, data range and empty rows.

    An explicit ``header_row`` wins over detection (ignored when it points past
    the last row). Without a header the data starts at ``data_start_row`` when
    configured, else at the first non-empty row.
    """
    config = config or ParsingConfig()
    empty_rows = find_empty_rows(table)
    data_end = len(table) - 1

    header: int | None = None
    if config.header_row is not None:
        if 0 <= config.header_row < len(table):
            header = config.header_row
        else:
            logger.warning(f"header_row {config.header_row} outside table of {len(table)} rows, ignored")
    elif config.auto_detect_headers:
        header = header_strategy(table, config.date_formats)

    if header is not None:
        data_start = header + 1
    elif config.data_start_row is not None:
        data_start = min(max(config.data_start_row, 0), len(table))
    else:
        data_start = next((i for i in range(len(table)) if i not in empty_rows), 0)

    return StructureInfo(
        header_row_index=header,
        data_start_row=data_start,
        data_end_row=data_end,
        empty_row_indices=empty_rows,
        merged_regions=merged_regions,
    )
