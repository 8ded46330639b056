from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping
from dataclasses import fields
from datetime import date, datetime
from typing import Any

from ..models.cells import Cell, is_blank
from ..models.financial import FinancialFactCandidate
from ..models.table import ParsedTable

"""Candidate extraction: parsed table rows -> FinancialFactCandidate.

The column mapping (candidate field -> header name) comes from configuration.
Header names match case-insensitively after trimming. Constant defaults fill
fields that have no column or a blank cell. Year and month are coerced to int
and value to float; a value that cannot be read becomes NaN so validation
reports it instead of extraction failing.
"""

__all__ = [
    "CANDIDATE_FIELDS",
    "MappingError",
    "extract_candidates",
    "extract_candidate_rows",
    "coerce_number",
]

logger = logging.getLogger(__name__)

CANDIDATE_FIELDS = tuple(f.name for f in fields(FinancialFactCandidate))
_INT_FIELDS = {"year", "month"}
_TEXT_FIELDS = {"entity_code", "entity_name", "account_code", "account_name", "scenario_id", "description"}
_NUMBER_CHARS = re.compile(r"[^\d,.\-]")


class MappingError(Exception):
    """Raised when the column mapping does not fit the parsed headers."""


def coerce_number(cell: Cell) -> float:
    """Read a number from a cell, accepting ``1.234,56`` and ``1,234.56`` styles."""
    if isinstance(cell, bool):
        return float(cell)
    if isinstance(cell, (int, float)):
        return float(cell)
    if not isinstance(cell, str):
        return math.nan
    text = _NUMBER_CHARS.sub("", cell)
    if "," in text and "." in text:
        # the right-most separator is the decimal one
        if text.rfind(",") > text.rfind("."):
            text = text.replace(".", "").replace(",", ".")
        else:
            text = text.replace(",", "")
    elif "," in text:
        head, _, tail = text.rpartition(",")
        text = text.replace(",", "") if len(tail) == 3 and head else text.replace(",", ".")
    try:
        return float(text)
    except ValueError:
        return math.nan


def _coerce(field_name: str, cell: Cell) -> Any:
    if is_blank(cell):
        return None
    if field_name == "value":
        return coerce_number(cell)
    if field_name in _INT_FIELDS:
        if isinstance(cell, (date, datetime)):
            return cell.year if field_name == "year" else cell.month
        number = coerce_number(cell)
        if math.isnan(number) or not number.is_integer():
            return str(cell)  # left for validation to reject
        return int(number)
    if field_name in _TEXT_FIELDS:
        if isinstance(cell, float) and cell.is_integer():
            return str(int(cell))
        return str(cell).strip()
    return cell


def _resolve_columns(headers: tuple[str, ...], columns: Mapping[str, str]) -> dict[str, int]:
    unknown = set(columns) - set(CANDIDATE_FIELDS)
    if unknown:
        raise MappingError(f"unknown candidate field(s): {sorted(unknown)}")
    positions = {h.strip().lower(): i for i, h in reversed(list(enumerate(headers)))}
    resolved: dict[str, int] = {}
    missing = []
    for field_name, header in columns.items():
        index = positions.get(header.strip().lower())
        if index is None:
            missing.append(header)
        else:
            resolved[field_name] = index
    if missing:
        raise MappingError(f"missing columns: {sorted(missing)}")
    return resolved


def extract_candidate_rows(
    parsed: ParsedTable,
    columns: Mapping[str, str],
    defaults: Mapping[str, Any] | None = None,
) -> list[tuple[int, FinancialFactCandidate]]:
    """Build one candidate per non-empty data row, paired with its 1-based source row.

    Raises:
        MappingError: a mapped header is absent or a field name is unknown
    """
    defaults = dict(defaults or {})
    resolved = _resolve_columns(parsed.headers, columns)
    first_row = parsed.metadata.structure.data_start_row + 1
    candidates: list[tuple[int, FinancialFactCandidate]] = []
    for offset, row in enumerate(parsed.rows):
        if all(is_blank(c) for c in row):
            continue
        values: dict[str, Any] = {}
        for field_name in CANDIDATE_FIELDS:
            index = resolved.get(field_name)
            cell = row[index] if index is not None and index < len(row) else None
            value = _coerce(field_name, cell)
            if value is None and field_name in defaults:
                value = defaults[field_name]
            values[field_name] = value
        candidates.append((first_row + offset, FinancialFactCandidate(**values)))
    logger.debug(f"extracted {len(candidates)} candidates from {len(parsed.rows)} rows")
    return candidates


def extract_candidates(
    parsed: ParsedTable,
    columns: Mapping[str, str],
    defaults: Mapping[str, Any] | None = None,
) -> list[FinancialFactCandidate]:
    return [candidate for _, candidate in extract_candidate_rows(parsed, columns, defaults)]
