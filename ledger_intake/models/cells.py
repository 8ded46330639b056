from __future__ import annotations

import math
import re
from collections.abc import Sequence
from datetime import date, datetime
from enum import Enum
from typing import Union

"""Cell value model for parsed tables.

A RawTable is a tuple of rows, each row a tuple of native Python cell values.
``CellKind`` closes the set of kinds a cell may have and ``classify_cell`` is the
exhaustive switch over native values. ``infer_value_kind`` additionally looks at
the content of text cells (numeric strings, boolean words, date strings), which
is what structure detection and column analysis work with.
"""

__all__ = [
    "Cell",
    "RawTable",
    "CellKind",
    "DEFAULT_DATE_FORMATS",
    "classify_cell",
    "infer_value_kind",
    "is_blank",
    "is_date_string",
]

Cell = Union[str, int, float, bool, date, datetime, None]
RawTable = tuple[tuple[Cell, ...], ...]

DEFAULT_DATE_FORMATS: tuple[str, ...] = (
    "DD/MM/YYYY",
    "MM/DD/YYYY",
    "YYYY-MM-DD",
    "DD-MM-YYYY",
    "MM-DD-YYYY",
)

_BOOLEAN_RE = re.compile(r"^(true|false|sim|não|yes|no|0|1)$", re.IGNORECASE)
_NUMBER_RE = re.compile(r"^-?\d+(\.\d+)?$")
_DATE_SHAPES = (
    re.compile(r"^\d{1,2}[/\-]\d{1,2}[/\-]\d{4}$"),  # DD/MM/YYYY, DD-MM-YYYY
    re.compile(r"^\d{4}[/\-]\d{1,2}[/\-]\d{1,2}$"),  # YYYY-MM-DD, YYYY/MM/DD
    re.compile(r"^\d{1,2}[/\-]\d{1,2}[/\-]\d{2}$"),  # DD/MM/YY
)
_FORMAT_TOKENS = (("YYYY", "%Y"), ("YY", "%y"), ("MM", "%m"), ("DD", "%d"))


class CellKind(Enum):
    """Closed set of cell kinds."""
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    NULL = "null"


def is_blank(value: Cell) -> bool:
    """True for None, NaN and strings that are empty after trimming."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and value.strip() == ""


def classify_cell(value: Cell) -> CellKind:
    """Classify a native cell value without looking inside strings."""
    if is_blank(value):
        return CellKind.NULL
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return CellKind.BOOLEAN
    if isinstance(value, (int, float)):
        return CellKind.NUMBER
    if isinstance(value, (date, datetime)):
        return CellKind.DATE
    return CellKind.TEXT


def _to_strptime(fmt: str) -> str:
    out = fmt
    for token, directive in _FORMAT_TOKENS:
        out = out.replace(token, directive)
    return out


def is_date_string(text: str, date_formats: Sequence[str] = DEFAULT_DATE_FORMATS) -> bool:
    """Return True when ``text`` has a date shape and parses as a calendar date.

    Each configured format is also tried with a two digit year so that
    ``DD/MM/YY`` values are recognized. ``/`` and ``-`` separators are
    interchangeable.
    """
    if not any(p.match(text) for p in _DATE_SHAPES):
        return False
    normalized = text.replace("-", "/")
    for fmt in date_formats:
        pattern = _to_strptime(fmt).replace("-", "/")
        for candidate in (pattern, pattern.replace("%Y", "%y")):
            try:
                datetime.strptime(normalized, candidate)
            except ValueError:
                continue
            return True
    return False


def infer_value_kind(
    value: Cell, date_formats: Sequence[str] = DEFAULT_DATE_FORMATS
) -> CellKind:
    """Classify a cell, looking inside text for numbers, dates and booleans."""
    kind = classify_cell(value)
    if kind is not CellKind.TEXT:
        return kind
    text = str(value).strip()
    # numbers win over booleans: "0" and "1" are numbers
    if _NUMBER_RE.match(text):
        return CellKind.NUMBER
    if is_date_string(text, date_formats):
        return CellKind.DATE
    if _BOOLEAN_RE.match(text):
        return CellKind.BOOLEAN
    return CellKind.TEXT
