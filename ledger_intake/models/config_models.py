from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any

from .cells import DEFAULT_DATE_FORMATS

"""Config dataclasses for the ledger intake pipeline.

ParsingConfig and ValidationConfig are passed explicitly to every call that
needs them. Callers override individual fields with ``with_overrides``; the
merge is shallow (a given list replaces the default list). Nothing here reads
from the environment.
"""

__all__ = [
    "ParsingConfig",
    "ValidationConfig",
    "IntakeConfig",
]


def _merge(instance: Any, overrides: dict[str, Any]) -> Any:
    known = {f.name for f in fields(instance)}
    unknown = set(overrides) - known
    if unknown:
        raise TypeError(f"unknown {type(instance).__name__} option(s): {sorted(unknown)}")
    # lists from YAML become tuples so the result stays hashable/immutable
    normalized = {k: tuple(v) if isinstance(v, list) else v for k, v in overrides.items()}
    return replace(instance, **normalized)


@dataclass(frozen=True)
class ParsingConfig:
    """Options recognized by the tabular parser and structure detector."""
    auto_detect_headers: bool = True
    auto_detect_delimiter: bool = True
    auto_detect_encoding: bool = True
    skip_empty_rows: bool = True
    trim_whitespace: bool = True
    max_rows: int | None = 10000  # cap on rows read (None = unlimited)
    sheet_name: str | None = None  # first sheet when unset
    header_row: int | None = None  # 0-based; overrides header detection
    data_start_row: int | None = None  # 0-based; used when no header row
    custom_delimiters: tuple[str, ...] = (",", ";", "\t", "|")
    date_formats: tuple[str, ...] = DEFAULT_DATE_FORMATS

    def with_overrides(self, **overrides: Any) -> ParsingConfig:
        return _merge(self, overrides)


@dataclass(frozen=True)
class ValidationConfig:
    """Business rules applied to each financial fact candidate."""
    allow_negative_values: bool = True
    max_value: float = 999_999_999_999
    min_value: float = -999_999_999_999
    required_fields: tuple[str, ...] = ("value", "year", "month")
    allowed_scenarios: tuple[str, ...] = ("real", "budget", "forecast")
    validate_entity_exists: bool = False
    validate_account_exists: bool = False
    allow_auto_create: bool = True

    def with_overrides(self, **overrides: Any) -> ValidationConfig:
        return _merge(self, overrides)


@dataclass(frozen=True)
class IntakeConfig:
    """Root configuration for a directory intake run (loaded from YAML)."""
    source_directory: str  # Directory scanned for input files
    columns: dict[str, str]  # candidate field -> header name
    defaults: dict[str, Any] = field(default_factory=dict)  # candidate field -> constant
    extensions: tuple[str, ...] = (".xlsx", ".xls", ".xlsm", ".csv", ".txt")
    parsing: ParsingConfig = field(default_factory=ParsingConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
