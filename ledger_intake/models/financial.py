from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

"""Financial fact domain models.

A FinancialFactCandidate is one extracted monthly fact awaiting validation.
Every field is optional at the type level: extraction may leave gaps and the
validator is the place that reports them.
"""

__all__ = [
    "FinancialFactCandidate",
    "EntityRef",
    "AccountRef",
    "ValidationResult",
    "InvalidRecord",
    "BatchSummary",
    "BatchValidationResult",
    "DuplicateGroups",
]


@dataclass(frozen=True)
class FinancialFactCandidate:
    entity_code: str | None = None
    entity_name: str | None = None
    account_code: str | None = None
    account_name: str | None = None
    scenario_id: str | None = None
    year: int | None = None
    month: int | None = None
    value: float | None = None
    description: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FinancialFactCandidate:
        """Build a candidate from a mapping, ignoring keys that are not fields."""
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})


@dataclass(frozen=True)
class EntityRef:
    """Snapshot of an existing entity (lookup only)."""
    name: str
    code: str | None = None


@dataclass(frozen=True)
class AccountRef:
    """Snapshot of an existing account (lookup only)."""
    code: str
    name: str | None = None


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    data: FinancialFactCandidate | None = None  # set only when valid


@dataclass(frozen=True)
class InvalidRecord:
    data: FinancialFactCandidate
    errors: tuple[str, ...]
    warnings: tuple[str, ...]
    index: int  # 0-based position in the validated batch


@dataclass(frozen=True)
class BatchSummary:
    total: int
    valid: int
    invalid: int
    warnings: int  # warnings across valid and invalid results


@dataclass(frozen=True)
class BatchValidationResult:
    valid_data: tuple[FinancialFactCandidate, ...]
    invalid_data: tuple[InvalidRecord, ...]
    summary: BatchSummary


@dataclass(frozen=True)
class DuplicateGroups:
    """Duplicate clusters by composite key.

    The first occurrence of a duplicated key is listed in ``unique`` and also
    heads its group in ``duplicates``.
    """
    duplicates: tuple[tuple[FinancialFactCandidate, ...], ...]
    unique: tuple[FinancialFactCandidate, ...]
