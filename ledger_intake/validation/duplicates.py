from __future__ import annotations

from collections.abc import Iterable

from ..models.financial import DuplicateGroups, FinancialFactCandidate

"""Duplicate detection over a batch of candidates.

Candidates share a composite key when entity code, account code, year, month,
scenario and value are equal. The first occurrence of every key is listed in
``unique``; a key seen twice or more also gets a group in ``duplicates`` that
starts with that same first occurrence.
"""

__all__ = [
    "composite_key",
    "detect_duplicates",
]


def _key_part(value: object) -> str:
    # 1000 and 1000.0 must produce the same key
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def composite_key(candidate: FinancialFactCandidate) -> str:
    return "|".join(
        (
            str(candidate.entity_code or "NO_ENTITY"),
            str(candidate.account_code or "NO_ACCOUNT"),
            _key_part(candidate.year),
            _key_part(candidate.month),
            _key_part(candidate.scenario_id),
            _key_part(candidate.value),
        )
    )


def detect_duplicates(candidates: Iterable[FinancialFactCandidate]) -> DuplicateGroups:
    seen: dict[str, list[FinancialFactCandidate]] = {}
    groups: list[list[FinancialFactCandidate]] = []
    unique: list[FinancialFactCandidate] = []

    for candidate in candidates:
        key = composite_key(candidate)
        occurrences = seen.get(key)
        if occurrences is None:
            seen[key] = [candidate]
            unique.append(candidate)
            continue
        occurrences.append(candidate)
        if len(occurrences) == 2:
            groups.append(occurrences)

    return DuplicateGroups(
        duplicates=tuple(tuple(g) for g in groups),
        unique=tuple(unique),
    )
