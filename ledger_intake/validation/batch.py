from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import date

from ..models.config_models import ValidationConfig
from ..models.financial import (
    AccountRef,
    BatchSummary,
    BatchValidationResult,
    EntityRef,
    FinancialFactCandidate,
    InvalidRecord,
)
from .record import validate_fact

"""Batch validation: partition candidates into valid and invalid records."""

__all__ = [
    "validate_batch",
]

logger = logging.getLogger(__name__)


def validate_batch(
    candidates: Iterable[FinancialFactCandidate],
    config: ValidationConfig | None = None,
    existing_entities: Sequence[EntityRef] = (),
    existing_accounts: Sequence[AccountRef] = (),
    *,
    today: date | None = None,
) -> BatchValidationResult:
    """Validate each candidate independently, preserving input order.

    Warnings are counted over every result, valid or not.
    """
    config = config or ValidationConfig()
    today = today or date.today()
    valid: list[FinancialFactCandidate] = []
    invalid: list[InvalidRecord] = []
    warning_count = 0
    total = 0

    for index, candidate in enumerate(candidates):
        total += 1
        result = validate_fact(candidate, config, existing_entities, existing_accounts, today=today)
        if result.is_valid and result.data is not None:
            valid.append(result.data)
        else:
            invalid.append(
                InvalidRecord(
                    data=candidate, errors=result.errors, warnings=result.warnings, index=index
                )
            )
        warning_count += len(result.warnings)

    logger.debug(f"batch validated: total={total} valid={len(valid)} invalid={len(invalid)}")
    return BatchValidationResult(
        valid_data=tuple(valid),
        invalid_data=tuple(invalid),
        summary=BatchSummary(
            total=total,
            valid=len(valid),
            invalid=len(invalid),
            warnings=warning_count,
        ),
    )
