from __future__ import annotations

import logging
import math
import re
from collections.abc import Sequence
from dataclasses import replace
from datetime import date
from typing import Any

from ..models.config_models import ValidationConfig
from ..models.financial import AccountRef, EntityRef, FinancialFactCandidate, ValidationResult

"""Financial fact validation.

validate_fact runs every check on a candidate and collects blocking errors and
non-blocking warnings. Checks never short-circuit each other, and no exception
escapes: anything unexpected becomes a single "Validation error" result.
"""

__all__ = [
    "validate_fact",
    "sanitize_fact",
    "MIN_YEAR",
]

logger = logging.getLogger(__name__)

MIN_YEAR = 1900
FUTURE_YEAR_SPAN = 10
OLD_DATA_YEARS = 5
LARGE_VALUE_WARNING = 1_000_000_000
MAX_CODE_LENGTH = 50
MAX_NAME_LENGTH = 200
MAX_ACCOUNT_LEVELS = 6
GENERIC_DESCRIPTION_LENGTH = 20
GENERIC_DESCRIPTION_WORDS = ("imported", "data", "value", "amount", "financial", "record")

_ENTITY_CODE_RE = re.compile(r"^[A-Za-z0-9_-]+$")
_HIERARCHICAL_CODE_RE = re.compile(r"^\d+(\.\d+)*$")


def _is_missing_number(value: Any) -> bool:
    if value is None:
        return True
    try:
        return math.isnan(value) or math.isinf(value)
    except TypeError:
        return True


def _check_required(candidate: FinancialFactCandidate, fields: Sequence[str], errors: list[str]) -> None:
    for name in fields:
        value = getattr(candidate, name, None)
        if value is None or value == "":
            errors.append(f"Required field '{name}' is missing or empty")


def _check_value(value: Any, config: ValidationConfig, errors: list[str], warnings: list[str]) -> None:
    if isinstance(value, bool) or _is_missing_number(value):
        errors.append("Value must be a valid number")
        return
    if not config.allow_negative_values and value < 0:
        errors.append("Negative values are not allowed")
    if value > config.max_value:
        errors.append(f"Value {value} exceeds maximum allowed value {config.max_value}")
    if value < config.min_value:
        errors.append(f"Value {value} is below minimum allowed value {config.min_value}")
    if abs(value) > LARGE_VALUE_WARNING:
        warnings.append(f"Very large value detected: {value}. Please verify.")
    if value == 0:
        warnings.append("Zero value detected. This may be intentional or indicate missing data.")


def _check_period(year: Any, month: Any, today: date, errors: list[str], warnings: list[str]) -> None:
    max_year = today.year + FUTURE_YEAR_SPAN
    if _is_missing_number(year) or year < MIN_YEAR or year > max_year:
        errors.append(f"Invalid year: {year}. Must be between {MIN_YEAR} and {max_year}")
    if _is_missing_number(month) or month < 1 or month > 12:
        errors.append(f"Invalid month: {month}. Must be between 1 and 12")

    if _is_missing_number(year):
        return
    if year > today.year or (
        year == today.year and not _is_missing_number(month) and month > today.month
    ):
        warnings.append(f"Future date detected: {month}/{year}. Please verify if this is intentional.")
    if year < today.year - OLD_DATA_YEARS:
        warnings.append(f"Old date detected: {month}/{year}. Please verify if this data is still relevant.")


def _check_scenario(scenario_id: Any, allowed: Sequence[str], errors: list[str]) -> None:
    if scenario_id not in allowed:
        errors.append(f"Invalid scenario '{scenario_id}'. Allowed scenarios: {', '.join(allowed)}")


def _check_entity(
    candidate: FinancialFactCandidate,
    existing: Sequence[EntityRef],
    config: ValidationConfig,
    errors: list[str],
    warnings: list[str],
) -> None:
    code, name = candidate.entity_code, candidate.entity_name
    if not code and not name:
        if config.allow_auto_create:
            warnings.append("No entity specified. A default entity will be used.")
        else:
            errors.append("Entity code or name is required")
        return

    # entities are matched by name only
    if config.validate_entity_exists and existing:
        found = bool(name) and any(e.name == name for e in existing)
        if not found:
            label = code or name
            if config.allow_auto_create:
                warnings.append(f"Entity '{label}' will be auto-created")
            else:
                errors.append(f"Entity '{label}' does not exist and auto-creation is disabled")

    if code:
        if len(code) > MAX_CODE_LENGTH:
            errors.append(f"Entity code is too long (max {MAX_CODE_LENGTH} characters)")
        if not _ENTITY_CODE_RE.match(code):
            warnings.append(
                "Entity code contains special characters. "
                "Consider using only letters, numbers, hyphens and underscores."
            )
    if name and len(name) > MAX_NAME_LENGTH:
        errors.append(f"Entity name is too long (max {MAX_NAME_LENGTH} characters)")


def _check_account(
    candidate: FinancialFactCandidate,
    existing: Sequence[AccountRef],
    config: ValidationConfig,
    errors: list[str],
    warnings: list[str],
) -> None:
    code, name = candidate.account_code, candidate.account_name
    if not code and not name:
        if config.allow_auto_create:
            warnings.append("No account specified. A default account will be used.")
        else:
            errors.append("Account code or name is required")
        return

    if config.validate_account_exists and existing:
        found = any((code and a.code == code) or (name and a.name == name) for a in existing)
        if not found:
            label = code or name
            if config.allow_auto_create:
                warnings.append(f"Account '{label}' will be auto-created")
            else:
                errors.append(f"Account '{label}' does not exist and auto-creation is disabled")

    if code:
        if len(code) > MAX_CODE_LENGTH:
            errors.append(f"Account code is too long (max {MAX_CODE_LENGTH} characters)")
        if _HIERARCHICAL_CODE_RE.match(code) and len(code.split(".")) > MAX_ACCOUNT_LEVELS:
            warnings.append("Account code has many hierarchy levels. Consider simplifying.")
    if name and len(name) > MAX_NAME_LENGTH:
        errors.append(f"Account name is too long (max {MAX_NAME_LENGTH} characters)")


def _shares_token(code: str, name: str, code_separators: str) -> bool:
    code_words = re.split(f"[{code_separators}]", code.lower())
    name_words = re.split(r"\s+", name.lower())
    return any(cw in nw or nw in cw for cw in code_words for nw in name_words)


def _check_consistency(candidate: FinancialFactCandidate, warnings: list[str]) -> None:
    entity_code, entity_name = candidate.entity_code, candidate.entity_name
    if entity_code and entity_name:
        if not _shares_token(entity_code, entity_name, "_-") and len(entity_code) > 3:
            warnings.append("Entity code and name seem unrelated. Please verify.")

    account_code, account_name = candidate.account_code, candidate.account_name
    if account_code and account_name and not _HIERARCHICAL_CODE_RE.match(account_code):
        if not _shares_token(account_code, account_name, "._-") and len(account_code) > 3:
            warnings.append("Account code and name seem unrelated. Please verify.")

    description = candidate.description
    if description:
        lowered = description.lower()
        if any(word in lowered for word in GENERIC_DESCRIPTION_WORDS) and len(description) < GENERIC_DESCRIPTION_LENGTH:
            warnings.append("Description seems generic. Consider adding more specific information.")


def validate_fact(
    candidate: FinancialFactCandidate,
    config: ValidationConfig | None = None,
    existing_entities: Sequence[EntityRef] = (),
    existing_accounts: Sequence[AccountRef] = (),
    *,
    today: date | None = None,
) -> ValidationResult:
    """Validate one financial fact candidate.

    Args:
        candidate: Extracted fact to check (never modified)
        config: Business rules; defaults when omitted
        existing_entities / existing_accounts: Lookup snapshots for existence checks
        today: Reference date for period checks (defaults to date.today())

    Returns:
        ValidationResult with ``data`` set only when no errors were found
    """
    config = config or ValidationConfig()
    today = today or date.today()
    errors: list[str] = []
    warnings: list[str] = []

    try:
        _check_required(candidate, config.required_fields, errors)
        _check_value(candidate.value, config, errors, warnings)
        _check_period(candidate.year, candidate.month, today, errors, warnings)
        _check_scenario(candidate.scenario_id, config.allowed_scenarios, errors)
        _check_entity(candidate, existing_entities, config, errors, warnings)
        _check_account(candidate, existing_accounts, config, errors, warnings)
        _check_consistency(candidate, warnings)
    except Exception as e:
        logger.debug(f"validation failed unexpectedly: {e!r}")
        return ValidationResult(is_valid=False, errors=(f"Validation error: {e}",))

    is_valid = not errors
    return ValidationResult(
        is_valid=is_valid,
        errors=tuple(errors),
        warnings=tuple(warnings),
        data=candidate if is_valid else None,
    )


def _clean(text: str | None, upper: bool = False) -> str | None:
    if text is None:
        return None
    text = text.strip()
    if not text:
        return None
    return text.upper() if upper else text


def sanitize_fact(candidate: FinancialFactCandidate) -> FinancialFactCandidate:
    """Return a normalized copy: trimmed strings, upper-cased codes, value rounded to cents."""
    value = candidate.value
    if isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value):
        value = round(value, 2)
    return replace(
        candidate,
        entity_code=_clean(candidate.entity_code, upper=True),
        entity_name=_clean(candidate.entity_name),
        account_code=_clean(candidate.account_code, upper=True),
        account_name=_clean(candidate.account_name),
        description=_clean(candidate.description),
        value=value,
    )
