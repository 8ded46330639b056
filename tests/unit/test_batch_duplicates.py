from __future__ import annotations

from dataclasses import replace
from datetime import date

from ledger_intake.models.financial import FinancialFactCandidate
from ledger_intake.validation.batch import validate_batch
from ledger_intake.validation.duplicates import composite_key, detect_duplicates

TODAY = date(2024, 8, 1)

BASE = FinancialFactCandidate(
    entity_code="ACME",
    account_code="1000",
    scenario_id="real",
    year=2024,
    month=6,
    value=1000.0,
)


def test_validate_batch_partitions_in_order():
    bad = replace(BASE, scenario_id="invalid")
    zero = replace(BASE, value=0.0)
    result = validate_batch([BASE, bad, zero], today=TODAY)

    assert result.valid_data == (BASE, zero)
    assert len(result.invalid_data) == 1
    assert result.invalid_data[0].data is bad
    assert result.invalid_data[0].index == 1
    assert result.invalid_data[0].errors[0].startswith("Invalid scenario")
    assert result.summary.total == 3
    assert result.summary.valid == 2
    assert result.summary.invalid == 1
    assert result.summary.warnings == 1


def test_validate_batch_counts_warnings_of_invalid_records():
    bad = replace(BASE, scenario_id="invalid", value=0.0)
    result = validate_batch([bad], today=TODAY)
    assert result.summary.invalid == 1
    assert result.summary.warnings == 1
    assert result.invalid_data[0].warnings[0].startswith("Zero value detected")


def test_validate_batch_empty():
    result = validate_batch([])
    assert result.valid_data == ()
    assert result.invalid_data == ()
    assert (result.summary.total, result.summary.valid, result.summary.invalid) == (0, 0, 0)


def test_validate_batch_accepts_generator():
    result = validate_batch((c for c in [BASE, BASE]), today=TODAY)
    assert result.summary.total == 2


def test_composite_key_sentinels_and_integral_values():
    candidate = FinancialFactCandidate(scenario_id="real", year=2024, month=6, value=1000.0)
    assert composite_key(candidate) == "NO_ENTITY|NO_ACCOUNT|2024|6|real|1000"
    assert composite_key(replace(candidate, value=1000)) == composite_key(candidate)
    assert composite_key(replace(candidate, value=1000.5)).endswith("|1000.5")


def test_two_identical_candidates_form_one_group():
    twin = replace(BASE, description="another row")
    result = detect_duplicates([BASE, twin])
    assert len(result.duplicates) == 1
    assert result.duplicates[0] == (BASE, twin)
    # the first occurrence is also listed as unique
    assert result.unique == (BASE,)


def test_later_occurrences_join_the_same_group():
    other = replace(BASE, month=7)
    result = detect_duplicates([BASE, other, BASE, BASE, other])
    assert [len(g) for g in result.duplicates] == [3, 2]
    assert result.unique == (BASE, other)


def test_singletons_never_appear_in_duplicates():
    a = replace(BASE, account_code="1")
    b = replace(BASE, account_code="2")
    result = detect_duplicates([a, b])
    assert result.duplicates == ()
    assert result.unique == (a, b)


def test_missing_codes_share_sentinel_key():
    a = replace(BASE, entity_code=None)
    b = replace(BASE, entity_code="")
    result = detect_duplicates([a, b])
    assert len(result.duplicates) == 1
