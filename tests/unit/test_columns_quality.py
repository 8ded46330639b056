from __future__ import annotations

from datetime import date

from ledger_intake.models.cells import CellKind
from ledger_intake.models.table import ColumnType, StructureInfo
from ledger_intake.parsing.columns import analyze_columns, infer_column_type
from ledger_intake.parsing.quality import score_quality


def test_infer_column_type():
    assert infer_column_type([1, 2.5, "3"]) is ColumnType.NUMBER
    assert infer_column_type(["a", "b"]) is ColumnType.TEXT
    assert infer_column_type([date(2024, 1, 1), "15/06/2024"]) is ColumnType.DATE
    assert infer_column_type(["yes", "no", True]) is ColumnType.BOOLEAN
    assert infer_column_type([1, "a"]) is ColumnType.MIXED
    assert infer_column_type([]) is ColumnType.TEXT


def test_infer_column_type_samples_first_hundred():
    values = [10] * 100 + ["text"]
    assert infer_column_type(values) is ColumnType.NUMBER


def test_infer_column_type_custom_classifier():
    assert infer_column_type(["a", "b"], classifier=lambda v, f: CellKind.NUMBER) is ColumnType.NUMBER


def test_analyze_columns_counts():
    headers = ("name", "value", "empty")
    rows = (("Alpha", 10, None), ("Beta", 10), ("Alpha", None, None))
    profiles = analyze_columns(headers, rows)
    name, value, empty = profiles
    assert name.inferred_type is ColumnType.TEXT
    assert name.sample_values == ("Alpha", "Beta", "Alpha")
    assert (name.null_count, name.unique_count) == (0, 2)
    assert value.inferred_type is ColumnType.NUMBER
    assert (value.null_count, value.unique_count) == (1, 1)
    assert (empty.null_count, empty.unique_count) == (3, 0)


def test_analyze_columns_keeps_ten_samples():
    rows = tuple((i,) for i in range(25))
    (profile,) = analyze_columns(("n",), rows)
    assert profile.sample_values == tuple(range(10))


def _structure(rows, empty=frozenset(), header=0):
    return StructureInfo(
        header_row_index=header,
        data_start_row=header + 1 if header is not None else 0,
        data_end_row=len(rows) + (header + 1 if header is not None else 0) - 1,
        empty_row_indices=empty,
    )


def test_clean_table_scores_100():
    headers = ("name", "value")
    rows = (("Alpha", 1), ("Beta", 2))
    report = score_quality(headers, rows, True, analyze_columns(headers, rows), _structure(rows))
    assert report.score == 100
    assert report.issues == ()
    assert report.warnings == ()


def test_no_rows_and_no_headers():
    report = score_quality((), (), False, (), StructureInfo(data_start_row=0, data_end_row=-1))
    assert report.score == 40
    assert report.issues == ("No data rows found",)
    assert report.warnings == ("No headers detected - using auto-generated column names",)


def test_penalties_accumulate():
    headers = ("a", "a", "c")
    rows = (("x", 1, None), ("y", "z", None, "extra"))
    columns = analyze_columns(headers, rows)
    report = score_quality(headers, rows, True, columns, _structure(rows, empty=frozenset({5, 6})))
    # empty column -5, one ragged row -2, one mixed column -3, two empty rows -2, duplicate header -5
    assert report.score == 83
    assert "1 rows have inconsistent column count" in report.issues
    assert "1 completely empty columns found" in report.warnings
    assert "1 columns have mixed data types" in report.warnings
    assert "2 empty rows found" in report.warnings
    assert "Duplicate headers found: a" in report.warnings


def test_capped_penalties_and_floor():
    headers = tuple(f"c{i}" for i in range(30))
    rows = tuple(("x",) for _ in range(40))
    columns = analyze_columns(headers, rows)
    report = score_quality(headers, rows, False, columns, _structure(rows, header=None))
    assert report.score == 0
