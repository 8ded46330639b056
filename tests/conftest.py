# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path

import pandas as pd  # type: ignore
import pytest

from ledger_intake.logging.init import reset_logging


@pytest.fixture(autouse=True)
def _fresh_logging():
    # the stdout handler must bind to the stream captured for each test
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("LEDGER_INTAKE_CONFIG", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
columns:
  entity_code: entity_code
  account_code: account_code
  scenario_id: scenario
  year: year
  month: month
  value: value
defaults:
  scenario_id: real
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "intake.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def make_excel_file(directory: Path, name: str, sheets: dict[str, list[list[object]]]) -> Path:
    """Create a real workbook; each sheet is written without pandas headers."""
    excel_path = directory / name
    with pd.ExcelWriter(excel_path, engine="openpyxl") as writer:
        for sheet_name, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
    return excel_path


@pytest.fixture()
def excel_builder(tmp_path: Path):
    def _build(name: str, sheets: dict[str, list[list[object]]]) -> Path:
        return make_excel_file(tmp_path, name, sheets)
    return _build


FACT_HEADER = ["entity_code", "account_code", "scenario", "year", "month", "value"]


@pytest.fixture()
def fact_rows() -> list[list[object]]:
    return [
        FACT_HEADER,
        ["ACME", "1000", "real", 2020, 6, 1500.5],
        ["ACME", "2000", "budget", 2020, 7, 320.0],
    ]


@pytest.fixture()
def excel_factory():
    """make_excel_file for tests that need workbooks in a specific directory."""
    return make_excel_file
