from __future__ import annotations

import json
import re
from datetime import date
from pathlib import Path

from ledger_intake.cli import main as cli_main

"""Error log contract: logs/errors-YYYYMMDD-HHMMSS.log, one JSON object per line.

Keys: timestamp (ISO8601 UTC, Z suffix), file, row (data row, -1 for file-level
errors), error_type (UPPER_SNAKE), message.
"""

REQUIRED_KEYS = {"timestamp", "file", "row", "error_type", "message"}
TIMESTAMP = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?Z$")


def test_error_log_lines_follow_contract(write_config, temp_workdir: Path):
    year = date.today().year - 1
    data = temp_workdir / "data"
    (data / "facts.csv").write_text(
        "entity_code;account_code;scenario;year;month;value\n"
        f"ACME;1000;real;{year};1;10\n"
        f"ACME;1000;real;{year};0;10\n",
        encoding="utf-8",
    )
    (data / "garbage.txt").write_text("no delimiter at all", encoding="utf-8")

    assert cli_main([]) == 2

    logs = list((temp_workdir / "logs").glob("errors-*.log"))
    assert len(logs) == 1
    assert re.match(r"^errors-\d{8}-\d{6}\.log$", logs[0].name)
    entries = [json.loads(line) for line in logs[0].read_text(encoding="utf-8").splitlines()]
    for entry in entries:
        assert set(entry) == REQUIRED_KEYS
        assert TIMESTAMP.match(entry["timestamp"])
        assert re.match(r"^[A-Z_]+$", entry["error_type"])
    by_type = {e["error_type"]: e for e in entries}
    assert by_type["VALIDATION_ERROR"]["file"] == "facts.csv"
    assert by_type["VALIDATION_ERROR"]["row"] == 3
    assert by_type["PARSE_ERROR"]["row"] == -1


def test_no_error_log_for_clean_run(write_config, temp_workdir: Path):
    assert cli_main([]) == 0
    assert list((temp_workdir / "logs").glob("errors-*.log")) == []
