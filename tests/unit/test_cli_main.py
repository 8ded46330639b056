from __future__ import annotations
from datetime import date
from pathlib import Path

from ledger_intake.cli import main as cli_main

YEAR = date.today().year - 1


def _write_facts(data_dir: Path, name: str = "facts.csv", extra: str = "") -> Path:
    p = data_dir / name
    p.write_text(
        "entity_code;account_code;scenario;year;month;value\n"
        f"ACME;1000;real;{YEAR};1;100.5\n" + extra,
        encoding="utf-8",
    )
    return p


def test_cli_no_files_success(write_config, temp_workdir: Path, capsys):
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == 0
    assert "SUMMARY files=0/0 success=0 failed=0 records=0 valid=0 invalid=0" in out


def test_cli_directory_missing(write_config, temp_workdir: Path, capsys):
    text = write_config.read_text(encoding="utf-8").replace("./data", "./missing_dir")
    write_config.write_text(text, encoding="utf-8")
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR directory not found:" in out


def test_cli_config_missing(temp_workdir: Path, capsys):
    code = cli_main([])
    assert code == 1
    assert "ERROR config: config file not found" in capsys.readouterr().out


def test_cli_config_invalid(temp_workdir: Path, capsys):
    (temp_workdir / "config" / "intake.yml").write_text("source_directory: ./data\n", encoding="utf-8")
    code = cli_main([])
    assert code == 1
    assert "ERROR config: config validation failed" in capsys.readouterr().out


def test_cli_explicit_config_path(write_config, temp_workdir: Path, capsys):
    moved = temp_workdir / "elsewhere.yml"
    write_config.rename(moved)
    code = cli_main(["--config", str(moved)])
    assert code == 0


def test_cli_config_from_env_file(write_config, temp_workdir: Path, monkeypatch, capsys):
    # registered so that teardown removes the value load_dotenv sets
    monkeypatch.setenv("LEDGER_INTAKE_CONFIG", "")
    monkeypatch.delenv("LEDGER_INTAKE_CONFIG")
    moved = temp_workdir / "from_env.yml"
    write_config.rename(moved)
    (temp_workdir / ".env").write_text(f"LEDGER_INTAKE_CONFIG={moved}\n", encoding="utf-8")
    code = cli_main([])
    assert code == 0
    assert "SUMMARY files=0/0" in capsys.readouterr().out


def test_cli_success_with_report(write_config, temp_workdir: Path, capsys):
    _write_facts(temp_workdir / "data")
    code = cli_main(["--report"])
    out = capsys.readouterr().out
    assert code == 0
    assert "FILE: facts.csv" in out
    assert "=== VALIDATION REPORT ===" in out
    assert "SUMMARY files=1/1 success=1 failed=0 records=1 valid=1 invalid=0" in out


def test_cli_invalid_records_exit_partial(write_config, temp_workdir: Path, capsys):
    _write_facts(temp_workdir / "data", extra=f"ACME;1000;nope;{YEAR};1;5\n")
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == 2
    assert "invalid=1" in out


def test_cli_debug_mode(write_config, temp_workdir: Path, capsys):
    _write_facts(temp_workdir / "data")
    code = cli_main(["--debug"])
    out = capsys.readouterr().out
    assert code == 0
    assert "DEBUG debug mode enabled" in out
    assert "DEBUG parsing file: facts.csv" in out


def test_cli_inspect_data(write_config, temp_workdir: Path, capsys):
    _write_facts(temp_workdir / "data")
    (temp_workdir / "data" / "broken.txt").write_text("no table", encoding="utf-8")
    code = cli_main(["--inspect-data"])
    out = capsys.readouterr().out
    assert code == 0
    assert "FILE: facts.csv" in out
    assert "=== FILE PARSING REPORT ===" in out
    assert "read_error: Unsupported file type: broken.txt" in out
    assert "SUMMARY" not in out
    assert not list((temp_workdir / "logs").iterdir())
