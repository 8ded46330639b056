from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from ledger_intake.config.loader import ConfigError, load_config, resolve_config_path
from ledger_intake.logging.init import log_summary, set_debug, setup_logging
from ledger_intake.models.config_models import IntakeConfig
from ledger_intake.parsing.errors import ParsingError
from ledger_intake.parsing.pipeline import parse_file
from ledger_intake.services.orchestrator import ProcessingError, process_all, scan_input_files
from ledger_intake.services.report import generate_parsing_report

"""CLI entrypoint.

Flow:
- Load .env, resolve and load the YAML config
- --inspect-data: print a parsing report per input file and exit
- otherwise: validate every input file, print reports on request, log SUMMARY
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


def _load_env_file(path: Path) -> None:
    """Load .env without overriding variables already set in the process."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=False)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Spreadsheet intake and validation for financial facts")
    p.add_argument("--config", type=Path, default=None, help="Path to the YAML config")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print parsing reports then exit")
    p.add_argument("--report", action="store_true", help="Print the validation report of each file")
    return p.parse_args(argv)


def _inspect_data(cfg: IntakeConfig) -> int:
    files = scan_input_files(Path(cfg.source_directory), cfg.extensions)
    if not files:
        print("inspect: no input files")
        return EXIT_SUCCESS_ALL
    for f in files:
        print(f"FILE: {f.name}")
        try:
            parsed = parse_file(f.read_bytes(), f.name, cfg.parsing)
        except (OSError, ParsingError) as e:
            print(f"  read_error: {e}")
            continue
        print(generate_parsing_report(parsed))
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None only -> read sys.argv; an explicit [] must not pick up pytest's args
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"))

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    config_path = resolve_config_path(args.config)
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    directory = Path(cfg.source_directory)
    if not directory.is_dir():
        logger.error(f"directory not found: {directory}")
        return EXIT_FATAL

    logger.info(f"Processing files from: {directory}")

    try:
        if args.inspect_data:
            return _inspect_data(cfg)
        result = process_all(cfg)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    if args.report:
        for stat in result.file_stats or []:
            print(f"FILE: {stat.file_name}")
            print(stat.report if stat.report is not None else f"  failed: {stat.error}")

    log_summary(result.success_files + result.failed_files, result)

    if result.failed_files > 0 or result.invalid_records > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
