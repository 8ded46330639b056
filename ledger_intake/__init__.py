"""Spreadsheet intake and validation for monthly financial facts.

Entry points:
- ledger_intake.parsing.pipeline.parse_file: bytes -> ParsedTable
- ledger_intake.validation.record.validate_fact / sanitize_fact
- ledger_intake.validation.batch.validate_batch
- ledger_intake.validation.duplicates.detect_duplicates
- ledger_intake.services.report.generate_validation_report
"""

__version__ = "0.1.0"
