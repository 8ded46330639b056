"""Domain models for the ledger intake pipeline.

This package contains the value types shared by parsing, validation and
orchestration: cell kinds, parsed table metadata, financial fact candidates
and validation results, configuration objects and run results.
"""

from .cells import Cell, CellKind, RawTable
from .config_models import IntakeConfig, ParsingConfig, ValidationConfig
from .financial import (
    AccountRef,
    BatchSummary,
    BatchValidationResult,
    DuplicateGroups,
    EntityRef,
    FinancialFactCandidate,
    InvalidRecord,
    ValidationResult,
)
from .table import (
    ColumnProfile,
    ColumnType,
    FileMetadata,
    FileType,
    ParsedTable,
    QualityReport,
    StructureInfo,
)

__all__ = [
    # Cells
    "Cell",
    "CellKind",
    "RawTable",
    # Configuration models
    "IntakeConfig",
    "ParsingConfig",
    "ValidationConfig",
    # Parsed table models
    "ColumnProfile",
    "ColumnType",
    "FileMetadata",
    "FileType",
    "ParsedTable",
    "QualityReport",
    "StructureInfo",
    # Financial models
    "AccountRef",
    "BatchSummary",
    "BatchValidationResult",
    "DuplicateGroups",
    "EntityRef",
    "FinancialFactCandidate",
    "InvalidRecord",
    "ValidationResult",
]
