from __future__ import annotations

"""Parsing exceptions.

Raised for input the parser cannot handle at all. These abort processing of
that one file; data problems inside a readable file are reported through
quality scores and validation results instead.
"""

__all__ = [
    "ParsingError",
    "UnsupportedFileTypeError",
    "SheetNotFoundError",
    "DelimiterNotFoundError",
]


class ParsingError(Exception):
    """Base class for errors that stop a file from being parsed."""


class UnsupportedFileTypeError(ParsingError):
    """Raised when neither a workbook signature nor a delimiter is found."""


class SheetNotFoundError(ParsingError):
    """Raised when the configured sheet is absent from the workbook."""


class DelimiterNotFoundError(ParsingError):
    """Raised when delimited text yields no plausible field separator."""
