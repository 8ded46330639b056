from __future__ import annotations

import logging
import re
import statistics
from collections.abc import Sequence
from pathlib import PurePath

from ..models.table import FileType
from .errors import UnsupportedFileTypeError

"""Encoding, delimiter and file type detection.

All detection works on bytes or text already in memory. Encoding detection
never raises; file type detection raises UnsupportedFileTypeError when the
content is neither a workbook nor delimited text.
"""

__all__ = [
    "DELIMITER_CANDIDATES",
    "detect_encoding",
    "detect_delimiter",
    "detect_file_type",
    "decode_text",
]

logger = logging.getLogger(__name__)

DELIMITER_CANDIDATES: tuple[str, ...] = (",", ";", "\t", "|", ":")

WORKBOOK_EXTENSIONS = {"xlsx", "xls", "xlsm"}
TEXT_EXTENSIONS = {"csv", "txt"}

ZIP_SIGNATURE = b"\x50\x4b"  # OOXML workbooks are zip containers
OLE_SIGNATURE = b"\xd0\xcf"  # legacy .xls compound documents

ENCODING_SAMPLE_BYTES = 1024
DELIMITER_SAMPLE_LINES = 10

# C0 controls except \t \n \r, plus DEL
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def detect_encoding(content: bytes) -> str:
    """Guess the text encoding of ``content``.

    BOMs decide first (UTF-8, UTF-16 LE/BE). Otherwise the first 1024 bytes are
    decoded as UTF-8; invalid sequences or control characters mean latin-1.
    A multi-byte character cut by the sample boundary does not count as invalid.
    """
    if content.startswith(b"\xef\xbb\xbf"):
        return "utf-8"
    if content.startswith(b"\xff\xfe"):
        return "utf-16-le"
    if content.startswith(b"\xfe\xff"):
        return "utf-16-be"

    sample = content[:ENCODING_SAMPLE_BYTES]
    try:
        text = sample.decode("utf-8")
    except UnicodeDecodeError as e:
        truncated = len(content) > len(sample) and e.reason == "unexpected end of data"
        if not truncated:
            return "latin-1"
        text = sample[: e.start].decode("utf-8", errors="replace")
    if _CONTROL_CHARS.search(text):
        return "latin-1"
    return "utf-8"


def decode_text(content: bytes, encoding: str) -> str:
    """Decode bytes and drop a leading BOM."""
    return content.decode(encoding, errors="replace").lstrip("\ufeff")


def detect_delimiter(
    text: str, candidates: Sequence[str] = DELIMITER_CANDIDATES
) -> str | None:
    """Pick the field delimiter that appears a steady number of times per line.

    For each candidate the per-line counts over the first 10 non-blank lines are
    scored as ``mean / (1 + variance)``. The best positive score wins; earlier
    candidates win ties. Returns None when no candidate appears at all.
    """
    lines = [line for line in text.splitlines() if line.strip()][:DELIMITER_SAMPLE_LINES]
    if not lines:
        return None

    best: str | None = None
    best_score = 0.0
    for delimiter in candidates:
        counts = [line.count(delimiter) for line in lines]
        mean = statistics.fmean(counts)
        if mean == 0:
            continue
        variance = statistics.pvariance(counts, mu=mean)
        score = mean / (1 + variance)
        logger.debug("delimiter %r mean=%.2f variance=%.2f score=%.3f", delimiter, mean, variance, score)
        if score > best_score:
            best, best_score = delimiter, score
    return best


def detect_file_type(content: bytes, file_name: str) -> FileType:
    """Decide between the workbook and delimited text paths.

    Order: workbook extension, text extension confirmed by a delimiter in the
    first 1KB, ZIP/OLE signature, then a delimiter in the first 2KB.
    """
    extension = PurePath(file_name).suffix.lower().lstrip(".")
    if extension in WORKBOOK_EXTENSIONS:
        return FileType.WORKBOOK

    if extension in TEXT_EXTENSIONS:
        sample = content[:1024].decode("utf-8", errors="replace")
        if detect_delimiter(sample):
            return FileType.DELIMITED

    signature = content[:8]
    if signature.startswith(ZIP_SIGNATURE) or signature.startswith(OLE_SIGNATURE):
        return FileType.WORKBOOK

    sample = content[:2048].decode("utf-8", errors="replace")
    if detect_delimiter(sample):
        return FileType.DELIMITED

    raise UnsupportedFileTypeError(f"Unsupported file type: {file_name}")
