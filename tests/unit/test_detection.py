from __future__ import annotations

import pytest

from ledger_intake.models.table import FileType
from ledger_intake.parsing.detection import (
    decode_text,
    detect_delimiter,
    detect_encoding,
    detect_file_type,
)
from ledger_intake.parsing.errors import ParsingError, UnsupportedFileTypeError


class TestDetectEncoding:
    def test_boms(self):
        assert detect_encoding(b"\xef\xbb\xbfa;b") == "utf-8"
        assert detect_encoding(b"\xff\xfea\x00") == "utf-16-le"
        assert detect_encoding(b"\xfe\xff\x00a") == "utf-16-be"

    def test_plain_utf8(self):
        assert detect_encoding("código;descrição\n".encode("utf-8")) == "utf-8"

    def test_control_characters_fall_back_to_latin1(self):
        assert detect_encoding(b"a;b\x01\n") == "latin-1"

    def test_invalid_utf8_falls_back_to_latin1(self):
        assert detect_encoding("código;valor".encode("latin-1")) == "latin-1"

    def test_multibyte_character_cut_by_sample_is_utf8(self):
        content = b"a" * 1023 + "é".encode("utf-8") + b"rest"
        assert detect_encoding(content) == "utf-8"

    def test_invalid_byte_at_end_of_sample_is_latin1(self):
        content = b"a" * 1022 + "é".encode("latin-1") + b"," + b"x" * 50
        assert detect_encoding(content) == "latin-1"

    def test_empty_content(self):
        assert detect_encoding(b"") == "utf-8"


def test_decode_text_drops_bom():
    assert decode_text(b"\xef\xbb\xbfa;b", "utf-8") == "a;b"


class TestDetectDelimiter:
    def test_semicolon_wins_over_stray_commas(self):
        lines = ["name;code;value;date;note"]
        for i in range(9):
            note = "free text, with a comma" if i % 3 == 0 else "plain"
            lines.append(f"Item {i};C{i};{i}0;01/01/2024;{note}")
        assert detect_delimiter("\n".join(lines)) == ";"

    def test_tab_and_pipe(self):
        assert detect_delimiter("a\tb\tc\n1\t2\t3\n") == "\t"
        assert detect_delimiter("a|b\n1|2\n") == "|"

    def test_none_when_no_candidate_appears(self):
        assert detect_delimiter("just words\nmore words\n") is None
        assert detect_delimiter("") is None

    def test_single_line(self):
        assert detect_delimiter("a,b,c") == ","

    def test_candidates_restrict_search(self):
        assert detect_delimiter("a;b\n1;2\n", candidates=(",",)) is None


class TestDetectFileType:
    def test_workbook_extension(self):
        assert detect_file_type(b"", "Report.XLSX") is FileType.WORKBOOK

    def test_csv_extension_with_delimiter(self):
        assert detect_file_type(b"a,b\n1,2\n", "data.csv") is FileType.DELIMITED

    def test_zip_signature_without_extension(self):
        assert detect_file_type(b"PK\x03\x04rest", "upload.bin") is FileType.WORKBOOK

    def test_ole_signature(self):
        assert detect_file_type(b"\xd0\xcf\x11\xe0", "legacy.dat") is FileType.WORKBOOK

    def test_delimited_content_without_extension(self):
        assert detect_file_type(b"a;b\n1;2\n", "export") is FileType.DELIMITED

    def test_unsupported(self):
        with pytest.raises(UnsupportedFileTypeError, match="Unsupported file type: notes.csv"):
            detect_file_type(b"nothing to split here", "notes.csv")

    def test_unsupported_is_parsing_error(self):
        assert issubclass(UnsupportedFileTypeError, ParsingError)
