from __future__ import annotations

import pytest

from buyers_checker.parsing.primitives import U64_MAX, parse_barcode, parse_file_record, parse_sequence_index
from buyers_checker.parsing.types import FileRecord


def test_barcode_drops_trailing_check_character() -> None:
    """The last character is a check digit, not part of the value."""
    assert parse_barcode("1005X") == 1005
    assert parse_barcode("10057") == 1005
    assert parse_barcode("07") == 0


@pytest.mark.parametrize("raw", ["", "7", "abcX", "-15X", "+15X", " 15X", "1_000X", "1.5X"])
def test_barcode_rejects_non_digits(raw: str) -> None:
    """Anything but plain ASCII digits before the check digit -> `None`."""
    assert parse_barcode(raw) is None


def test_barcode_u64_bounds() -> None:
    """Values must fit an unsigned 64-bit integer."""
    assert parse_barcode(f"{U64_MAX}9") == U64_MAX
    assert parse_barcode(f"{U64_MAX + 1}9") is None


def test_sequence_index_parses_whole_field() -> None:
    """Column 0 keeps every character."""
    assert parse_sequence_index("42") == 42
    assert parse_sequence_index("4 2") is None
    assert parse_sequence_index("") is None
    assert parse_sequence_index("٣") is None     # non-ASCII digit


def test_file_record_happy_path() -> None:
    row = ["3", "name", "2026-01-01", "x", "1024"]
    assert parse_file_record(row) == FileRecord(sequence_index=3, barcode=102)


def test_file_record_short_row_is_dropped() -> None:
    """Fewer than 5 columns -> no barcode -> excluded."""
    assert parse_file_record(["1", "a", "b", "c"]) is None


def test_file_record_bad_index_is_dropped() -> None:
    assert parse_file_record(["index", "a", "b", "c", "1024"]) is None
