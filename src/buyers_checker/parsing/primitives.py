from __future__ import annotations

from typing import Sequence

from .types import FileRecord


INDEX_COLUMN = 0
BARCODE_COLUMN = 4

# barcodes are unsigned 64-bit values, the index is held to the same width.
U64_MAX = 2**64 - 1


def _parse_u64(s: str) -> int | None:
    """
    Parse an unsigned 64-bit integer out of `s`.

    Only plain ASCII digits are accepted: no sign, no surrounding whitespace,
    no `_` separators (all of which `int()` would quietly allow).
    Returns `None` instead of raising, a bad field is an exclusion and not an error.
    """
    if not s or not s.isascii() or not s.isdigit():
        return None
    n = int(s)
    if n > U64_MAX:
        return None
    return n


def parse_sequence_index(v: str) -> int | None:
    """Column 0 as an unsigned int, or `None`."""
    return _parse_u64(v)


def parse_barcode(v: str) -> int | None:
    """
    Column 4 with its trailing check digit removed, as an unsigned 64-bit int.

    `"1005X"` -> `1005`, `"10057"` -> `1005`, `"7"` -> `None` (nothing left to parse).
    """
    if not v:
        return None
    return _parse_u64(v[:-1])


def parse_file_record(row: Sequence[str]) -> FileRecord | None:
    """
    Build a `FileRecord` from one raw CSV row.

    Rows that are too short, or whose index/barcode fail to parse, return `None`
    and are dropped from the record stream by the caller.
    """
    if len(row) <= BARCODE_COLUMN:
        return None
    index = parse_sequence_index(row[INDEX_COLUMN])
    barcode = parse_barcode(row[BARCODE_COLUMN])
    if index is None or barcode is None:
        return None
    return FileRecord(sequence_index=index, barcode=barcode)
