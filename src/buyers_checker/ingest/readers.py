from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterator


class FieldCountError(csv.Error):
    """A row's field count differs from the first row's (strict mode only)."""

    def __init__(self, line: int, expected: int, got: int) -> None:
        super().__init__(f"found record with {got} fields, but the previous record has {expected} fields")
        self.line = line
        self.expected = expected
        self.got = got


def stream_csv_rows(path: Path, *, strict: bool = True) -> Iterator[tuple[int, list[str]]]:
    """
    Yields `(source_row, fields)` for every row of a headerless CSV file.

    `source_row` is 1-based, the first line is data (there is no header).
    Rows are streamed one at a time, the file is never held in memory.

    With `strict=True`:
    - quoting mistakes raise `csv.Error` (the reader's own strict dialect flag),
    - a row whose field count differs from the first row's raises `FieldCountError`.

    Blank lines are skipped.
    """
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.reader(f, strict=strict)
        width: int | None = None
        for i, row in enumerate(reader, start=1):
            if not row:
                continue
            if strict:
                if width is None:
                    width = len(row)
                elif len(row) != width:
                    raise FieldCountError(reader.line_num, width, len(row))
            yield i, row    # pairs
