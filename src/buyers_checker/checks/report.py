from __future__ import annotations

import csv
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator

from buyers_checker.parsing.types import AnomalyRecord


FALLBACK_REPORT_NAME = "FAIL.txt"       # used when an input path has no file name


def report_path_for(output_dir: Path, input_path: Path) -> Path:
    """The report mirrors the input's file name inside `output_dir`."""
    return output_dir / (input_path.name or FALLBACK_REPORT_NAME)


class ReportWriter:
    """Appends anomalies as headerless `index,barcode` rows, in the order received."""

    def __init__(self, handle: IO[str], path: Path) -> None:
        self.path = path
        self.rows = 0
        self._writer = csv.writer(handle, lineterminator="\n")

    def write(self, anomaly: AnomalyRecord) -> None:
        self._writer.writerow(anomaly.to_row())
        self.rows += 1


@contextmanager
def open_report(output_dir: Path, input_path: Path) -> Iterator[ReportWriter]:
    """
    Create (or truncate) the report file for `input_path` and yield its writer.

    The report exists even when nothing is written to it: an empty report means
    the file checked out. If the body raises, the half-written report is removed
    before the exception propagates, so a failed file never leaves a report behind.
    """
    path = report_path_for(output_dir, input_path)
    output_dir.mkdir(parents=True, exist_ok=True)

    with path.open("w", encoding="utf-8", newline="") as f:
        try:
            yield ReportWriter(f, path)
        except BaseException:
            f.close()
            path.unlink(missing_ok=True)
            raise
