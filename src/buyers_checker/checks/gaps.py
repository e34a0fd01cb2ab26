from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

from buyers_checker.errors import FileIOError, StructuralCsvError
from buyers_checker.ingest.readers import stream_csv_rows
from buyers_checker.parsing.primitives import parse_file_record
from buyers_checker.parsing.types import AnomalyRecord, FileRecord


class GapDetector:
    """
    Checks that barcodes count down by exactly one, record after record.

    Holds a single cursor: the previous *accepted* record. Every record fed in
    is compared to that cursor and then becomes the cursor, whether or not it
    passed, so each record is checked against its true predecessor and not
    against the last anomaly-free one.
    """

    def __init__(self) -> None:
        self.previous: FileRecord | None = None
        self.accepted = 0

    def feed(self, record: FileRecord) -> AnomalyRecord | None:
        """Advance the cursor to `record`. Returns an anomaly when the sequence breaks there."""
        self.accepted += 1
        previous, self.previous = self.previous, record

        # the first record has nothing to compare to, and a predecessor of 0 has no "minus one".
        if previous is None or previous.barcode == 0:
            return None
        if record.barcode != previous.barcode - 1:
            return AnomalyRecord(index=record.sequence_index, data=record.barcode)
        return None

    def scan(self, records: Iterable[FileRecord]) -> Iterator[AnomalyRecord]:
        """Feed every record through, yielding anomalies in encounter order."""
        for record in records:
            anomaly = self.feed(record)
            if anomaly is not None:
                yield anomaly


def stream_file_records(path: Path, *, strict: bool = True) -> Iterator[FileRecord]:
    """
    Accepted records of one file, in file order.

    Rows with an unparsable index or barcode are dropped here, they never reach the detector.
    """
    for _source_row, row in stream_csv_rows(path, strict=strict):
        record = parse_file_record(row)
        if record is not None:
            yield record


def translate_read_errors(path: Path, exc: Exception) -> Exception:
    """
    Map a low-level read failure onto the file-scoped error taxonomy.

    Returns `exc` unchanged when it is not a read failure we know about.
    """
    if isinstance(exc, OSError):
        return FileIOError(path, exc)
    if isinstance(exc, csv.Error):
        return StructuralCsvError(path, str(exc), line=getattr(exc, "line", None))
    if isinstance(exc, UnicodeDecodeError):
        return StructuralCsvError(path, f"invalid UTF-8: {exc.reason}")
    return exc


@dataclass(frozen=True)
class GapScan:
    """Every break found in one file, and how many records were accepted."""
    path: Path
    anomalies: tuple[AnomalyRecord, ...]
    accepted: int


def detect_gaps(path: Path, *, strict: bool = True) -> GapScan:
    """
    Run the detector over one file without writing a report.

    Raises `FileIOError` when the file cannot be read, `StructuralCsvError`
    when the CSV itself is malformed.
    """
    detector = GapDetector()
    try:
        anomalies = tuple(detector.scan(stream_file_records(path, strict=strict)))
    except (OSError, csv.Error, UnicodeDecodeError) as e:
        raise translate_read_errors(path, e) from e
    return GapScan(path=path, anomalies=anomalies, accepted=detector.accepted)
