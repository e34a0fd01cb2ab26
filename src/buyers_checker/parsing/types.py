from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FailureKind(str, Enum):
    """Typed failure classifications."""
    traversal = "traversal"     # directory could not be listed mid-walk
    io = "io"                   # file could not be opened/created/written
    csv = "csv"                 # structural CSV error (quoting, field count, encoding)
    worker = "worker"           # a validation unit died on something unexpected
    aggregate = "aggregate"     # one or more units of a directory run failed
    workbook = "workbook"
    config = "config"
    unknown = "unknown"         # a subclass that did not classify itself


@dataclass(frozen=True, slots=True)
class FileRecord:
    """An accepted row: both the index and the barcode parsed cleanly."""
    sequence_index: int     # column 0, an opaque label
    barcode: int            # column 4 minus its check digit, fits in u64


@dataclass(frozen=True, slots=True)
class AnomalyRecord:
    """A row whose barcode is not the previous accepted barcode minus one."""
    index: int
    data: int

    def to_row(self) -> tuple[str, str]:
        """The two report columns: `(index, barcode)`."""
        return str(self.index), str(self.data)
