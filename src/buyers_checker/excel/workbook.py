from __future__ import annotations

import csv
import io
import logging
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from openpyxl import Workbook
from openpyxl.packaging.workbook import WorkbookPackage
from openpyxl.workbook.protection import FileSharing
from openpyxl.worksheet.worksheet import Worksheet
from openpyxl.xml.functions import fromstring, tostring

from buyers_checker.errors import TraversalError, WorkbookError
from buyers_checker.ingest.walker import walk_files

logger = logging.getLogger(__name__)


WORKBOOK_NAME = "output.xlsx"
MAX_SHEET_NAME = 31             # Excel's hard limit on sheet titles
_WORKBOOK_PART = "xl/workbook.xml"


@dataclass(frozen=True)
class WorkbookSummary:
    """What went into the written workbook."""
    path: Path
    sheets: tuple[str, ...]

    def render_one_line(self) -> str:
        return f"workbook: sheets={len(self.sheets)} path={self.path}"


def sheet_name_for(path: Path) -> str:
    """
    File name without its extension, cut to 31 characters.

    Truncated names are not made unique, a clash aborts the workbook.
    """
    if not path.name:
        raise WorkbookError("no file name was present in the path", path=path)
    return path.stem[:MAX_SHEET_NAME]


def iter_csv_files(root: Path) -> Iterator[Path]:
    """
    Every `*.csv` file under `root`, via the walker.

    A listing failure raises here: the workbook pass is all-or-nothing.
    """
    for item in walk_files(root):
        if isinstance(item, TraversalError):
            raise WorkbookError(str(item), path=item.path) from item.cause
        path = Path(item.path)
        if path.suffix == ".csv":
            yield path


def _fill_sheet(sheet: Worksheet, path: Path) -> int:
    """
    Copy columns 0 and 1 of every row of `path` into `sheet` as text cells.

    Source row N lands on sheet row N (1-based). Returns the number of rows copied.
    """
    n = 0
    with path.open("r", encoding="utf-8", newline="") as f:
        for n, row in enumerate(csv.reader(f, strict=True), start=1):
            if len(row) < 2:
                raise WorkbookError(f"line {n}: expected 2 fields, found {len(row)}", path=path)
            for col, value in enumerate(row[:2], start=1):
                cell = sheet.cell(row=n, column=col, value=value)
                cell.data_type = "s"    # verbatim, even if it starts with '='
    return n


def _mark_read_only_recommended(buffer: bytes) -> bytes:
    """
    Set `<fileSharing readOnlyRecommended="1"/>` on a saved workbook.

    openpyxl's writer never emits `fileSharing`, so the workbook part is
    re-serialized through openpyxl's own package model with the flag set.
    All other parts are copied unchanged.
    """
    src = zipfile.ZipFile(io.BytesIO(buffer))
    out = io.BytesIO()
    with src, zipfile.ZipFile(out, "w", zipfile.ZIP_DEFLATED) as dst:
        for info in src.infolist():
            data = src.read(info.filename)
            if info.filename == _WORKBOOK_PART:
                package = WorkbookPackage.from_tree(fromstring(data))
                package.fileSharing = FileSharing(readOnlyRecommended=True)
                data = tostring(package.to_tree())
            dst.writestr(info, data)
    return out.getvalue()


def build_workbook(output_dir: Path) -> WorkbookSummary:
    """
    Fold every `.csv` file under `output_dir` into one workbook, one sheet per file.

    Files are processed one after another into a single workbook object. Once
    all sheets are in, the workbook is serialized in memory, flagged
    read-only-recommended, and written to `output_dir/output.xlsx`.

    Any failure raises `WorkbookError` before anything is written.
    """
    output_dir = Path(output_dir)
    logger.info("building workbook from %s", output_dir)

    wb = Workbook()
    wb.remove(wb.active)    # drop the default empty sheet
    names: list[str] = []

    try:
        for path in iter_csv_files(output_dir):
            name = sheet_name_for(path)
            # sheet titles clash case-insensitively; openpyxl would rename past 31 chars, refuse instead.
            if name.lower() in (n.lower() for n in wb.sheetnames):
                raise WorkbookError(f"duplicate sheet name {name!r}", path=path)
            logger.debug("adding sheet %r from %s", name, path)
            sheet = wb.create_sheet(title=name)
            rows = _fill_sheet(sheet, path)
            names.append(sheet.title)
            logger.debug("sheet %r: %s rows", sheet.title, rows)

        if not names:
            # a workbook needs at least one sheet to be saved
            logger.warning("no .csv files under %s, writing a blank workbook", output_dir)
            wb.create_sheet()

        buf = io.BytesIO()
        wb.save(buf)
        data = _mark_read_only_recommended(buf.getvalue())

        target = output_dir / WORKBOOK_NAME
        target.write_bytes(data)
    except WorkbookError:
        raise
    except (OSError, csv.Error, UnicodeDecodeError) as e:
        raise WorkbookError(f"could not build workbook: {e}", path=output_dir) from e
    except (ValueError, KeyError, IndexError, TypeError, zipfile.BadZipFile) as e:
        # openpyxl reports bad titles and serialization problems this way
        raise WorkbookError(f"spreadsheet error: {e}", path=output_dir) from e

    logger.info("wrote %s with %s sheets", target, len(names))
    return WorkbookSummary(path=target, sheets=tuple(names))
