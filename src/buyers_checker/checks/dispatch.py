from __future__ import annotations

import csv
import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from pathlib import Path

from buyers_checker.checks.gaps import GapDetector, stream_file_records, translate_read_errors
from buyers_checker.checks.report import open_report
from buyers_checker.checks.summary import DirectoryScan, FileScan
from buyers_checker.errors import (
    BuyersCheckerError,
    DirectoryValidationError,
    FileValidationError,
    TraversalError,
    WorkerFailure,
)
from buyers_checker.ingest.walker import walk_files

logger = logging.getLogger(__name__)


THREAD_NAME_PREFIX = "buyers-checker-pool"


def validate_file(input_path: Path, output_dir: Path, *, strict: bool = True) -> FileScan:
    """
    Check one file and write its report into `output_dir`.

    The input is streamed record by record: each anomaly is logged and written
    to the report as soon as it is found.

    Raises:
    - `FileIOError` when the input cannot be read or the report cannot be written,
    - `StructuralCsvError` when the input is not well-formed CSV.
    A field that fails to parse as an integer is not an error, the row is just skipped.
    """
    input_path = Path(input_path)
    output_dir = Path(output_dir)
    logger.debug("checking file %s", input_path)

    detector = GapDetector()
    try:
        records = stream_file_records(input_path, strict=strict)
        with open_report(output_dir, input_path) as report:
            for anomaly in detector.scan(records):
                logger.error(
                    "sequence break in %s: index=%s barcode=%s",
                    input_path, anomaly.index, anomaly.data,
                )
                report.write(anomaly)
    except (OSError, csv.Error, UnicodeDecodeError) as e:
        raise translate_read_errors(input_path, e) from e

    return FileScan(
        input_path=input_path,
        report_path=report.path,
        accepted=detector.accepted,
        anomalies=report.rows,
    )


def _collect(future: Future[FileScan], path: Path) -> FileScan | BuyersCheckerError:
    """
    Join one unit. Never raises: failures come back as values.

    Anything other than a `FileValidationError` means the unit died on something
    unexpected, and is converted to a `WorkerFailure` here so it cannot unwind
    past the fan-in point.
    """
    try:
        return future.result()
    except FileValidationError as e:
        return e
    except KeyboardInterrupt:
        raise
    except BaseException as e:
        logger.error("worker for %s terminated abnormally", path, exc_info=e)
        return WorkerFailure(path, e)


def _is_within(path: Path, root: Path) -> bool:
    """`path` is `root` or lies somewhere below it."""
    resolved = path.resolve()
    return resolved == root or root in resolved.parents


def validate_directory(
    input_dir: Path,
    output_dir: Path,
    *,
    max_workers: int | None = None,
    strict: bool = True,
) -> DirectoryScan:
    """
    Check every file under `input_dir` concurrently.

    - One unit of work per file, run on a thread pool bounded by `max_workers`
      (`None` -> the executor's default).
    - A file in a subdirectory gets its report in the matching subdirectory of
      `output_dir`, named like the input file.
    - Every unit runs to completion, a failing file does not stop its siblings.
    - Traversal errors are collected alongside unit failures.
    - Files inside `output_dir` (when it sits under `input_dir`) are skipped.

    Raises `DirectoryValidationError` if anything failed; its `first` is the first
    failure encountered and every failure is logged.
    """
    input_dir = Path(input_dir)
    output_dir = Path(output_dir)
    logger.info("checking directory %s", input_dir)
    output_root = output_dir.resolve()

    failures: list[BuyersCheckerError] = []
    scans: list[FileScan] = []

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=THREAD_NAME_PREFIX) as ex:
        futures: dict[Future[FileScan], Path] = {}

        ## -- fan out
        for item in walk_files(input_dir):
            if isinstance(item, TraversalError):
                logger.error("%s", item)
                failures.append(item)
                continue

            path = Path(item.path)
            if not item.is_file():
                logger.warning("path is not a file: %s", path)
                continue
            if _is_within(path, output_root):
                logger.warning("skipping %s, it is inside the output folder", path)
                continue

            dest = output_dir / path.parent.relative_to(input_dir)
            futures[ex.submit(validate_file, path, dest, strict=strict)] = path

        ## -- fan in, waits for every unit
        for future in as_completed(futures):
            path = futures[future]
            res = _collect(future, path)
            if isinstance(res, FileScan):
                scans.append(res)
            else:
                logger.error("%s", res)
                failures.append(res)

    if failures:
        raise DirectoryValidationError(input_dir, failures)

    # reproducible summary order regardless of completion order
    scans.sort(key=lambda s: str(s.input_path))
    return DirectoryScan(input_dir=input_dir, output_dir=output_dir, files=tuple(scans))
