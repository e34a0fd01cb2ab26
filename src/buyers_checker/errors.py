from __future__ import annotations

from pathlib import Path
from typing import Sequence

from buyers_checker.parsing.types import FailureKind


class BuyersCheckerError(Exception):
    """Base for every failure the checker reports. `kind` classifies it."""
    kind: FailureKind = FailureKind.unknown

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigError(BuyersCheckerError):
    """Fatal misconfiguration, e.g. neither a file nor a folder to check."""
    kind = FailureKind.config


class TraversalError(BuyersCheckerError):
    """
    A directory could not be listed while walking.

    Walkers yield these inline instead of raising, so the walk can move on
    to the next pending directory.
    """
    kind = FailureKind.traversal

    def __init__(self, path: Path, cause: OSError) -> None:
        super().__init__(f"could not list directory {path}: {cause}")
        self.path = path
        self.cause = cause


class FileValidationError(BuyersCheckerError):
    """A single file's validation failed. Fatal to that file only."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


class FileIOError(FileValidationError):
    """Input could not be read or its report could not be written."""
    kind = FailureKind.io

    def __init__(self, path: Path, cause: OSError) -> None:
        super().__init__(path, str(cause))
        self.cause = cause


class StructuralCsvError(FileValidationError):
    """Malformed delimited data (bad quoting, field count drift, bad encoding)."""
    kind = FailureKind.csv

    def __init__(self, path: Path, detail: str, *, line: int | None = None) -> None:
        where = f"line {line}: " if line is not None else ""
        super().__init__(path, f"{where}{detail}")
        self.line = line
        self.detail = detail


class WorkerFailure(FileValidationError):
    """A validation unit terminated on an unexpected exception."""
    kind = FailureKind.worker

    def __init__(self, path: Path, cause: BaseException) -> None:
        super().__init__(path, f"worker failed: {type(cause).__name__}: {cause}")
        self.cause = cause


class DirectoryValidationError(BuyersCheckerError):
    """
    One or more units of a directory-wide run failed.

    `first` is the first failure encountered, `failures` holds every one of them
    in the order they were collected.
    """
    kind = FailureKind.aggregate

    def __init__(self, path: Path, failures: Sequence[BuyersCheckerError]) -> None:
        if not failures:
            raise ValueError("DirectoryValidationError needs at least one failure")
        self.path = path
        self.failures = tuple(failures)
        self.first = self.failures[0]
        more = len(self.failures) - 1
        suffix = f" (and {more} more)" if more else ""
        super().__init__(f"checking {path} failed: {self.first}{suffix}")


class WorkbookError(BuyersCheckerError):
    """Aggregating CSV files into the workbook failed. Nothing was written."""
    kind = FailureKind.workbook

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(f"{path}: {message}" if path is not None else message)
        self.path = path
