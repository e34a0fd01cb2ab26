from __future__ import annotations

import argparse
import sys
from pathlib import Path

from buyers_checker.checks.dispatch import validate_directory, validate_file
from buyers_checker.cli.logs import setup_logging
from buyers_checker.config import RunConfig, get_settings
from buyers_checker.errors import BuyersCheckerError, ConfigError
from buyers_checker.excel.workbook import build_workbook


def _positive_int(v: str) -> int:
    n = int(v)
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {n}")
    return n


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="buyers-checker",
        description=(
            "Check that the barcodes in buyer CSV exports count down by one, "
            "and write a report of the rows that break the sequence."
        ),
    )
    p.add_argument("-f", "--file-path", type=Path, metavar="FILE", help="A single CSV file to check.")
    p.add_argument("--folder-path", type=Path, metavar="DIRECTORY", help="A folder of CSV files to check (recursively).")
    p.add_argument(
        "-o", "--output-folder",
        type=Path, required=True, metavar="DIRECTORY",
        help="Where reports and the log go. Emptied at the start of every run.",
    )
    p.add_argument("-e", "--excel-sheet", action="store_true", help="Also merge every report into output.xlsx.")
    p.add_argument("--max-workers", type=_positive_int, default=None, help="Upper bound on files checked at once.")
    return p


def main(argv: list[str] | None = None) -> int:
    """
    The `buyers-checker` CLI.

    ### Example usage:
    - `buyers-checker --folder-path exports/ -o reports/ --excel-sheet`
    - `buyers-checker -f exports/batch-01.csv -o reports/`

    Exit codes: `0` everything checked out (reports may still list anomalies),
    `1` a file, directory or workbook failure, `2` nothing to check.
    """
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings()
        config = RunConfig(
            output_folder=args.output_folder,
            file_path=args.file_path,
            folder_path=args.folder_path,
            excel_sheet=args.excel_sheet,
            max_workers=args.max_workers if args.max_workers is not None else settings.max_workers,
        )
        config.validate()
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    setup_logging(config.output_folder, settings.log_level)

    try:
        if config.file_path is not None:
            summary = validate_file(config.file_path, config.output_folder, strict=settings.strict_csv)
        elif config.folder_path is not None:
            summary = validate_directory(
                config.folder_path,
                config.output_folder,
                max_workers=config.max_workers,
                strict=settings.strict_csv,
            )
        else:
            return 2
        print(summary.render_one_line())

        if config.excel_sheet:
            print(build_workbook(config.output_folder).render_one_line())

    except BuyersCheckerError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    return 0
