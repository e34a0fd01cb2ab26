from __future__ import annotations

import logging
import shutil
import sys
from pathlib import Path


LOG_FILE_NAME = "log_output.log"

CONSOLE_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(name)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# handlers we installed, so a second call replaces rather than stacks them
_installed: list[logging.Handler] = []


def reset_output_folder(output_folder: Path) -> None:
    """Start every run from an empty output folder: remove it (if present) and recreate it."""
    shutil.rmtree(output_folder, ignore_errors=True)
    output_folder.mkdir(parents=True, exist_ok=True)


def setup_logging(output_folder: Path, level: str = "DEBUG") -> Path:
    """
    Configure root logging for a run.

    - Recreates `output_folder` empty.
    - Console handler on stderr, with thread names (workers show up as `buyers-checker-pool_N`).
    - File handler writing `output_folder/log_output.log`.

    Unknown level names fall back to `DEBUG`. Returns the log file path.
    """
    reset_output_folder(output_folder)
    log_path = output_folder / LOG_FILE_NAME

    root = logging.getLogger()
    for h in _installed:
        root.removeHandler(h)
        h.close()
    _installed.clear()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))

    to_file = logging.FileHandler(log_path, encoding="utf-8")
    to_file.setFormatter(logging.Formatter(FILE_FORMAT))

    for h in (console, to_file):
        root.addHandler(h)
        _installed.append(h)

    lvl = logging.getLevelName(level.upper())
    root.setLevel(lvl if isinstance(lvl, int) else logging.DEBUG)
    return log_path
