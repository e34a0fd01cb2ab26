from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from buyers_checker.errors import ConfigError

logger = logging.getLogger(__name__)


DEFAULT_LOG_LEVEL = "DEBUG"
_TRUE_STRINGS = {"1", "true", "t", "yes", "y", "on"}


@dataclass(frozen=True)
class Settings:
    """Process-wide knobs, read from the environment."""
    log_level: str
    max_workers: Optional[int]      # `None` -> the thread pool's own default
    strict_csv: bool


def _env_int(env: Mapping[str, str], key: str) -> int | None:
    raw = env.get(key, "").strip()
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{key}: expected an integer, got {raw!r}")
    if value < 1:
        raise ConfigError(f"{key}: must be at least 1, got {value}")
    return value


def get_settings(env: Mapping[str, str] | None = None) -> Settings:
    """
    Read `Settings` from the environment (or from `env`, for tests).

    - `BUYERS_CHECKER_LOG_LEVEL`, default `DEBUG`
    - `BUYERS_CHECKER_MAX_WORKERS`, default unset
    - `BUYERS_CHECKER_STRICT_CSV`, default on
    """
    env = os.environ if env is None else env
    return Settings(
        log_level=env.get("BUYERS_CHECKER_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper() or DEFAULT_LOG_LEVEL,
        max_workers=_env_int(env, "BUYERS_CHECKER_MAX_WORKERS"),
        strict_csv=env.get("BUYERS_CHECKER_STRICT_CSV", "1").strip().lower() in _TRUE_STRINGS,
    )


@dataclass(frozen=True)
class RunConfig:
    """One invocation: what to check, where reports go, whether to build the workbook."""
    output_folder: Path
    file_path: Optional[Path] = None
    folder_path: Optional[Path] = None
    excel_sheet: bool = False
    max_workers: Optional[int] = None

    def validate(self) -> None:
        """
        Raise `ConfigError` when there is nothing to check.

        Both targets present is tolerated: the file wins, as it always has.
        """
        if self.file_path is None and self.folder_path is None:
            raise ConfigError("No file or folder path was given.")
        if self.file_path is not None and self.folder_path is not None:
            logger.warning("both a file and a folder were given, only %s will be checked", self.file_path)
        if self.max_workers is not None and self.max_workers < 1:
            raise ConfigError(f"max workers must be at least 1, got {self.max_workers}")

        # the output folder is wiped at startup, it must not hold the input.
        out = self.output_folder.resolve()
        for target in (self.file_path, self.folder_path):
            if target is not None and out in (target.resolve(), *target.resolve().parents):
                raise ConfigError(f"output folder {self.output_folder} would contain the input {target}")

        # reports written inside the folder being walked would be checked as inputs.
        if self.folder_path is not None and self.folder_path.resolve() in out.parents:
            raise ConfigError(f"output folder {self.output_folder} is inside the input folder {self.folder_path}")
