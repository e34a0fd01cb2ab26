from __future__ import annotations

from pathlib import Path

import pytest

from buyers_checker.config import RunConfig, get_settings
from buyers_checker.errors import BuyersCheckerError, ConfigError
from buyers_checker.parsing.types import FailureKind


def test_settings_defaults() -> None:
    s = get_settings({})
    assert s.log_level == "DEBUG"
    assert s.max_workers is None
    assert s.strict_csv is True


def test_settings_from_env() -> None:
    s = get_settings({
        "BUYERS_CHECKER_LOG_LEVEL": "info",
        "BUYERS_CHECKER_MAX_WORKERS": "4",
        "BUYERS_CHECKER_STRICT_CSV": "no",
    })
    assert (s.log_level, s.max_workers, s.strict_csv) == ("INFO", 4, False)


@pytest.mark.parametrize("raw", ["zero", "0", "-2"])
def test_settings_bad_max_workers(raw: str) -> None:
    with pytest.raises(ConfigError):
        get_settings({"BUYERS_CHECKER_MAX_WORKERS": raw})


def test_run_config_needs_a_target(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        RunConfig(output_folder=tmp_path / "out").validate()


def test_run_config_file_or_folder(tmp_path: Path) -> None:
    RunConfig(output_folder=tmp_path / "out", file_path=tmp_path / "a.csv").validate()
    RunConfig(output_folder=tmp_path / "out", folder_path=tmp_path / "in").validate()


def test_run_config_output_may_not_hold_input(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        RunConfig(output_folder=tmp_path, folder_path=tmp_path / "in").validate()
    with pytest.raises(ConfigError):
        RunConfig(output_folder=tmp_path / "in", folder_path=tmp_path / "in").validate()


def test_run_config_output_may_not_sit_inside_input(tmp_path: Path) -> None:
    """Reports written under the walked folder would be checked as inputs."""
    with pytest.raises(ConfigError, match="inside the input folder"):
        RunConfig(output_folder=tmp_path / "in" / "reports", folder_path=tmp_path / "in").validate()


def test_errors_classify_themselves() -> None:
    class Unclassified(BuyersCheckerError):
        pass

    assert Unclassified("boom").kind == FailureKind.unknown
    assert ConfigError("bad").kind == FailureKind.config
