from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable, Iterator, Sequence

import pytest


def _find_repo_root(start: Path) -> Path:
    marker = "pyproject.toml"
    cur = start.resolve()
    for p in (cur, *cur.parents):
        if(p / marker).exists():
            return p
    raise RuntimeError(f"Could not find repo root from: {start}")


@pytest.fixture(scope="session")
def repo_root() -> Path:
    """The absolute path to the repo root (finds by walking up to `pyproject.toml`)."""
    return _find_repo_root(Path(__file__))


def buyer_row(index: int | str, barcode: int | str, check: str = "7") -> list[str]:
    """
    One export row: index in column 0, barcode + check digit in column 4.

    Columns 1-3 are filler, the checker never looks at them.
    """
    return [str(index), "ACME Buyer", "2026-01-01", "batch-a", f"{barcode}{check}"]


def write_rows(path: Path, rows: Iterable[Sequence[str]]) -> Path:
    """Write raw rows as headerless CSV (`\\n` line endings)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = [",".join(r) for r in rows]
    path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
    return path


WriteExport = Callable[..., Path]


@pytest.fixture()
def write_export() -> WriteExport:
    """
    Factory: `write_export(path, [105, 104, 102])` writes rows indexed 1..N
    with the given barcodes.
    """
    def _write(path: Path, barcodes: Iterable[int], *, start: int = 1) -> Path:
        rows = [buyer_row(i, b) for i, b in enumerate(barcodes, start=start)]
        return write_rows(path, rows)
    return _write


@pytest.fixture()
def input_dir(tmp_path: Path) -> Path:
    d = tmp_path / "exports"
    d.mkdir()
    return d


@pytest.fixture()
def output_dir(tmp_path: Path) -> Path:
    return tmp_path / "reports"


@pytest.fixture(autouse=True)
def _detach_run_logging() -> Iterator[None]:
    """Remove handlers a CLI run installed on the root logger, so tmp files are released."""
    yield
    from buyers_checker.cli import logs

    root = logging.getLogger()
    for h in logs._installed:
        root.removeHandler(h)
        h.close()
    logs._installed.clear()
