from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class FileScan:
    """Outcome of checking one file."""
    input_path: Path
    report_path: Path
    accepted: int
    anomalies: int

    def render_one_line(self) -> str:
        return f"{self.input_path}: accepted={self.accepted} anomalies={self.anomalies} report={self.report_path}"


@dataclass(frozen=True)
class DirectoryScan:
    """Outcome of checking every file under a directory (only built when all succeeded)."""
    input_dir: Path
    output_dir: Path
    files: tuple[FileScan, ...]

    @property
    def anomalies(self) -> int:
        return sum(f.anomalies for f in self.files)

    @property
    def accepted(self) -> int:
        return sum(f.accepted for f in self.files)

    def render_one_line(self) -> str:
        """How a directory run is summarized in the terminal."""
        return (
            f"{self.input_dir}: files={len(self.files)} accepted={self.accepted} "
            f"anomalies={self.anomalies} reports={self.output_dir}"
        )
