from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

from ..models.processing_result import FileStat

"""Run progress.

ProgressTracker keeps the running totals of a directory run (files failed,
records seen, records rejected) and mirrors them on a tqdm bar. The bar only
exists when stdout is a TTY so that piped and CI output stays plain log lines.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ProgressTracker:
    """Per-file progress and running outcome totals for one run."""

    def __init__(self, total_files: int, *, description: str = "Validating files") -> None:
        self.total_files = total_files
        self.description = description
        self.current_file = 0
        self.failed_files = 0
        self.records = 0
        self.invalid_records = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None = None
        if self.enabled:
            self.pbar = tqdm(
                total=total_files,
                desc=description,
                unit="file",
                leave=True,
                ncols=80,
                ascii=True,
            )

    def start_file(self, file_path: Path) -> None:
        self.current_file += 1
        if self.pbar is not None:
            self.pbar.set_description(f"{self.description} [{file_path.name}]")

    def finish_file(self, stat: FileStat) -> None:
        """Fold one file outcome into the totals and advance the bar."""
        if stat.status == "failed":
            self.failed_files += 1
        self.records += stat.total_records
        self.invalid_records += stat.invalid_records
        if self.pbar is not None:
            self.pbar.set_postfix(failed=self.failed_files, invalid=self.invalid_records)
            self.pbar.set_description(self.description)
            self.pbar.update(1)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
