"""
CSV exporter — Writes the per-user MFA summary and reads it back.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable

from ..models import SUMMARY_FIELDS, UserSummary


class ExportError(Exception):
    """Raised when a report file cannot be written."""
    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"Failed to write report {path}: {reason}")


def export_csv(summaries: Iterable[UserSummary], output_path: Path) -> Path:
    """
    Write one row per user with a fixed header and no type row.

    Returns:
        Path to the created CSV file.
    """
    output_path = Path(output_path)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", newline="", encoding="utf-8-sig") as fh:
            writer = csv.DictWriter(fh, fieldnames=SUMMARY_FIELDS)
            writer.writeheader()
            for summary in summaries:
                writer.writerow(summary.to_row())
    except OSError as e:
        raise ExportError(output_path, str(e)) from e
    return output_path


def read_csv_report(path: Path) -> list[UserSummary]:
    """Parse an exported report back into summaries."""
    with open(path, "r", newline="", encoding="utf-8-sig") as fh:
        return [UserSummary.from_row(row) for row in csv.DictReader(fh)]
