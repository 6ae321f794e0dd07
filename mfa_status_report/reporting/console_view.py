"""
Console viewer — Fixed-width table of the report for interactive review.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

from ..models import SUMMARY_FIELDS

logger = logging.getLogger("mfa_status_report.reporting.console")

MAX_COLUMN_WIDTH = 48


def _clip(value: str) -> str:
    if len(value) <= MAX_COLUMN_WIDTH:
        return value
    return value[:MAX_COLUMN_WIDTH - 1] + "…"


def render_table(summaries: list) -> str:
    rows = [[_clip(r[f]) for f in SUMMARY_FIELDS] for r in (s.to_row() for s in summaries)]
    widths = [
        max([len(name)] + [len(row[i]) for row in rows])
        for i, name in enumerate(SUMMARY_FIELDS)
    ]

    def line(cells):
        return "  " + " ".join(f"{c:<{w}s}" for c, w in zip(cells, widths)).rstrip()

    out = [line(SUMMARY_FIELDS), line("─" * w for w in widths)]
    out.extend(line(row) for row in rows)
    return "\n".join(out)


def show_summary_table(summaries: list, stream: Optional[TextIO] = None) -> bool:
    """
    Print the report table. Best-effort: failures are logged, not raised.
    Returns True if the table was shown.
    """
    stream = stream or sys.stdout
    try:
        stream.write(render_table(summaries) + "\n")
        stream.flush()
        return True
    except (OSError, UnicodeEncodeError, ValueError) as e:
        logger.warning(f"Could not display report table: {e}")
        return False
