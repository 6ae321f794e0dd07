"""
JSON exporter — The summary rows plus run metadata in one document.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from .csv_export import ExportError
from .. import __version__


def export_json(
    summaries: list,
    output_path: Path,
    metadata: Optional[dict[str, Any]] = None,
) -> Path:
    """
    Write the report rows and collection metadata to a JSON file.

    Returns:
        Path to the created JSON file.
    """
    output_path = Path(output_path)
    payload = {
        "metadata": {
            "tool": "MFA Status Report",
            "version": __version__,
            "generated_utc": datetime.now(timezone.utc).isoformat(),
            "mode": "READ-ONLY",
            **(metadata or {}),
        },
        "users": [s.to_row() for s in summaries],
    }

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as fh:
            json.dump(payload, fh, indent=2, default=str, ensure_ascii=False)
    except OSError as e:
        raise ExportError(output_path, str(e)) from e

    return output_path
