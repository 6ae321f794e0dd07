"""Reporting package — CSV, JSON and console output."""

from .csv_export import ExportError, export_csv, read_csv_report
from .json_export import export_json
from .console_view import render_table, show_summary_table

__all__ = [
    "ExportError",
    "export_csv",
    "read_csv_report",
    "export_json",
    "render_table",
    "show_summary_table",
]
