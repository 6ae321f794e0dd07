from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from mfa_status_report.models import SUMMARY_FIELDS, UserSummary
from mfa_status_report.reporting import (
    ExportError,
    export_csv,
    export_json,
    read_csv_report,
    render_table,
    show_summary_table,
)


def build_summaries() -> list[UserSummary]:
    return [
        UserSummary("Alice", "a@x.com", "AuthenticatorApp, EmailAuthentication", "Good",
                    "2026-10-01T08:00:00Z", "Office 365", True),
        UserSummary("Bob, Jr.", "b@x.com", "EmailAuthentication", "Check!",
                    "2026-09-30T17:12:00Z", "Azure Portal", False),
        UserSummary("Carol", "c@x.com", "", "Check!", "2026-09-29T10:00:00Z", "", True),
    ]


def test_csv_header_and_rows(tmp_path: Path) -> None:
    path = export_csv(build_summaries(), tmp_path / "ReportMFAStatusUsers.csv")

    lines = path.read_text(encoding="utf-8-sig").splitlines()
    assert lines[0] == ",".join(SUMMARY_FIELDS)
    assert len(lines) == 4
    assert lines[2].startswith('"Bob, Jr.",b@x.com,')
    assert lines[1].endswith(",True")


def test_csv_round_trip(tmp_path: Path) -> None:
    summaries = build_summaries()
    path = export_csv(summaries, tmp_path / "report.csv")

    parsed = read_csv_report(path)
    assert {(s.upn, s.methods, s.mfa_status) for s in parsed} == {
        (s.upn, s.methods, s.mfa_status) for s in summaries
    }
    assert parsed == summaries


def test_csv_creates_parent_directory(tmp_path: Path) -> None:
    path = export_csv([], tmp_path / "nested" / "out.csv")
    assert path.read_text(encoding="utf-8-sig").strip() == ",".join(SUMMARY_FIELDS)


def test_csv_write_failure_raises_export_error(tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("x")
    with pytest.raises(ExportError):
        export_csv(build_summaries(), blocker / "report.csv")


def test_json_export(tmp_path: Path) -> None:
    path = export_json(build_summaries(), tmp_path / "report.json", {"collection": {"users_total": 5}})
    payload = json.loads(path.read_text(encoding="utf-8"))

    assert payload["metadata"]["mode"] == "READ-ONLY"
    assert payload["metadata"]["collection"] == {"users_total": 5}
    assert [u["UPN"] for u in payload["users"]] == ["a@x.com", "b@x.com", "c@x.com"]


def test_table_lists_every_user() -> None:
    table = render_table(build_summaries())
    lines = table.splitlines()
    assert lines[0].split() == SUMMARY_FIELDS
    assert len(lines) == 5
    assert "Check!" in lines[3]


def test_viewer_failure_is_not_fatal() -> None:
    stream = io.StringIO()
    stream.close()
    assert show_summary_table(build_summaries(), stream) is False


def test_viewer_writes_to_stream() -> None:
    stream = io.StringIO()
    assert show_summary_table(build_summaries(), stream) is True
    assert "a@x.com" in stream.getvalue()
