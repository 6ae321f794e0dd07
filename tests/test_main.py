from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

from mfa_status_report.__main__ import build_config, main_async, parse_args, run_report
from mfa_status_report.auth.authenticator import AuthenticationError
from mfa_status_report.config import ReportConfig
from mfa_status_report.reporting import read_csv_report
from mfa_status_report.safety.guardian import SafetyGuardian

from tests.fakes import FakeDirectory, method, sign_in, user


def build_directory() -> FakeDirectory:
    return FakeDirectory(
        users=[user("1", "a@x.com"), user("2", "b@x.com"), user("3", "c@x.com"), user("4", "d@x.com")],
        licenses={"1": [{"skuPartNumber": "SPE_E3"}]},
        sign_ins={"1": sign_in(), "2": sign_in(), "4": sign_in()},
        methods={
            "1": [
                method("microsoftAuthenticatorAuthenticationMethod", displayName="iPhone"),
                method("emailAuthenticationMethod", emailAddress="a@mail.test"),
            ],
            "2": [method("emailAuthenticationMethod", emailAddress="b@mail.test")],
        },
    )


def test_run_report_writes_csv(tmp_path: Path, capsys) -> None:
    report = ReportConfig(output_path=str(tmp_path / "ReportMFAStatusUsers.csv"), show_viewer=False)

    assert asyncio.run(run_report(build_directory(), report)) == 0

    rows = {(s.upn, s.methods, s.mfa_status, s.is_licensed) for s in read_csv_report(report.csv_path)}
    assert rows == {
        ("a@x.com", "AuthenticatorApp, EmailAuthentication", "Good", True),
        ("b@x.com", "EmailAuthentication", "Check!", False),
        ("d@x.com", "", "Check!", False),
    }
    assert "Report exported" in capsys.readouterr().out


def test_run_report_shows_table(tmp_path: Path, capsys) -> None:
    report = ReportConfig(output_path=str(tmp_path / "out.csv"))
    assert asyncio.run(run_report(build_directory(), report)) == 0
    assert "MFAStatus" in capsys.readouterr().out


def test_run_report_json_format(tmp_path: Path) -> None:
    report = ReportConfig(output_path=str(tmp_path / "out.csv"), formats=["csv", "json"], show_viewer=False)
    assert asyncio.run(run_report(build_directory(), report)) == 0

    payload = json.loads((tmp_path / "out.json").read_text(encoding="utf-8"))
    assert len(payload["users"]) == 3
    assert payload["metadata"]["collection"]["users_without_sign_in"] == 1


def test_zero_accounts_exits_cleanly_without_csv(tmp_path: Path, capsys) -> None:
    report = ReportConfig(output_path=str(tmp_path / "out.csv"))

    assert asyncio.run(run_report(FakeDirectory(), report)) == 0
    assert not report.csv_path.exists()
    assert "No member accounts found" in capsys.readouterr().out


def test_enumeration_failure_exits_non_zero(tmp_path: Path) -> None:
    report = ReportConfig(output_path=str(tmp_path / "out.csv"))
    assert asyncio.run(run_report(FakeDirectory(failing={("users", "")}), report)) == 1
    assert not report.csv_path.exists()


def test_export_failure_exits_non_zero(tmp_path: Path, capsys) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("x")
    report = ReportConfig(output_path=str(blocker / "out.csv"), show_viewer=False)

    assert asyncio.run(run_report(build_directory(), report)) == 1
    assert "Failed to write report" in capsys.readouterr().out


def test_build_config_from_flags(tmp_path: Path) -> None:
    args = parse_args([
        "--auth-mode", "certificate",
        "--tenant-id", "t", "--client-id", "c",
        "--cert-path", "cert.txt",
        "--output", str(tmp_path / "r.csv"),
        "--formats", "csv", "json",
        "--no-view",
        "--skip-users-without-methods",
    ])
    config = build_config(args)

    assert config.auth.mode == "certificate"
    assert config.auth.certificate.tenant_id == "t"
    assert config.auth.certificate.certificate_path == "cert.txt"
    assert config.report.csv_path == tmp_path / "r.csv"
    assert config.report.formats == ["csv", "json"]
    assert config.report.show_viewer is False
    assert config.report.include_users_without_methods is False


def test_build_config_defaults_to_delegated() -> None:
    config = build_config(parse_args(["--tenant-id", "t", "--client-id", "c"]))
    assert config.auth.mode == "delegated"
    assert config.auth.delegated.client_id == "c"
    assert "https://graph.microsoft.com/AuditLog.Read.All" in config.auth.delegated.scopes
    assert config.report.output_path == "ReportMFAStatusUsers.csv"


def test_build_config_from_file(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "auth": {"mode": "secret", "secret": {"tenant_id": "t", "client_id": "c"}},
        "report": {"output_path": "x.csv", "show_viewer": False},
    }))
    config = build_config(parse_args(["--config", str(path), "--output", "y.csv"]))

    assert config.auth.mode == "secret"
    assert config.auth.secret.client_id == "c"
    assert config.report.output_path == "y.csv"
    assert config.report.show_viewer is False


def test_tenant_and_client_must_be_paired() -> None:
    with pytest.raises(AuthenticationError):
        build_config(parse_args(["--tenant-id", "t"]))


def test_missing_credentials_abort_before_any_directory_call(capsys) -> None:
    assert asyncio.run(main_async([])) == 1
    assert "Authentication failed" in capsys.readouterr().out


def test_run_report_records_safety_audit(tmp_path: Path, capsys) -> None:
    guardian = SafetyGuardian()
    guardian.validate_request("GET", "https://graph.microsoft.com/v1.0/users")
    report = ReportConfig(output_path=str(tmp_path / "out.csv"), formats=["json"], show_viewer=False)

    assert asyncio.run(run_report(build_directory(), report, guardian)) == 0

    payload = json.loads((tmp_path / "out.json").read_text(encoding="utf-8"))
    assert payload["metadata"]["safety"]["status"] == "CLEAN"
    assert payload["metadata"]["safety"]["checks_performed"] == 1
    assert "Safety: CLEAN" in capsys.readouterr().out


def test_auth_failure_lists_required_permissions(capsys) -> None:
    assert asyncio.run(main_async([])) == 1
    out = capsys.readouterr().out
    assert "UserAuthenticationMethod.Read.All" in out
    assert "AuditLog.Read.All" in out


def test_config_missing_client_id_is_invalid_configuration(tmp_path: Path, capsys) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"auth": {"mode": "secret", "secret": {"tenant_id": "t"}}}))

    assert asyncio.run(main_async(["--config", str(path)])) == 1
    out = capsys.readouterr().out
    assert "Invalid configuration" in out
    assert "client_id" in out


def test_config_derived_report_path_is_invalid_configuration(tmp_path: Path, capsys) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"report": {"csv_path": "x.csv"}}))

    assert asyncio.run(main_async(["--config", str(path)])) == 1
    out = capsys.readouterr().out
    assert "Invalid configuration" in out
    assert "csv_path" in out


def test_config_section_must_be_object(tmp_path: Path, capsys) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"report": ["csv"]}))

    assert asyncio.run(main_async(["--config", str(path)])) == 1
    assert "Invalid configuration" in capsys.readouterr().out
