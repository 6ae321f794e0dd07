from __future__ import annotations

import pytest

from mfa_status_report.safety.guardian import SafetyGuardian, SafetyViolation

URL = "https://graph.microsoft.com/v1.0/users/1"


def test_reads_are_allowed() -> None:
    guardian = SafetyGuardian()
    assert guardian.validate_request("GET", URL)
    assert guardian.validate_request("get", f"{URL}/authentication/methods?$top=1")
    assert guardian.get_audit_record()["status"] == "CLEAN"


@pytest.mark.parametrize("method", ["POST", "PATCH", "PUT", "DELETE"])
def test_writes_are_blocked(method: str) -> None:
    guardian = SafetyGuardian()
    with pytest.raises(SafetyViolation):
        guardian.validate_request(method, URL)
    assert guardian.get_audit_record()["violations_detected"] == 1


def test_account_changing_actions_are_blocked() -> None:
    guardian = SafetyGuardian()
    with pytest.raises(SafetyViolation):
        guardian.validate_request("GET", f"{URL}/revokeSignInSessions")
