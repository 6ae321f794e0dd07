from __future__ import annotations

from mfa_status_report.graph.client import GraphAPIError
from mfa_status_report.models import AuthenticationMethodRecord, SignInRecord, UserAccount


def method(odata_suffix: str, **attributes) -> AuthenticationMethodRecord:
    odata_type = f"#microsoft.graph.{odata_suffix}"
    return AuthenticationMethodRecord(odata_type=odata_type, attributes={"@odata.type": odata_type, **attributes})


class FakeDirectory:
    """In-memory stand-in for DirectoryService."""

    def __init__(self, users=None, licenses=None, sign_ins=None, methods=None, failing=None):
        self.users = users or []
        self.licenses = licenses or {}
        self.sign_ins = sign_ins or {}
        self.methods = methods or {}
        self.failing = failing or set()
        self.calls: list[tuple[str, str]] = []

    def _check(self, op: str, user_id: str) -> None:
        self.calls.append((op, user_id))
        if (op, user_id) in self.failing:
            raise GraphAPIError(500, "boom", f"https://graph.test/{op}/{user_id}")

    async def list_member_users(self) -> list[UserAccount]:
        if ("users", "") in self.failing:
            raise GraphAPIError(403, "Forbidden", "https://graph.test/users")
        return list(self.users)

    async def list_license_details(self, user_id: str) -> list[dict]:
        self._check("licenses", user_id)
        return self.licenses.get(user_id, [])

    async def get_last_sign_in(self, user_id: str):
        self._check("sign_in", user_id)
        return self.sign_ins.get(user_id)

    async def list_authentication_methods(self, user_id: str):
        self._check("methods", user_id)
        return self.methods.get(user_id, [])


def user(uid: str, upn: str, name: str = "") -> UserAccount:
    return UserAccount(id=uid, display_name=name or upn.split("@")[0], user_principal_name=upn)


def sign_in(ts: str = "2026-10-01T08:00:00Z", app: str = "Office 365") -> SignInRecord:
    return SignInRecord(created_date_time=ts, app_display_name=app)
