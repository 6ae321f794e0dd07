"""
Report data models — directory records read from Graph and the rows
produced from them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class UserAccount:
    """A member account as returned by /users."""
    id: str
    display_name: str
    user_principal_name: str
    user_type: str = "Member"

    @classmethod
    def from_graph(cls, item: dict) -> "UserAccount":
        return cls(
            id=item.get("id", ""),
            display_name=item.get("displayName") or "",
            user_principal_name=item.get("userPrincipalName") or "",
            user_type=item.get("userType") or "Member",
        )


@dataclass
class SignInRecord:
    """Most recent sign-in event for a user."""
    created_date_time: str
    app_display_name: str = ""

    @classmethod
    def from_graph(cls, item: dict) -> "SignInRecord":
        return cls(
            created_date_time=item.get("createdDateTime") or "",
            app_display_name=item.get("appDisplayName") or "",
        )


@dataclass
class AuthenticationMethodRecord:
    """One registered authentication method with its raw attributes."""
    odata_type: str
    attributes: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_graph(cls, item: dict) -> "AuthenticationMethodRecord":
        return cls(odata_type=item.get("@odata.type", ""), attributes=dict(item))


@dataclass
class MethodRow:
    """
    One classified authentication method of a signed-in user.
    method is None for the placeholder row of a user with no classified methods.
    """
    user: str
    upn: str
    method: Optional[str]
    detail: str
    last_sign_in: str
    last_sign_in_app: str
    is_licensed: bool


SUMMARY_FIELDS = [
    "User", "UPN", "Methods", "MFAStatus",
    "LastSignIn", "LastSignInApp", "IsLicensed",
]


@dataclass
class UserSummary:
    """One output row of the report."""
    user: str
    upn: str
    methods: str
    mfa_status: str
    last_sign_in: str
    last_sign_in_app: str
    is_licensed: bool

    def to_row(self) -> dict:
        return {
            "User": self.user,
            "UPN": self.upn,
            "Methods": self.methods,
            "MFAStatus": self.mfa_status,
            "LastSignIn": self.last_sign_in,
            "LastSignInApp": self.last_sign_in_app,
            "IsLicensed": str(self.is_licensed),
        }

    @classmethod
    def from_row(cls, row: dict) -> "UserSummary":
        return cls(
            user=row.get("User", ""),
            upn=row.get("UPN", ""),
            methods=row.get("Methods", ""),
            mfa_status=row.get("MFAStatus", ""),
            last_sign_in=row.get("LastSignIn", ""),
            last_sign_in_app=row.get("LastSignInApp", ""),
            is_licensed=row.get("IsLicensed", "").strip().lower() == "true",
        )
