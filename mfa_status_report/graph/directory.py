"""
Directory service — the Graph operations the report consumes.
Wraps an open GraphClient session and returns typed records.
"""

from __future__ import annotations

import logging
from typing import Optional

from .client import GraphClient
from ..models import UserAccount, SignInRecord, AuthenticationMethodRecord

logger = logging.getLogger("mfa_status_report.graph.directory")

USER_SELECT = "id,displayName,userPrincipalName,userType"


class DirectoryService:
    """Read-only view of Entra ID users, licenses, sign-ins and auth methods."""

    def __init__(self, graph: GraphClient):
        self.graph = graph

    async def list_member_users(self) -> list[UserAccount]:
        """All member accounts; guests are filtered server-side."""
        items = await self.graph.get_all_pages(
            "users",
            params={
                "$filter": "userType eq 'Member'",
                "$select": USER_SELECT,
                "$count": "true",
            },
        )
        return [UserAccount.from_graph(item) for item in items]

    async def list_license_details(self, user_id: str) -> list[dict]:
        return await self.graph.get_all_pages(
            f"users/{user_id}/licenseDetails", skip_top=True,
        )

    async def get_last_sign_in(self, user_id: str) -> Optional[SignInRecord]:
        """Most recent sign-in; the signIns endpoint orders newest first."""
        data = await self.graph.get(
            "auditLogs/signIns",
            params={"$filter": f"userId eq '{user_id}'", "$top": "1"},
        )
        records = data.get("value", [])
        if not records:
            return None
        return SignInRecord.from_graph(records[0])

    async def list_authentication_methods(self, user_id: str) -> list[AuthenticationMethodRecord]:
        items = await self.graph.get_all_pages(
            f"users/{user_id}/authentication/methods", skip_top=True,
        )
        return [AuthenticationMethodRecord.from_graph(item) for item in items]
