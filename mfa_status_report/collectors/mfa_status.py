"""
MFA Status Collector
Enumerates member accounts, then for each account reads license details,
the last sign-in and the registered authentication methods.
"""

from __future__ import annotations

import logging

from .base import BaseCollector, CollectorResult
from ..analyzers.method_classifier import classify_method
from ..graph.client import GraphAPIError
from ..models import MethodRow, UserAccount

logger = logging.getLogger("mfa_status_report.collectors.mfa_status")

# Raised while decoding a Graph body of unexpected shape
MALFORMED_RESPONSE_ERRORS = (AttributeError, KeyError, TypeError, ValueError)


class MfaStatusCollector(BaseCollector):
    name = "mfa_status"

    def __init__(self, directory, include_users_without_methods: bool = True):
        self.directory = directory
        self.include_users_without_methods = include_users_without_methods

    async def collect(self, result: CollectorResult):
        users = await self.directory.list_member_users()
        result.metadata["users_total"] = len(users)
        logger.info(f"[{self.name}] {len(users)} member accounts found")

        rows: list[MethodRow] = []
        for index, user in enumerate(users, start=1):
            logger.debug(
                f"[{self.name}] ({index}/{len(users)}) {user.user_principal_name}"
            )
            try:
                rows.extend(await self._collect_user(user, result))
            except GraphAPIError as e:
                result.increment("users_failed")
                result.add_warning(f"Skipped {user.user_principal_name}: {e}")
            except MALFORMED_RESPONSE_ERRORS as e:
                result.increment("users_failed")
                result.add_warning(
                    f"Skipped {user.user_principal_name}: malformed response "
                    f"({type(e).__name__}: {e})"
                )

        result.add_data("method_rows", rows)

    async def _collect_user(self, user: UserAccount, result: CollectorResult) -> list[MethodRow]:
        licenses = await self.directory.list_license_details(user.id)
        sign_in = await self.directory.get_last_sign_in(user.id)
        if sign_in is None:
            result.increment("users_without_sign_in")
            return []

        def row(method, detail):
            return MethodRow(
                user=user.display_name,
                upn=user.user_principal_name,
                method=method,
                detail=detail,
                last_sign_in=sign_in.created_date_time,
                last_sign_in_app=sign_in.app_display_name,
                is_licensed=bool(licenses),
            )

        rows = []
        for record in await self.directory.list_authentication_methods(user.id):
            classification = classify_method(record.odata_type, record.attributes)
            if classification is None:
                result.increment("unknown_methods")
                logger.warning(
                    f"[{self.name}] Unrecognized method type '{record.odata_type}' "
                    f"for {user.user_principal_name}"
                )
                continue
            rows.append(row(classification.category, classification.detail))

        if not rows:
            result.increment("users_without_methods")
            if self.include_users_without_methods:
                rows.append(row(None, ""))
        return rows
