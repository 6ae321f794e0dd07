"""
Scoring engine — collapses per-method rows into one summary per user and
rates the strength of each user's MFA registration.
"""

from __future__ import annotations

import logging
from typing import Iterable

from ..analyzers.method_classifier import MethodCategory
from ..models import MethodRow, UserSummary

logger = logging.getLogger("mfa_status_report.scoring")

STATUS_GOOD = "Good"
STATUS_CHECK = "Check!"

STRONG_METHODS = frozenset({
    MethodCategory.FIDO2,
    MethodCategory.PHONE,
    MethodCategory.AUTHENTICATOR_APP,
    MethodCategory.PASSWORDLESS,
})

METHOD_SEPARATOR = ", "


def score_mfa_strength(categories: Iterable[str]) -> str:
    """'Good' if any strong method is registered, otherwise 'Check!'."""
    return STATUS_GOOD if STRONG_METHODS.intersection(categories) else STATUS_CHECK


def summarize_method_rows(rows: Iterable[MethodRow]) -> list[UserSummary]:
    """
    Group method rows by UPN and build one UserSummary per user.
    Output is sorted by UPN so it does not depend on input order.
    """
    groups: dict[str, list[MethodRow]] = {}
    for row in rows:
        groups.setdefault(row.upn, []).append(row)

    summaries = []
    for upn, group in groups.items():
        first = group[0]
        categories = sorted({r.method for r in group if r.method})
        summaries.append(UserSummary(
            user=first.user,
            upn=upn,
            methods=METHOD_SEPARATOR.join(categories),
            mfa_status=score_mfa_strength(categories),
            last_sign_in=first.last_sign_in,
            last_sign_in_app=first.last_sign_in_app,
            is_licensed=first.is_licensed,
        ))

    summaries.sort(key=lambda s: (s.upn.lower(), s.upn))
    logger.debug(f"Summarized {len(summaries)} users from method rows")
    return summaries


def status_counts(summaries: Iterable[UserSummary]) -> dict[str, int]:
    """Number of users per MFA status."""
    counts = {STATUS_GOOD: 0, STATUS_CHECK: 0}
    for s in summaries:
        counts[s.mfa_status] = counts.get(s.mfa_status, 0) + 1
    return counts
