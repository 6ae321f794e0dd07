"""
Safety Guardian — Enforces strict read-only operation.
Only GET requests reach the directory; every other verb is refused.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone

logger = logging.getLogger("mfa_status_report.safety")

READ_METHODS = {"GET", "HEAD", "OPTIONS"}

# Account-changing Graph actions, refused even if a read verb is used
BLOCKED_URL_PATTERNS = [
    re.compile(r"/resetPassword$", re.IGNORECASE),
    re.compile(r"/revokeSignInSessions$", re.IGNORECASE),
    re.compile(r"/authentication/methods/[^/]+/delete$", re.IGNORECASE),
    re.compile(r"/assignLicense$", re.IGNORECASE),
    re.compile(r"/invalidateAllRefreshTokens$", re.IGNORECASE),
]


class SafetyViolation(Exception):
    """Raised when a write operation is attempted."""
    pass


class SafetyGuardian:
    """
    Validates every outbound HTTP request to ensure read-only operation.
    Keeps a record of refused requests for the run summary.
    """

    def __init__(self):
        self.violations: list[dict] = []
        self.checks_performed: int = 0

    def validate_request(self, method: str, url: str) -> bool:
        """Return True for a read-only request, raise SafetyViolation otherwise."""
        self.checks_performed += 1
        method_upper = method.upper()

        for pattern in BLOCKED_URL_PATTERNS:
            if pattern.search(url.split("?", 1)[0]):
                self._record_violation(method_upper, url, "Blocked account-changing action")
                raise SafetyViolation(
                    f"SAFETY VIOLATION: Write-pattern URL detected: {method_upper} {url}"
                )

        if method_upper not in READ_METHODS:
            self._record_violation(method_upper, url, "Write HTTP method blocked")
            raise SafetyViolation(
                f"SAFETY VIOLATION: Write method blocked: {method_upper} {url}"
            )

        return True

    def _record_violation(self, method: str, url: str, reason: str):
        self.violations.append({
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "method": method,
            "url": url,
            "reason": reason,
        })
        logger.critical(f"SAFETY VIOLATION: {reason} — {method} {url}")

    def get_audit_record(self) -> dict:
        return {
            "mode": "READ-ONLY",
            "checks_performed": self.checks_performed,
            "violations_detected": len(self.violations),
            "status": "CLEAN" if not self.violations else "VIOLATIONS_DETECTED",
        }
