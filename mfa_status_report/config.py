"""
Configuration module for the MFA status report.
Defines authentication settings, Graph endpoints, and report output options.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional


# ─── Tenant Authentication ───────────────────────────────────────────────────

# Delegated scopes requested for an interactive session
REQUIRED_SCOPES = [
    "User.Read.All",
    "UserAuthenticationMethod.Read.All",
    "AuditLog.Read.All",
    "Directory.Read.All",
]

REQUIRED_PERMISSIONS = {
    "User.Read.All": "Enumerate member accounts",
    "UserAuthenticationMethod.Read.All": "Read registered authentication methods",
    "AuditLog.Read.All": "Read the most recent sign-in per user",
    "Directory.Read.All": "Read license details",
}


@dataclass
class CertificateAuth:
    """Certificate-based app-only authentication configuration."""
    tenant_id: str
    client_id: str
    certificate_path: str          # Path to base64-encoded PFX
    certificate_password: str = "" # Will be prompted if empty


@dataclass
class SecretAuth:
    """Client-secret app-only authentication configuration."""
    tenant_id: str
    client_id: str
    client_secret: str = ""        # Falls back to env, then prompt


@dataclass
class DelegatedAuth:
    """Delegated (device code) authentication configuration."""
    tenant_id: str
    client_id: str
    scopes: list[str] = field(default_factory=lambda: [
        f"https://graph.microsoft.com/{scope}" for scope in REQUIRED_SCOPES
    ])


AUTH_MODES = ("certificate", "secret", "delegated")


@dataclass
class AuthConfig:
    """Authentication configuration — one of three modes."""
    mode: str = "delegated"
    certificate: Optional[CertificateAuth] = None
    secret: Optional[SecretAuth] = None
    delegated: Optional[DelegatedAuth] = None


# ─── Graph API Settings ─────────────────────────────────────────────────────

GRAPH_BASE_URL = "https://graph.microsoft.com"
GRAPH_API_VERSION = "v1.0"

REQUEST_TIMEOUT_SECONDS = 60.0
CONNECT_TIMEOUT_SECONDS = 30.0

# Pagination
DEFAULT_PAGE_SIZE = 999           # Maximum items per page ($top)
MAX_PAGES_PER_ENDPOINT = 10000    # Safety cap on pagination loops


# ─── Report Output ──────────────────────────────────────────────────────────

DEFAULT_OUTPUT_PATH = "ReportMFAStatusUsers.csv"
REPORT_FORMATS = ("csv", "json")


@dataclass
class ReportConfig:
    """Report destination and presentation settings."""
    output_path: str = DEFAULT_OUTPUT_PATH
    formats: list[str] = field(default_factory=lambda: ["csv"])
    show_viewer: bool = True
    include_users_without_methods: bool = True

    @property
    def csv_path(self) -> Path:
        return Path(self.output_path)

    @property
    def json_path(self) -> Path:
        return self.csv_path.with_suffix(".json")


# ─── Master Configuration ───────────────────────────────────────────────────

def _require(block, section: str, *keys: str) -> dict:
    """Return block if it is a mapping holding every key, else raise ValueError."""
    if not isinstance(block, dict):
        raise ValueError(f"Config section '{section}' must be an object")
    missing = [k for k in keys if not block.get(k)]
    if missing:
        raise ValueError(f"Config section '{section}' is missing: {', '.join(missing)}")
    return block


@dataclass
class EngineConfig:
    """Top-level configuration for a report run."""
    auth: AuthConfig = field(default_factory=AuthConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    verbose: bool = False

    @classmethod
    def from_file(cls, path) -> "EngineConfig":
        """Load configuration from a JSON file."""
        with open(path, "r", encoding="utf-8") as f:
            data = _require(json.load(f), str(path))
        config = cls()
        if "auth" in data:
            auth_data = _require(data["auth"], "auth")
            config.auth.mode = auth_data.get("mode", config.auth.mode)
            if "certificate" in auth_data:
                c = _require(auth_data["certificate"], "auth.certificate", "tenant_id", "client_id")
                config.auth.certificate = CertificateAuth(
                    tenant_id=c["tenant_id"],
                    client_id=c["client_id"],
                    certificate_path=c.get("certificate_path", "./base64.txt"),
                    certificate_password=c.get("certificate_password", ""),
                )
            if "secret" in auth_data:
                s = _require(auth_data["secret"], "auth.secret", "tenant_id", "client_id")
                config.auth.secret = SecretAuth(
                    tenant_id=s["tenant_id"],
                    client_id=s["client_id"],
                    client_secret=s.get("client_secret", ""),
                )
            if "delegated" in auth_data:
                d = _require(auth_data["delegated"], "auth.delegated", "tenant_id", "client_id")
                config.auth.delegated = DelegatedAuth(
                    tenant_id=d["tenant_id"],
                    client_id=d["client_id"],
                )
        if "report" in data:
            settable = {f.name for f in fields(ReportConfig)}
            for k, v in _require(data["report"], "report").items():
                if k not in settable:
                    raise ValueError(f"Unknown report setting in {path}: {k}")
                setattr(config.report, k, v)
        config.verbose = data.get("verbose", False)
        return config
