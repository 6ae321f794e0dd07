"""
MFA Status Report — Main Orchestrator

Usage:
    python -m mfa_status_report --tenant-id <GUID> --client-id <GUID>        # device-code sign-in
    python -m mfa_status_report --auth-mode certificate --cert-path ./base64.txt ...
    python -m mfa_status_report --auth-mode secret ...                       # secret from env or prompt
    python -m mfa_status_report --config config.json --output reports/mfa.csv
    python -m mfa_status_report --formats csv json --no-view

This tool is STRICTLY READ-ONLY. It will NEVER modify user accounts.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from . import __version__
from .config import (
    AUTH_MODES,
    DEFAULT_OUTPUT_PATH,
    REPORT_FORMATS,
    CertificateAuth,
    DelegatedAuth,
    EngineConfig,
    ReportConfig,
    SecretAuth,
)
from .safety.guardian import SafetyGuardian
from .auth.authenticator import Authenticator, AuthenticationError
from .graph.client import GraphClient
from .graph.directory import DirectoryService
from .collectors import MfaStatusCollector
from .scoring import summarize_method_rows, status_counts
from .reporting import ExportError, export_csv, export_json, show_summary_table

logger = logging.getLogger("mfa_status_report")


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="mfa_status_report",
        description="Per-user MFA status report for Microsoft Entra ID (READ-ONLY)",
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Path to JSON configuration file",
    )
    parser.add_argument(
        "--auth-mode",
        choices=AUTH_MODES,
        default=None,
        help="Authentication mode (default: delegated device-code sign-in)",
    )
    parser.add_argument("--tenant-id", type=str, default=None, help="Tenant ID (GUID)")
    parser.add_argument("--client-id", type=str, default=None, help="App registration client ID (GUID)")
    parser.add_argument(
        "--cert-path",
        type=Path,
        help="Path to base64-encoded PFX certificate (certificate mode)",
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=None,
        help=f"CSV report path (default: {DEFAULT_OUTPUT_PATH})",
    )
    parser.add_argument(
        "--formats",
        nargs="+",
        choices=REPORT_FORMATS,
        default=None,
        help="Output formats to generate (default: csv)",
    )
    parser.add_argument(
        "--no-view",
        action="store_true",
        help="Do not print the report table after export",
    )
    parser.add_argument(
        "--skip-users-without-methods",
        action="store_true",
        help="Leave signed-in users with no registered methods out of the report",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> EngineConfig:
    """Build report configuration from a config file and CLI overrides."""
    if args.config:
        config = EngineConfig.from_file(args.config)
    else:
        config = EngineConfig()

    auth = config.auth
    if args.auth_mode:
        auth.mode = args.auth_mode

    if args.tenant_id or args.client_id:
        if not (args.tenant_id and args.client_id):
            raise AuthenticationError("--tenant-id and --client-id must be given together.")
        if auth.mode == "certificate":
            auth.certificate = CertificateAuth(
                tenant_id=args.tenant_id,
                client_id=args.client_id,
                certificate_path=str(args.cert_path or "./base64.txt"),
            )
        elif auth.mode == "secret":
            auth.secret = SecretAuth(tenant_id=args.tenant_id, client_id=args.client_id)
        else:
            auth.delegated = DelegatedAuth(tenant_id=args.tenant_id, client_id=args.client_id)

    if args.cert_path and auth.certificate:
        auth.certificate.certificate_path = str(args.cert_path)

    if args.output:
        config.report.output_path = str(args.output)
    if args.formats:
        config.report.formats = list(args.formats)
    if args.no_view:
        config.report.show_viewer = False
    if args.skip_users_without_methods:
        config.report.include_users_without_methods = False
    config.verbose = config.verbose or args.verbose

    return config


def configure_logging(verbose: bool):
    logging.basicConfig(
        stream=sys.stderr,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        level=logging.DEBUG if verbose else logging.INFO,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def generate_reports(summaries: list, report: ReportConfig, metadata: dict) -> list[Path]:
    """Write all requested report formats. Raises ExportError."""
    created = []

    if "csv" in report.formats:
        path = export_csv(summaries, report.csv_path)
        created.append(path)
        print(f"  📊 CSV:   {path}")

    if "json" in report.formats:
        path = export_json(summaries, report.json_path, metadata)
        created.append(path)
        print(f"  📄 JSON:  {path}")

    return created


async def run_report(
    directory,
    report: ReportConfig,
    guardian: Optional[SafetyGuardian] = None,
) -> int:
    """
    Collect, summarize and export using an open directory session.
    Returns the process exit code.
    """
    print("\n" + "=" * 70)
    print(" PHASE 1: COLLECTION")
    print("=" * 70)
    collector = MfaStatusCollector(
        directory,
        include_users_without_methods=report.include_users_without_methods,
    )
    result = await collector.execute()

    if result.failed:
        for error in result.metadata["errors"]:
            print(f"\n❌ {error}")
        return 1

    meta = result.metadata
    if not meta.get("users_total"):
        print("\nℹ  No member accounts found. Nothing to report.")
        return 0

    print(f"  Member accounts:        {meta['users_total']}")
    print(f"  Without sign-in:        {meta.get('users_without_sign_in', 0)}")
    print(f"  Without methods:        {meta.get('users_without_methods', 0)}")
    print(f"  Unrecognized methods:   {meta.get('unknown_methods', 0)}")
    for w in meta["warnings"]:
        print(f"      ⚠  {w}")

    print("\n" + "=" * 70)
    print(" PHASE 2: SCORING")
    print("=" * 70)
    summaries = summarize_method_rows(result.data.get("method_rows", []))
    for status, count in status_counts(summaries).items():
        print(f"  {status:<8s} {count}")

    print("\n" + "=" * 70)
    print(" PHASE 3: EXPORT")
    print("=" * 70)
    try:
        metadata = {"collection": {k: v for k, v in meta.items() if k not in ("errors",)}}
        if guardian:
            metadata["safety"] = guardian.get_audit_record()
        created = generate_reports(summaries, report, metadata)
    except ExportError as e:
        print(f"\n❌ {e}")
        return 1

    if report.show_viewer:
        print()
        show_summary_table(summaries)

    print(f"\n✅ Report exported: {len(summaries)} users, {len(created)} file(s)")
    if guardian:
        audit = guardian.get_audit_record()
        print(f"🛡  Safety: {audit['status']} ({audit['checks_performed']} requests checked)")
    return 0


async def main_async(argv: Optional[list[str]] = None) -> int:
    """Async entry point."""
    args = parse_args(argv)

    print("=" * 70)
    print(f" MFA Status Report v{__version__}")
    print(" Mode: READ-ONLY — No user accounts will be modified")
    print("=" * 70)

    try:
        config = build_config(args)
    except (AuthenticationError, OSError, ValueError) as e:
        print(f"\n❌ Invalid configuration: {e}")
        return 1
    configure_logging(config.verbose)

    print("\n🔐 Authenticating...")
    try:
        token = await Authenticator(config.auth).acquire_token()
    except AuthenticationError as e:
        print(f"❌ Authentication failed: {e}")
        print("   The app registration needs these Graph permissions:")
        for permission, purpose in Authenticator.list_required_permissions().items():
            print(f"   • {permission:<36s} {purpose}")
        return 1
    print("✅ Authentication successful.")

    guardian = SafetyGuardian()
    async with GraphClient(access_token=token, guardian=guardian) as client:
        exit_code = await run_report(DirectoryService(client), config.report, guardian)
        logger.info(f"Graph requests issued: {client.get_stats()['total_requests']}")

    return exit_code


def main():
    """Synchronous entry point for `python -m mfa_status_report`."""
    sys.exit(asyncio.run(main_async()))


if __name__ == "__main__":
    main()
