"""
Authentication module — certificate, client-secret and delegated auth.
Uses MSAL for token acquisition against Microsoft Identity Platform.
"""

from __future__ import annotations

import base64
import getpass
import logging
import os

from cryptography.hazmat.primitives.serialization import pkcs12, Encoding, PrivateFormat, NoEncryption
from cryptography.hazmat.primitives.hashes import SHA1
import msal

from ..config import AuthConfig, REQUIRED_PERMISSIONS

logger = logging.getLogger("mfa_status_report.auth")

# Default scopes for app-only auth
APP_SCOPES = ["https://graph.microsoft.com/.default"]

CERT_PASSWORD_ENV = "MFA_REPORT_CERT_PASSWORD"
CLIENT_SECRET_ENV = "MFA_REPORT_CLIENT_SECRET"


class AuthenticationError(Exception):
    """Raised when authentication fails."""
    pass


def _authority(tenant_id: str) -> str:
    return f"https://login.microsoftonline.com/{tenant_id}"


def _token_from_result(result: dict, label: str) -> str:
    if "access_token" in result:
        logger.info(f"{label} authentication successful.")
        return result["access_token"]
    error = result.get("error_description", result.get("error", "Unknown"))
    raise AuthenticationError(f"{label} auth failed: {error}")


class Authenticator:
    """
    Handles MSAL-based authentication for Microsoft Graph.
    Supports:
      - Certificate-based app-only authentication
      - Client-secret app-only authentication
      - Delegated interactive authentication (device code flow)
    """

    def __init__(self, config: AuthConfig):
        self.config = config

    async def acquire_token(self) -> str:
        """
        Acquire an access token based on configured auth mode.
        Any MSAL or network failure surfaces as AuthenticationError.
        """
        acquire = {
            "certificate": self._acquire_certificate_token,
            "secret": self._acquire_secret_token,
            "delegated": self._acquire_delegated_token,
        }.get(self.config.mode)
        if acquire is None:
            raise AuthenticationError(f"Unknown auth mode: {self.config.mode}")
        try:
            return acquire()
        except AuthenticationError:
            raise
        except Exception as e:
            raise AuthenticationError(f"{type(e).__name__}: {e}") from e

    def _acquire_certificate_token(self) -> str:
        """Acquire token using certificate-based client credentials."""
        cert_config = self.config.certificate
        if not cert_config:
            raise AuthenticationError("Certificate auth config not provided.")

        logger.info("Authenticating with certificate-based app credentials...")

        cert_path = cert_config.certificate_path
        password = cert_config.certificate_password or os.environ.get(CERT_PASSWORD_ENV, "")
        if not password:
            password = getpass.getpass("Enter the certificate password: ")

        try:
            with open(cert_path, "r") as f:
                cert_bytes = base64.b64decode(f.read().strip())

            private_key, certificate, _ = pkcs12.load_key_and_certificates(
                cert_bytes, password.encode("utf-8") if password else None
            )
            private_key_pem = private_key.private_bytes(
                Encoding.PEM, PrivateFormat.PKCS8, NoEncryption()
            ).decode("utf-8")
            thumbprint = certificate.fingerprint(SHA1()).hex()
            logger.info(f"Certificate loaded. Thumbprint: {thumbprint}")

        except FileNotFoundError:
            raise AuthenticationError(f"Certificate file not found: {cert_path}")
        except Exception as e:
            raise AuthenticationError(f"Failed to load certificate: {e}")

        app = msal.ConfidentialClientApplication(
            client_id=cert_config.client_id,
            authority=_authority(cert_config.tenant_id),
            client_credential={
                "thumbprint": thumbprint,
                "private_key": private_key_pem,
            },
        )
        return _token_from_result(app.acquire_token_for_client(scopes=APP_SCOPES), "Certificate")

    def _acquire_secret_token(self) -> str:
        """Acquire token using a client secret."""
        secret_config = self.config.secret
        if not secret_config:
            raise AuthenticationError("Client secret auth config not provided.")

        secret = secret_config.client_secret or os.environ.get(CLIENT_SECRET_ENV, "")
        if not secret:
            secret = getpass.getpass("Enter Client Secret (input hidden): ").strip()
        if not secret:
            raise AuthenticationError("No client secret supplied.")

        logger.info("Authenticating with client secret...")
        app = msal.ConfidentialClientApplication(
            client_id=secret_config.client_id,
            authority=_authority(secret_config.tenant_id),
            client_credential=secret,
        )
        return _token_from_result(app.acquire_token_for_client(scopes=APP_SCOPES), "Client secret")

    def _acquire_delegated_token(self) -> str:
        """Acquire token using delegated (device code) flow."""
        deleg_config = self.config.delegated
        if not deleg_config:
            raise AuthenticationError("Delegated auth config not provided.")

        logger.info(f"Initiating device code flow for scopes: {', '.join(deleg_config.scopes)}")

        app = msal.PublicClientApplication(
            client_id=deleg_config.client_id,
            authority=_authority(deleg_config.tenant_id),
        )

        flow = app.initiate_device_flow(scopes=deleg_config.scopes)
        if "user_code" not in flow:
            raise AuthenticationError(
                f"Device code flow failed: {flow.get('error_description', 'Unknown')}"
            )

        print(f"\n{'='*60}")
        print(f"  To sign in, open: {flow['verification_uri']}")
        print(f"  Enter code: {flow['user_code']}")
        print(f"{'='*60}\n")

        return _token_from_result(app.acquire_token_by_device_flow(flow), "Delegated")

    @staticmethod
    def list_required_permissions() -> dict[str, str]:
        """Return the map of required Graph API permissions."""
        return REQUIRED_PERMISSIONS
