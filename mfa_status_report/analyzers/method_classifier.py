"""
Authentication method classifier.
Maps a Graph authentication method type to a report category and a short
detail string pulled from the method's attributes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

ODATA_PREFIX = "#microsoft.graph."


class MethodCategory:
    AUTHENTICATOR_APP = "AuthenticatorApp"
    PHONE = "PhoneAuthentication"
    FIDO2 = "Fido2"
    PASSWORD = "PasswordAuthentication"
    WINDOWS_HELLO = "WindowsHelloForBusiness"
    EMAIL = "EmailAuthentication"
    TEMPORARY_ACCESS_PASS = "TemporaryAccessPass"
    PASSWORDLESS = "Passwordless"
    THIRD_PARTY_AUTHENTICATOR = "ThirdPartyAuthenticatorApp"


@dataclass(frozen=True)
class MethodClassification:
    category: str
    detail: str


def _text(attributes: dict, key: str) -> str:
    value = attributes.get(key)
    return "" if value is None else str(value)


def _attribute(key: str) -> Callable[[dict], str]:
    return lambda attributes: _text(attributes, key)


def _phone_detail(attributes: dict) -> str:
    return " ".join(
        part for part in (_text(attributes, "phoneType"), _text(attributes, "phoneNumber")) if part
    )


def _tap_detail(attributes: dict) -> str:
    return f"Lifetime (min): {_text(attributes, 'lifetimeInMinutes')}"


# method type (without the #microsoft.graph. prefix) -> (category, detail extractor)
METHOD_TYPES: dict[str, tuple[str, Callable[[dict], str]]] = {
    "microsoftAuthenticatorAuthenticationMethod": (
        MethodCategory.AUTHENTICATOR_APP, _attribute("displayName"),
    ),
    "phoneAuthenticationMethod": (MethodCategory.PHONE, _phone_detail),
    "fido2AuthenticationMethod": (MethodCategory.FIDO2, _attribute("model")),
    "passwordAuthenticationMethod": (MethodCategory.PASSWORD, _attribute("displayName")),
    "windowsHelloForBusinessAuthenticationMethod": (
        MethodCategory.WINDOWS_HELLO, _attribute("displayName"),
    ),
    "emailAuthenticationMethod": (MethodCategory.EMAIL, _attribute("emailAddress")),
    "temporaryAccessPassAuthenticationMethod": (
        MethodCategory.TEMPORARY_ACCESS_PASS, _tap_detail,
    ),
    "passwordlessMicrosoftAuthenticatorAuthenticationMethod": (
        MethodCategory.PASSWORDLESS, _attribute("displayName"),
    ),
    "softwareOathAuthenticationMethod": (
        MethodCategory.THIRD_PARTY_AUTHENTICATOR, _attribute("displayName"),
    ),
}


def normalize_method_type(odata_type: str) -> str:
    """Strip the '#microsoft.graph.' prefix from an @odata.type value."""
    if odata_type.startswith(ODATA_PREFIX):
        return odata_type[len(ODATA_PREFIX):]
    return odata_type


def classify_method(
    odata_type: Optional[str],
    attributes: Optional[dict[str, Any]] = None,
) -> Optional[MethodClassification]:
    """
    Classify one authentication method.
    Returns None for method types missing from METHOD_TYPES.
    """
    entry = METHOD_TYPES.get(normalize_method_type(odata_type or ""))
    if entry is None:
        return None
    category, extract = entry
    return MethodClassification(category=category, detail=extract(attributes or {}))
