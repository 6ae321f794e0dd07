from .base import BaseCollector, CollectorResult
from .mfa_status import MfaStatusCollector

__all__ = [
    "BaseCollector",
    "CollectorResult",
    "MfaStatusCollector",
]
