"""Scoring package — MFA strength rating and per-user aggregation."""

from .engine import (
    STATUS_GOOD,
    STATUS_CHECK,
    STRONG_METHODS,
    score_mfa_strength,
    summarize_method_rows,
    status_counts,
)

__all__ = [
    "STATUS_GOOD",
    "STATUS_CHECK",
    "STRONG_METHODS",
    "score_mfa_strength",
    "summarize_method_rows",
    "status_counts",
]
