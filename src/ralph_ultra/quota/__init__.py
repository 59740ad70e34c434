"""Quota tracking across the five provider kinds."""
from __future__ import annotations

from ralph_ultra.quota.checks import (
    ProviderChecks,
    credit_status,
    degraded_quota,
    rate_limit_status,
    subscription_status,
)
from ralph_ultra.quota.credentials import Credential, CredentialResolver
from ralph_ultra.quota.manager import DEFAULT_TTL_SECONDS, QuotaChecker, QuotaManager
from ralph_ultra.quota.usage import SessionUsageReader, WindowUsage

__all__ = [
    "Credential",
    "CredentialResolver",
    "DEFAULT_TTL_SECONDS",
    "ProviderChecks",
    "QuotaChecker",
    "QuotaManager",
    "SessionUsageReader",
    "WindowUsage",
    "credit_status",
    "degraded_quota",
    "rate_limit_status",
    "subscription_status",
]
