"""Normalized provider quota records."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from ralph_ultra.model.enums import Provider, QuotaStatus, QuotaType
from ralph_ultra.model.model_info import ModelInfo

_USABLE = frozenset({QuotaStatus.AVAILABLE, QuotaStatus.LIMITED})

_OPTIONAL_FIELDS = (
    "usage_percent",
    "reset_time",
    "credits_remaining",
    "credits_total",
    "requests_remaining",
    "requests_limit",
    "tokens_remaining",
    "tokens_limit",
    "error",
)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class ProviderQuota:
    """A provider's capacity at one point in time.

    Fields that do not belong to the active ``quota_type`` stay ``None``.
    """

    provider: Provider
    status: QuotaStatus
    quota_type: QuotaType
    models: tuple[ModelInfo, ...] = ()
    last_updated: str = field(default_factory=utc_now_iso)

    # percentage / subscription
    usage_percent: float | None = None
    reset_time: str | None = None

    # credits
    credits_remaining: float | None = None
    credits_total: float | None = None

    # rate limits
    requests_remaining: int | None = None
    requests_limit: int | None = None
    tokens_remaining: int | None = None
    tokens_limit: int | None = None

    error: str | None = None

    @property
    def is_usable(self) -> bool:
        """True when work may still be assigned to this provider."""
        return self.status in _USABLE

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "provider": self.provider.value,
            "status": self.status.value,
            "quota_type": self.quota_type.value,
            "models": [m.to_dict() for m in self.models],
            "last_updated": self.last_updated,
        }
        for name in _OPTIONAL_FIELDS:
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProviderQuota:
        return cls(
            provider=Provider(data["provider"]),
            status=QuotaStatus(data["status"]),
            quota_type=QuotaType(data["quota_type"]),
            models=tuple(ModelInfo.from_dict(m) for m in data.get("models", ())),
            last_updated=data.get("last_updated", ""),
            **{name: data.get(name) for name in _OPTIONAL_FIELDS},
        )


QuotaSnapshot = dict[Provider, ProviderQuota]
"""One ``ProviderQuota`` per provider, replaced wholesale on each refresh."""
