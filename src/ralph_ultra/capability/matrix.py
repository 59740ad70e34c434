"""Quota-aware model recommendation.

All functions here are pure lookups over the static routing tables and
the catalog; nothing performs I/O.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from ralph_ultra.capability.tables import MODE_TABLES, ModelRoute
from ralph_ultra.catalog import get_capabilities
from ralph_ultra.errors import UnmappedTaskTypeError
from ralph_ultra.model.enums import Capability, ExecutionMode, Provider, TaskType
from ralph_ultra.model.quota import ProviderQuota

REASON_PRIMARY = "Primary model for task type"
REASON_PRIMARY_AVAILABLE = "Primary model with available quota"
REASON_FALLBACK = "Fallback model (primary quota exhausted)"
REASON_LAST_RESORT = "Primary model (warning: primary and fallback quotas may be exhausted)"


@dataclass(frozen=True)
class Recommendation:
    model_id: str
    provider: Provider
    reason: str


def route_for(task_type: TaskType, mode: ExecutionMode = ExecutionMode.BALANCED) -> ModelRoute:
    """Return the routing entry for *task_type* under *mode*."""
    try:
        return MODE_TABLES[ExecutionMode(mode)][TaskType(task_type)]
    except (KeyError, ValueError) as exc:
        raise UnmappedTaskTypeError(str(task_type), str(mode)) from exc


def get_required_capabilities(
    task_type: TaskType, mode: ExecutionMode = ExecutionMode.BALANCED
) -> frozenset[Capability]:
    """Capabilities of the mode's primary model for *task_type*.

    This is the matching criterion used when searching other providers.
    """
    route = route_for(task_type, mode)
    return get_capabilities(route.primary.model_id) or frozenset({Capability.CODE_GENERATION})


def _usable(quotas: Mapping[Provider, ProviderQuota], provider: Provider) -> bool:
    quota = quotas.get(provider)
    return quota is not None and quota.is_usable


def find_capable_model(
    quota: ProviderQuota, required: frozenset[Capability]
) -> str | None:
    """First model listed in *quota* whose capabilities cover *required*."""
    for model in quota.models:
        if model.has_capabilities(required):
            return model.id
    return None


def get_recommended_model(
    task_type: TaskType,
    quotas: Mapping[Provider, ProviderQuota] | None = None,
    mode: ExecutionMode = ExecutionMode.BALANCED,
) -> Recommendation:
    """Pick a model for *task_type*, honouring quota state when known.

    Cascade: mode primary, mode fallback, any usable provider (in
    enumeration order) offering a model with the required capabilities,
    and finally the primary again with a warning. Always returns a model.
    """
    route = route_for(task_type, mode)
    primary, fallback = route.primary, route.fallback

    if quotas is None:
        return Recommendation(primary.model_id, primary.provider, REASON_PRIMARY)

    if _usable(quotas, primary.provider):
        return Recommendation(primary.model_id, primary.provider, REASON_PRIMARY_AVAILABLE)

    if _usable(quotas, fallback.provider):
        return Recommendation(fallback.model_id, fallback.provider, REASON_FALLBACK)

    required = get_required_capabilities(task_type, mode)
    for provider in Provider:
        if not _usable(quotas, provider):
            continue
        model_id = find_capable_model(quotas[provider], required)
        if model_id is not None:
            return Recommendation(
                model_id,
                provider,
                f"Alternative provider {provider.value} "
                "(primary and fallback quotas exhausted)",
            )

    return Recommendation(primary.model_id, primary.provider, REASON_LAST_RESORT)
