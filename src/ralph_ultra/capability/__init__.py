"""Capability matrix: task-to-model routing per execution mode."""
from __future__ import annotations

from ralph_ultra.capability.matrix import (
    REASON_FALLBACK,
    REASON_LAST_RESORT,
    REASON_PRIMARY,
    REASON_PRIMARY_AVAILABLE,
    Recommendation,
    find_capable_model,
    get_recommended_model,
    get_required_capabilities,
    route_for,
)
from ralph_ultra.capability.tables import MODE_TABLES, ModelRef, ModelRoute

__all__ = [
    "MODE_TABLES",
    "ModelRef",
    "ModelRoute",
    "REASON_FALLBACK",
    "REASON_LAST_RESORT",
    "REASON_PRIMARY",
    "REASON_PRIMARY_AVAILABLE",
    "Recommendation",
    "find_capable_model",
    "get_recommended_model",
    "get_required_capabilities",
    "route_for",
]
