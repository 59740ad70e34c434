"""Execution planning: backlog in, model allocation plan out."""
from __future__ import annotations

from ralph_ultra.planner.planner import (
    Classifier,
    ConfidenceSource,
    ExecutionPlanner,
    assess_quotas,
    tradeoff,
)
from ralph_ultra.planner.sizing import LOCAL_SLOWDOWN, TOKEN_ESTIMATES, TokenEstimate, estimate_for

__all__ = [
    "Classifier",
    "ConfidenceSource",
    "ExecutionPlanner",
    "LOCAL_SLOWDOWN",
    "TOKEN_ESTIMATES",
    "TokenEstimate",
    "assess_quotas",
    "estimate_for",
    "tradeoff",
]
