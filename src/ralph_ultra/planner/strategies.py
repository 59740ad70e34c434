"""Counterfactual strategy totals shown next to a plan.

None of these influence the allocation; they only price the same backlog
under a different policy.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence

from ralph_ultra.capability.matrix import get_recommended_model
from ralph_ultra.capability.tables import SONNET
from ralph_ultra.catalog import estimate_cost, round_usd
from ralph_ultra.model.enums import ExecutionMode, Provider, TaskType
from ralph_ultra.model.quota import ProviderQuota
from ralph_ultra.model.plan import StrategyCost
from ralph_ultra.model.task import Task
from ralph_ultra.planner.sizing import LOCAL_SLOWDOWN, estimate_for

PREMIUM_MODEL = SONNET.model_id


def all_premium(tasks: Sequence[Task]) -> StrategyCost:
    """Every task on the premium general-purpose model."""
    cost = 0.0
    duration = 0.0
    for task in tasks:
        est = estimate_for(task.complexity)
        cost += estimate_cost(PREMIUM_MODEL, est.input_tokens, est.output_tokens)
        duration += est.duration_minutes
    return StrategyCost(round_usd(cost), duration)


def all_local(tasks: Sequence[Task]) -> StrategyCost:
    """Every task on a self-hosted model: free, but slower."""
    duration = sum(estimate_for(t.complexity).duration_minutes * LOCAL_SLOWDOWN for t in tasks)
    return StrategyCost(0.0, duration)


def routed(
    tasks: Sequence[Task],
    task_types: Sequence[TaskType],
    mode: ExecutionMode,
    quotas: Mapping[Provider, ProviderQuota] | None,
) -> StrategyCost:
    """Totals if every task were routed under *mode* against *quotas*."""
    cost = 0.0
    duration = 0.0
    for task, task_type in zip(tasks, task_types):
        est = estimate_for(task.complexity)
        rec = get_recommended_model(task_type, quotas, mode)
        cost += estimate_cost(rec.model_id, est.input_tokens, est.output_tokens)
        duration += est.duration_minutes
    return StrategyCost(round_usd(cost), duration)
