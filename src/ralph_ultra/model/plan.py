"""Execution plan records produced by the planner."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from ralph_ultra.model.enums import Complexity, ExecutionMode, Provider, TaskType


@dataclass(frozen=True)
class ModelChoice:
    provider: Provider
    model_id: str
    reason: str
    confidence: float = 0.5


@dataclass(frozen=True)
class AlternativeModel:
    model_id: str
    provider: Provider
    estimated_cost: float
    tradeoff: str


@dataclass(frozen=True)
class StoryAllocation:
    """The planner's assignment decision for one task."""

    story_id: str
    title: str
    task_type: TaskType
    complexity: Complexity
    model: ModelChoice
    estimated_tokens: int
    estimated_cost: float
    estimated_duration: float  # minutes
    alternatives: tuple[AlternativeModel, ...] = ()


@dataclass(frozen=True)
class PlanSummary:
    total_stories: int
    estimated_total_cost: float
    estimated_total_duration: float
    models_used: tuple[str, ...]
    can_complete_with_current_quotas: bool
    quota_warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class StrategyCost:
    cost: float
    duration: float


@dataclass(frozen=True)
class PlanComparisons:
    """Totals under counterfactual strategies, for display only."""

    all_premium: StrategyCost
    all_local: StrategyCost
    optimized: StrategyCost
    super_saver: StrategyCost
    fast_delivery: StrategyCost


@dataclass(frozen=True)
class ExecutionPlan:
    project_path: str
    project_name: str
    generated_at: str
    mode: ExecutionMode
    allocations: tuple[StoryAllocation, ...]
    summary: PlanSummary
    comparisons: PlanComparisons

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation; enum members serialize as their values."""
        return _plain(asdict(self))


def _plain(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value
