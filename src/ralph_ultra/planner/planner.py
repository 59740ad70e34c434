"""Execution planner: assigns a model to every task in a backlog.

A plan is a pure recompute over its inputs. Given the same backlog,
quota snapshot, learning state, and mode, the allocations are identical;
only ``generated_at`` changes between runs.
"""
from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Callable, Protocol

from ralph_ultra.capability.matrix import get_recommended_model, route_for
from ralph_ultra.catalog import estimate_cost, round_usd
from ralph_ultra.classify import classify_task
from ralph_ultra.events.bus import EventBus
from ralph_ultra.events.types import PlanReady, PlanStarted
from ralph_ultra.learning.scores import BASE_CONFIDENCE
from ralph_ultra.model.enums import ExecutionMode, Provider, QuotaStatus, QuotaType, TaskType
from ralph_ultra.model.plan import (
    AlternativeModel,
    ExecutionPlan,
    ModelChoice,
    PlanComparisons,
    PlanSummary,
    StoryAllocation,
    StrategyCost,
)
from ralph_ultra.model.quota import ProviderQuota
from ralph_ultra.model.task import Backlog, Task
from ralph_ultra.planner import strategies
from ralph_ultra.planner.sizing import TokenEstimate, estimate_for

logger = logging.getLogger(__name__)

Classifier = Callable[[str], TaskType]


class ConfidenceSource(Protocol):
    def confidence_for(self, provider: Provider, model_id: str, task_type: TaskType) -> float: ...


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _round_percent(value: float) -> int:
    return math.floor(value + 0.5)


def tradeoff(candidate_cost: float, chosen_cost: float, label: str) -> str:
    """Describe *candidate_cost* relative to *chosen_cost*.

    *label* names what the more expensive option buys: ``higher quality``
    for the mode primary, ``fallback option`` for the mode fallback.
    """
    if candidate_cost < chosen_cost:
        return f"{_round_percent((1 - candidate_cost / chosen_cost) * 100)}% cheaper"
    if candidate_cost > chosen_cost:
        if chosen_cost == 0:
            return f"More expensive but {label}"
        premium = _round_percent((candidate_cost / chosen_cost - 1) * 100)
        return f"{premium}% more expensive but {label}"
    return "Similar cost"


class ExecutionPlanner:
    """Builds :class:`ExecutionPlan` objects from backlogs."""

    def __init__(
        self,
        classifier: Classifier | None = None,
        learning: ConfidenceSource | None = None,
        bus: EventBus | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._classify = classifier
        self._learning = learning
        self._bus = bus
        self._clock = clock or _utc_now

    def generate_plan(
        self,
        backlog: Backlog,
        quotas: Mapping[Provider, ProviderQuota] | None = None,
        mode: ExecutionMode = ExecutionMode.BALANCED,
        project_path: str = "",
    ) -> ExecutionPlan:
        mode = ExecutionMode(mode)
        if self._bus is not None:
            self._bus.emit(PlanStarted(backlog.project))

        task_types = [self._task_type(task) for task in backlog.tasks]
        allocations = tuple(
            self._allocate(task, task_type, quotas, mode)
            for task, task_type in zip(backlog.tasks, task_types)
        )
        summary = self._summarize(allocations, quotas)
        comparisons = PlanComparisons(
            all_premium=strategies.all_premium(backlog.tasks),
            all_local=strategies.all_local(backlog.tasks),
            optimized=StrategyCost(summary.estimated_total_cost, summary.estimated_total_duration),
            super_saver=strategies.routed(
                backlog.tasks, task_types, ExecutionMode.SUPER_SAVER, quotas
            ),
            fast_delivery=strategies.routed(
                backlog.tasks, task_types, ExecutionMode.FAST_DELIVERY, quotas
            ),
        )
        plan = ExecutionPlan(
            project_path=project_path,
            project_name=backlog.project,
            generated_at=self._clock().isoformat(),
            mode=mode,
            allocations=allocations,
            summary=summary,
            comparisons=comparisons,
        )
        logger.info(
            "Planned %d tasks for %r in %s mode: $%.2f, %.0f min",
            summary.total_stories,
            backlog.project,
            mode.value,
            summary.estimated_total_cost,
            summary.estimated_total_duration,
        )
        for warning in summary.quota_warnings:
            logger.warning("Plan warning: %s", warning)
        if self._bus is not None:
            self._bus.emit(PlanReady(plan))
        return plan

    def _task_type(self, task: Task) -> TaskType:
        # Injected classifiers see descriptive text only; the default weights the title.
        if self._classify is None:
            return classify_task(task)
        return self._classify(task.text)

    # ------------------------------------------------------------------
    # Per-task allocation
    # ------------------------------------------------------------------

    def _allocate(
        self,
        task: Task,
        task_type: TaskType,
        quotas: Mapping[Provider, ProviderQuota] | None,
        mode: ExecutionMode,
    ) -> StoryAllocation:
        est = estimate_for(task.complexity)
        rec = get_recommended_model(task_type, quotas, mode)
        cost = estimate_cost(rec.model_id, est.input_tokens, est.output_tokens)
        return StoryAllocation(
            story_id=task.id,
            title=task.title,
            task_type=task_type,
            complexity=task.complexity,
            model=ModelChoice(
                provider=rec.provider,
                model_id=rec.model_id,
                reason=rec.reason,
                confidence=self._confidence(rec.provider, rec.model_id, task_type),
            ),
            estimated_tokens=est.total_tokens,
            estimated_cost=cost,
            estimated_duration=est.duration_minutes,
            alternatives=self._alternatives(task_type, mode, rec.model_id, cost, est),
        )

    def _confidence(self, provider: Provider, model_id: str, task_type: TaskType) -> float:
        if self._learning is None:
            return BASE_CONFIDENCE
        return self._learning.confidence_for(provider, model_id, task_type)

    @staticmethod
    def _alternatives(
        task_type: TaskType,
        mode: ExecutionMode,
        chosen_id: str,
        chosen_cost: float,
        est: TokenEstimate,
    ) -> tuple[AlternativeModel, ...]:
        """Mode primary then mode fallback, minus the chosen model."""
        route = route_for(task_type, mode)
        out: list[AlternativeModel] = []
        for ref, label in ((route.primary, "higher quality"), (route.fallback, "fallback option")):
            if ref.model_id == chosen_id or any(a.model_id == ref.model_id for a in out):
                continue
            cost = estimate_cost(ref.model_id, est.input_tokens, est.output_tokens)
            out.append(
                AlternativeModel(
                    model_id=ref.model_id,
                    provider=ref.provider,
                    estimated_cost=cost,
                    tradeoff=tradeoff(cost, chosen_cost, label),
                )
            )
        return tuple(out)

    # ------------------------------------------------------------------
    # Summary
    # ------------------------------------------------------------------

    def _summarize(
        self,
        allocations: tuple[StoryAllocation, ...],
        quotas: Mapping[Provider, ProviderQuota] | None,
    ) -> PlanSummary:
        models_used: list[str] = []
        for alloc in allocations:
            if alloc.model.model_id not in models_used:
                models_used.append(alloc.model.model_id)

        feasible, warnings = assess_quotas(allocations, quotas)
        return PlanSummary(
            total_stories=len(allocations),
            estimated_total_cost=round_usd(sum(a.estimated_cost for a in allocations)),
            estimated_total_duration=sum(a.estimated_duration for a in allocations),
            models_used=tuple(models_used),
            can_complete_with_current_quotas=feasible,
            quota_warnings=tuple(warnings),
        )


_STATUS_WARNINGS = {
    QuotaStatus.EXHAUSTED: "Quota exhausted",
    QuotaStatus.LIMITED: "Limited quota",
    QuotaStatus.UNAVAILABLE: "Unavailable",
    QuotaStatus.ERROR: "Quota check failed",
    QuotaStatus.UNKNOWN: "Quota status unknown",
}


def assess_quotas(
    allocations: tuple[StoryAllocation, ...],
    quotas: Mapping[Provider, ProviderQuota] | None,
) -> tuple[bool, list[str]]:
    """Feasibility flag and per-provider warnings for a set of allocations.

    Without a quota snapshot nothing can be checked: the plan is
    considered feasible and no warnings are produced.
    """
    if quotas is None:
        return True, []

    counts: dict[Provider, int] = {}
    costs: dict[Provider, float] = {}
    for alloc in allocations:
        provider = alloc.model.provider
        counts[provider] = counts.get(provider, 0) + 1
        costs[provider] = costs.get(provider, 0.0) + alloc.estimated_cost

    feasible = True
    warnings: list[str] = []
    for provider in Provider:
        count = counts.get(provider, 0)
        if count == 0:
            continue
        cost = round_usd(costs[provider])
        at_risk = f"{count} tasks planned, ${cost:.2f}"
        quota = quotas.get(provider)
        if quota is None:
            warnings.append(f"{provider.value}: No quota information available ({at_risk})")
            continue

        if quota.status in (QuotaStatus.EXHAUSTED, QuotaStatus.UNAVAILABLE):
            feasible = False
        label = _STATUS_WARNINGS.get(quota.status)
        if label is not None:
            warnings.append(f"{provider.value}: {label} ({at_risk})")

        if quota.quota_type == QuotaType.CREDITS and quota.credits_remaining is not None:
            if quota.credits_remaining < cost:
                feasible = False
                warnings.append(
                    f"{provider.value}: Insufficient credits "
                    f"(${quota.credits_remaining:.2f} remaining, ${cost:.2f} needed "
                    f"for {count} tasks)"
                )
    return feasible, warnings
