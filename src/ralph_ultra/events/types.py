"""Event types published by the allocation core."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from ralph_ultra.model.enums import Provider
from ralph_ultra.model.learning import ModelPerformanceRecord
from ralph_ultra.model.plan import ExecutionPlan
from ralph_ultra.model.quota import QuotaSnapshot

if TYPE_CHECKING:
    from ralph_ultra.state.store import CoreState


@dataclass(frozen=True)
class QuotaUpdated:
    quotas: QuotaSnapshot


@dataclass(frozen=True)
class QuotaWarning:
    provider: Provider
    message: str


@dataclass(frozen=True)
class PlanStarted:
    project: str


@dataclass(frozen=True)
class PlanReady:
    plan: ExecutionPlan


@dataclass(frozen=True)
class LearningRecorded:
    record: ModelPerformanceRecord


@dataclass(frozen=True)
class StateSnapshot:
    state: CoreState


RalphEvent = Union[
    QuotaUpdated,
    QuotaWarning,
    PlanStarted,
    PlanReady,
    LearningRecorded,
    StateSnapshot,
]
