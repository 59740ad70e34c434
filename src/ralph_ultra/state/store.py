"""Single current-state snapshot for UI and dashboard consumers."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any, Callable

from ralph_ultra.events.bus import EventBus
from ralph_ultra.events.types import PlanReady, QuotaUpdated, StateSnapshot
from ralph_ultra.model.learning import ModelLearningDB
from ralph_ultra.model.plan import ExecutionPlan
from ralph_ultra.model.quota import QuotaSnapshot, utc_now_iso


class ExecutionStatus(StrEnum):
    IDLE = "idle"
    PLANNING = "planning"
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"
    COMPLETE = "complete"


@dataclass(frozen=True)
class CompletedStory:
    story_id: str
    success: bool
    model: str
    cost: float
    duration: float


@dataclass(frozen=True)
class CoreState:
    quotas: QuotaSnapshot = field(default_factory=dict)
    quotas_last_updated: str | None = None
    current_project: str | None = None
    execution_plan: ExecutionPlan | None = None
    execution_status: ExecutionStatus = ExecutionStatus.IDLE
    current_story_index: int = 0
    current_story_id: str | None = None
    current_model: str | None = None
    completed_stories: tuple[CompletedStory, ...] = ()
    total_cost: float = 0.0
    total_duration: float = 0.0
    learnings: ModelLearningDB = field(default_factory=ModelLearningDB)


StateListener = Callable[[CoreState], None]


class StateStore:
    """Holds the latest ``CoreState``; each update replaces it and publishes a snapshot."""

    def __init__(self, bus: EventBus | None = None) -> None:
        self._bus = bus or EventBus()
        self._state = CoreState()
        self._listeners: list[StateListener] = []

    @property
    def bus(self) -> EventBus:
        return self._bus

    def get_state(self) -> CoreState:
        return self._state

    def update(self, **changes: Any) -> CoreState:
        self._state = replace(self._state, **changes)
        self._notify()
        self._bus.emit(StateSnapshot(self._state))
        return self._state

    def update_quotas(self, quotas: QuotaSnapshot) -> None:
        self.update(quotas=dict(quotas), quotas_last_updated=utc_now_iso())
        self._bus.emit(QuotaUpdated(dict(quotas)))

    def update_execution_plan(self, plan: ExecutionPlan) -> None:
        self.update(execution_plan=plan, current_project=plan.project_name or None)
        self._bus.emit(PlanReady(plan))

    def update_learnings(self, learnings: ModelLearningDB) -> None:
        self.update(learnings=learnings)

    def record_story_completion(
        self, story_id: str, success: bool, model: str, cost: float, duration: float
    ) -> None:
        state = self._state
        self.update(
            completed_stories=state.completed_stories
            + (CompletedStory(story_id, success, model, cost, duration),),
            total_cost=state.total_cost + cost,
            total_duration=state.total_duration + duration,
            current_story_index=state.current_story_index + 1,
        )

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def reset(self) -> None:
        self._state = CoreState()
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._state)
