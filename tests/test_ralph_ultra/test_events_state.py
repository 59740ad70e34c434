"""Tests for the event bus and state store."""
from __future__ import annotations

from ralph_ultra.events import (
    EventBus,
    LearningRecorded,
    PlanReady,
    PlanStarted,
    QuotaUpdated,
    StateSnapshot,
)
from ralph_ultra.model import (
    Backlog,
    ModelLearningDB,
    Provider,
    ProviderQuota,
    QuotaStatus,
    QuotaType,
    Task,
)
from ralph_ultra.planner import ExecutionPlanner
from ralph_ultra.state import CoreState, ExecutionStatus, StateStore


# ---------------------------------------------------------------------------
# EventBus
# ---------------------------------------------------------------------------


class TestEventBus:
    def test_typed_subscription(self) -> None:
        bus = EventBus()
        got: list = []
        bus.subscribe(PlanStarted, got.append)
        bus.emit(PlanStarted("p"))
        bus.emit(QuotaUpdated({}))
        assert got == [PlanStarted("p")]

    def test_global_after_typed(self) -> None:
        bus = EventBus()
        order: list[str] = []
        bus.on_all(lambda e: order.append("all"))
        bus.subscribe(PlanStarted, lambda e: order.append("typed"))
        bus.emit(PlanStarted("p"))
        assert order == ["typed", "all"]

    def test_unsubscribe_callable(self) -> None:
        bus = EventBus()
        got: list = []
        off = bus.subscribe(PlanStarted, got.append)
        off_all = bus.on_all(got.append)
        off()
        off_all()
        bus.emit(PlanStarted("p"))
        assert got == []

    def test_unsubscribe_method(self) -> None:
        bus = EventBus()
        got: list = []
        bus.subscribe(PlanStarted, got.append)
        bus.unsubscribe(PlanStarted, got.append)
        bus.unsubscribe(LearningRecorded, got.append)  # not registered: no-op
        bus.emit(PlanStarted("p"))
        assert got == []

    def test_listener_may_unsubscribe_during_emit(self) -> None:
        bus = EventBus()
        calls: list[str] = []
        offs: list = []

        def once(event) -> None:
            calls.append("once")
            offs[0]()

        offs.append(bus.subscribe(PlanStarted, once))
        bus.subscribe(PlanStarted, lambda e: calls.append("second"))
        bus.emit(PlanStarted("p"))
        bus.emit(PlanStarted("p"))
        assert calls == ["once", "second", "second"]

    def test_clear(self) -> None:
        bus = EventBus()
        got: list = []
        bus.on_all(got.append)
        bus.clear()
        bus.emit(PlanStarted("p"))
        assert got == []


# ---------------------------------------------------------------------------
# StateStore
# ---------------------------------------------------------------------------


def _quota(provider: Provider) -> ProviderQuota:
    return ProviderQuota(provider, QuotaStatus.AVAILABLE, QuotaType.LOCAL)


class TestStateStore:
    def test_initial_state(self) -> None:
        state = StateStore().get_state()
        assert state == CoreState(learnings=state.learnings)
        assert state.execution_status == ExecutionStatus.IDLE

    def test_update_replaces_and_notifies(self) -> None:
        store = StateStore()
        seen: list[CoreState] = []
        snapshots: list[StateSnapshot] = []
        store.subscribe(seen.append)
        store.bus.subscribe(StateSnapshot, snapshots.append)
        before = store.get_state()
        after = store.update(execution_status=ExecutionStatus.RUNNING)
        assert before.execution_status == ExecutionStatus.IDLE
        assert after.execution_status == ExecutionStatus.RUNNING
        assert seen == [after]
        assert snapshots[0].state is after

    def test_update_quotas(self) -> None:
        store = StateStore()
        updates: list[QuotaUpdated] = []
        store.bus.subscribe(QuotaUpdated, updates.append)
        store.update_quotas({Provider.LOCAL: _quota(Provider.LOCAL)})
        assert Provider.LOCAL in store.get_state().quotas
        assert store.get_state().quotas_last_updated
        assert len(updates) == 1

    def test_update_execution_plan(self) -> None:
        store = StateStore()
        ready: list[PlanReady] = []
        store.bus.subscribe(PlanReady, ready.append)
        plan = ExecutionPlanner().generate_plan(
            Backlog("shop", (Task(id="US-1", title="docs"),))
        )
        store.update_execution_plan(plan)
        assert store.get_state().execution_plan is plan
        assert store.get_state().current_project == "shop"
        assert ready[0].plan is plan

    def test_record_story_completion(self) -> None:
        store = StateStore()
        store.record_story_completion("US-1", True, "m", 0.5, 10)
        store.record_story_completion("US-2", False, "m", 0.25, 5)
        state = store.get_state()
        assert [s.story_id for s in state.completed_stories] == ["US-1", "US-2"]
        assert state.total_cost == 0.75
        assert state.total_duration == 15
        assert state.current_story_index == 2

    def test_update_learnings(self) -> None:
        store = StateStore()
        db = ModelLearningDB(version="2.0")
        store.update_learnings(db)
        assert store.get_state().learnings is db

    def test_subscribe_returns_unsubscribe(self) -> None:
        store = StateStore()
        seen: list = []
        off = store.subscribe(seen.append)
        off()
        store.update(current_model="x")
        assert seen == []

    def test_reset(self) -> None:
        store = StateStore()
        store.update(current_model="x")
        store.reset()
        assert store.get_state().current_model is None

    def test_shared_bus(self) -> None:
        bus = EventBus()
        store = StateStore(bus)
        assert store.bus is bus
